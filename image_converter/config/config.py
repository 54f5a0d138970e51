"""配置管理模块"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml

from ..exceptions.custom_exceptions import ConfigError
from ..models.data_models import (
    EncodeSettings,
    OutputFormat,
    ResizeMethod,
    ResizeMode,
    ResizePolicy
)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "settings.yaml"

@dataclass
class DirectoriesConfig:
    """目录配置"""
    input: str
    output_suffix: str = "_converted"

@dataclass
class ArchiveConfig:
    """压缩包配置"""
    enabled: bool = True
    file_name: str = "converted_images.zip"

@dataclass
class NamingConfig:
    """AI命名配置"""
    enabled: bool = False
    model: str = "gemini-2.5-flash"
    api_key_env: str = "API_KEY"

@dataclass
class AppConfig:
    """应用配置"""
    directories: DirectoriesConfig
    resize: ResizePolicy = field(default_factory=ResizePolicy)
    conversion: EncodeSettings = field(default_factory=EncodeSettings)
    archive: ArchiveConfig = field(default_factory=ArchiveConfig)
    naming: NamingConfig = field(default_factory=NamingConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @staticmethod
    def _parse_resize(data: dict) -> ResizePolicy:
        try:
            mode = ResizeMode(str(data.get('mode', 'pixels')).lower())
        except ValueError:
            raise ConfigError(f"不支持的缩放模式: {data.get('mode')}")
        return ResizePolicy(
            enabled=bool(data.get('enabled', False)),
            mode=mode,
            width=data.get('width', 1024),
            height=data.get('height', 1024),
            method=ResizeMethod.parse(data.get('method', 'crop')),
            percentage=data.get('percentage', 100),
            background_color=str(data.get('background_color', '#FFFFFF'))
        )

    @staticmethod
    def _parse_conversion(data: dict) -> EncodeSettings:
        return EncodeSettings(
            output_format=OutputFormat.parse(data.get('format', 'JPEG')),
            quality=data.get('quality', 80),
            preserve_metadata=bool(data.get('preserve_metadata', True))
        )

    @classmethod
    def from_dict(cls, config_data: dict) -> 'AppConfig':
        """从字典创建配置"""
        try:
            directories_config = DirectoriesConfig(
                input=config_data['directories']['input'],
                output_suffix=config_data['directories'].get('output_suffix', '_converted')
            )

            archive_data = config_data.get('archive') or {}
            archive_config = ArchiveConfig(
                enabled=bool(archive_data.get('enabled', True)),
                file_name=archive_data.get('file_name', 'converted_images.zip')
            )

            naming_data = config_data.get('naming') or {}
            naming_config = NamingConfig(
                enabled=bool(naming_data.get('enabled', False)),
                model=naming_data.get('model', 'gemini-2.5-flash'),
                api_key_env=naming_data.get('api_key_env', 'API_KEY')
            )

            return cls(
                directories=directories_config,
                resize=cls._parse_resize(config_data.get('resize') or {}),
                conversion=cls._parse_conversion(config_data.get('conversion') or {}),
                archive=archive_config,
                naming=naming_config,
                log_level=config_data.get('log_level', 'INFO'),
                log_file=config_data.get('log_file')
            )
        except ConfigError:
            raise
        except Exception as e:
            raise ConfigError(f"配置内容无效: {str(e)}")

    @classmethod
    def from_yaml(cls, config_path: Path) -> 'AppConfig':
        """从YAML文件加载配置"""
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f)
        except Exception as e:
            raise ConfigError(f"加载配置文件失败: {str(e)}")
        if not isinstance(config_data, dict):
            raise ConfigError(f"配置文件格式错误: {config_path}")
        return cls.from_dict(config_data)

class ConfigManager:
    """配置管理器"""
    _instance = None
    _config: Optional[AppConfig] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def config(self) -> AppConfig:
        """获取配置"""
        if self._config is None:
            raise ConfigError("配置未初始化")
        return self._config

    def init_config(self, config_path: Path = DEFAULT_CONFIG_PATH) -> None:
        """初始化配置"""
        self._config = AppConfig.from_yaml(config_path)

    def reset(self) -> None:
        """清除已加载的配置"""
        self._config = None
