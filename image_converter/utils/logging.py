"""日志工具模块"""

import logging
import sys
from pathlib import Path
from typing import Optional

from ..exceptions.custom_exceptions import ConfigError

class Logger:
    """日志管理器"""
    _instance = None
    _logger: Optional[logging.Logger] = None
    
    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            # 在创建实例时初始化日志器
            cls._instance._logger = logging.getLogger("ImageConverter")
            cls._instance._logger.setLevel(logging.INFO)
            
            # 创建格式化器
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            
            # 控制台处理器输出到 stderr，避免和进度条混在一起
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            cls._instance._logger.addHandler(console_handler)
        return cls._instance
    
    @property
    def logger(self) -> logging.Logger:
        """获取日志器"""
        return self._logger
    
    def configure(self, level: str = "INFO", log_path: Optional[Path] = None) -> None:
        """按配置设置日志级别，并可选地追加文件输出

        Args:
            level: 日志级别名，例如 'DEBUG'
            log_path: 日志文件路径
        """
        level_name = str(level).upper()
        if not isinstance(logging.getLevelName(level_name), int):
            raise ConfigError(f"无效的日志级别: {level}")
        self._logger.setLevel(level_name)
        if log_path and not any(
            isinstance(h, logging.FileHandler) and Path(h.baseFilename).resolve() == log_path.resolve()
            for h in self._logger.handlers
        ):
            self.add_file_handler(log_path)

    def add_file_handler(self, log_path: Path) -> None:
        """添加文件处理器
        
        Args:
            log_path: 日志文件路径
        """
        if log_path:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding='utf-8')
            file_handler.setFormatter(self._logger.handlers[0].formatter)
            self._logger.addHandler(file_handler)

# 创建全局日志器实例
logger = Logger().logger
