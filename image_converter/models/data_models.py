"""数据模型定义"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple
from PIL import Image, ImageColor

from ..exceptions.custom_exceptions import ConfigError

class OutputFormat(Enum):
    """输出格式（值为MIME类型）"""
    JPEG = 'image/jpeg'
    PNG = 'image/png'
    WEBP = 'image/webp'
    GIF = 'image/gif'
    AVIF = 'image/avif'

    @property
    def mime_type(self) -> str:
        return self.value

    @property
    def pil_format(self) -> str:
        """Pillow 使用的格式名"""
        return self.name

    @property
    def extension(self) -> str:
        """规范扩展名（不含点）"""
        if self is OutputFormat.JPEG:
            return 'jpg'
        return self.name.lower()

    @property
    def is_lossy(self) -> bool:
        return self in (OutputFormat.JPEG, OutputFormat.WEBP, OutputFormat.AVIF)

    @classmethod
    def parse(cls, value: str) -> 'OutputFormat':
        """从格式名、扩展名或MIME类型解析

        Args:
            value: 例如 'JPEG'、'jpg'、'image/webp'

        Returns:
            对应的输出格式
        """
        text = str(value).strip().lower()
        if text in ('jpg', 'jpeg', '.jpg', '.jpeg'):
            return cls.JPEG
        for fmt in cls:
            if text in (fmt.name.lower(), fmt.value, f'.{fmt.extension}'):
                return fmt
        raise ConfigError(f"不支持的输出格式: {value}")

class ResizeMode(Enum):
    """缩放模式"""
    PIXELS = 'pixels'
    PERCENTAGE = 'percentage'

class ResizeMethod(Enum):
    """像素模式下的缩放方式"""
    CROP = 'crop'
    STRETCH = 'stretch'
    FIT = 'fit'
    FIT_WIDTH = 'fit_width'
    FIT_HEIGHT = 'fit_height'

    @classmethod
    def parse(cls, value: str) -> 'ResizeMethod':
        text = str(value).strip().lower()
        aliases = {'resize_width': cls.FIT_WIDTH, 'resize_height': cls.FIT_HEIGHT}
        if text in aliases:
            return aliases[text]
        try:
            return cls(text)
        except ValueError:
            raise ConfigError(f"不支持的缩放方式: {value}")

class JobStatus(Enum):
    """任务状态"""
    PENDING = 'pending'
    RUNNING = 'running'
    DONE = 'done'
    FAILED = 'failed'

@dataclass(frozen=True)
class ResizePolicy:
    """缩放策略"""
    enabled: bool = False
    mode: ResizeMode = ResizeMode.PIXELS
    width: int = 1024
    height: int = 1024
    method: ResizeMethod = ResizeMethod.CROP
    percentage: int = 100
    background_color: str = '#FFFFFF'

    def __post_init__(self):
        for name in ('width', 'height', 'percentage'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(f"{name} 必须为正整数: {value!r}")
        # 提前校验颜色，避免到合成阶段才失败
        _ = self.background_rgb

    @property
    def background_rgb(self) -> Tuple[int, int, int]:
        """背景色的RGB值"""
        try:
            rgb = ImageColor.getrgb(self.background_color)
        except ValueError as e:
            raise ConfigError(f"无效的背景颜色: {str(e)}")
        return rgb[:3]

@dataclass(frozen=True)
class EncodeSettings:
    """编码设置"""
    output_format: OutputFormat = OutputFormat.JPEG
    quality: int = 80
    preserve_metadata: bool = True

    def __post_init__(self):
        if isinstance(self.quality, bool) or not isinstance(self.quality, int) \
                or not 1 <= self.quality <= 100:
            raise ConfigError(f"quality 必须在 1-100 之间: {self.quality!r}")

@dataclass(frozen=True)
class Rect:
    """矩形（允许小数坐标）"""
    x: float
    y: float
    width: float
    height: float

    @property
    def box(self) -> Tuple[float, float, float, float]:
        """Pillow 使用的 (left, top, right, bottom)"""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

@dataclass(frozen=True)
class Geometry:
    """画布尺寸与合成描述"""
    canvas_width: int
    canvas_height: int
    source_rect: Rect
    dest_rect: Rect
    stretch_fill: bool

@dataclass(frozen=True)
class ImageBuffer:
    """RGBA 像素缓冲区"""
    width: int
    height: int
    pixels: Image.Image

    @classmethod
    def from_image(cls, image: Image.Image) -> 'ImageBuffer':
        if image.mode != 'RGBA':
            image = image.convert('RGBA')
        return cls(width=image.width, height=image.height, pixels=image)

@dataclass
class ConversionJob:
    """单个转换任务

    data 为空时由 source_path 在任务执行时读取。
    """
    name: str
    data: Optional[bytes] = None
    mime_type: Optional[str] = None
    source_path: Optional[Path] = None

@dataclass
class ConversionResult:
    """转换结果"""
    source_file_name: str
    encoded_bytes: Optional[bytes] = None
    output_file_name: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error_message is None and self.encoded_bytes is not None

@dataclass
class BatchState:
    """批处理状态"""
    jobs: List[ConversionJob]
    statuses: List[JobStatus] = field(default_factory=list)
    results: List[Optional[ConversionResult]] = field(default_factory=list)

    def __post_init__(self):
        if not self.statuses:
            self.statuses = [JobStatus.PENDING] * len(self.jobs)
        if not self.results:
            self.results = [None] * len(self.jobs)

    @property
    def total(self) -> int:
        return len(self.jobs)

    @property
    def completed_count(self) -> int:
        return sum(1 for s in self.statuses if s in (JobStatus.DONE, JobStatus.FAILED))

    @property
    def progress(self) -> float:
        """完成比例（空批次视为已完成）"""
        if not self.jobs:
            return 1.0
        return self.completed_count / self.total

    @property
    def successes(self) -> List[ConversionResult]:
        return [r for r in self.results if r is not None and r.success]

    @property
    def failures(self) -> List[ConversionResult]:
        return [r for r in self.results if r is not None and not r.success]
