"""图片处理工具"""

import io
import mimetypes
from typing import Optional, Tuple
from PIL import Image, ImageOps

from ..exceptions.custom_exceptions import DecodeError
from ..models.data_models import ImageBuffer, OutputFormat

# AVIF 在部分系统的 mimetypes 表里缺失
mimetypes.add_type('image/avif', '.avif')
mimetypes.add_type('image/webp', '.webp')

class ImageProcessor:
    """图片处理器"""

    @staticmethod
    def decode(data: bytes, mime_type: Optional[str] = None) -> Tuple[ImageBuffer, str]:
        """解码图片字节

        动图只取第一帧；EXIF 方向会直接应用到像素上。

        Args:
            data: 原始字节
            mime_type: 声明的MIME类型

        Returns:
            RGBA 缓冲区和检测到的 Pillow 格式名
        """
        if mime_type and not mime_type.startswith('image/'):
            raise DecodeError(f"声明的类型不是图片: {mime_type}")
        if not data:
            raise DecodeError("文件为空")
        try:
            with Image.open(io.BytesIO(data)) as img:
                detected_format = img.format or ''
                img.load()
                oriented = ImageOps.exif_transpose(img)
                buffer = ImageBuffer.from_image(ImageProcessor.to_8bit(oriented))
        except Exception as e:
            raise DecodeError(f"图片解码失败: {str(e)}")
        return buffer, detected_format

    @staticmethod
    def to_8bit(image: Image.Image) -> Image.Image:
        """把 16 位灰度图（I;16 / I，取值 0-65535）按比例缩放到 8 位"""
        if image.mode.startswith('I;16'):
            image = image.convert('I')
        if image.mode == 'I':
            return image.point(lambda v: v / 256).convert('L')
        return image

    @staticmethod
    def guess_mime_type(file_name: str) -> Optional[str]:
        """根据文件名猜测MIME类型"""
        mime_type, _ = mimetypes.guess_type(file_name)
        return mime_type

    @staticmethod
    def is_jpeg_source(mime_type: Optional[str], detected_format: str) -> bool:
        """判断源文件是否为 JPEG（优先使用声明的类型）"""
        if mime_type:
            return mime_type == OutputFormat.JPEG.mime_type
        return detected_format.upper() in ('JPEG', 'MPO')

    @staticmethod
    def derive_output_name(
        source_name: str,
        output_format: OutputFormat,
        base_name: Optional[str] = None
    ) -> str:
        """生成输出文件名

        Args:
            source_name: 源文件名
            output_format: 输出格式
            base_name: 替换原文件名主干（例如 AI 命名结果）

        Returns:
            带规范扩展名的新文件名
        """
        if base_name:
            stem = base_name
        else:
            # 只替换最后一个扩展名；无扩展名或隐藏文件保留全名
            dot = source_name.rfind('.')
            stem = source_name[:dot] if dot > 0 else source_name
        return f"{stem}.{output_format.extension}"
