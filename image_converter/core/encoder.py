"""图片编码模块"""

import io
from typing import Callable, Dict, Any
from PIL import Image, features

from ..exceptions.custom_exceptions import EncodeError
from ..models.data_models import ImageBuffer, OutputFormat

# GIF 调色板量化步骤，可替换
Quantizer = Callable[[Image.Image], Image.Image]

def adaptive_palette(image: Image.Image) -> Image.Image:
    """默认的 GIF 量化：自适应 256 色调色板，保留完全透明像素"""
    alpha = image.getchannel('A')
    quantized = image.convert('RGB').quantize(colors=255, method=Image.Quantize.MEDIANCUT)
    transparent = alpha.point(lambda a: 255 if a == 0 else 0)
    if transparent.getbbox():
        quantized.paste(255, mask=transparent)
        quantized.info['transparency'] = 255
    return quantized

def map_quality(output_format: OutputFormat, quality: int) -> int:
    """把 1-100 的质量映射到编解码器自身的质量刻度"""
    quality = max(1, min(100, int(quality)))
    # Pillow 的 JPEG/WEBP/AVIF 都使用 0-100 刻度
    return quality

def avif_supported() -> bool:
    """当前 Pillow 是否支持 AVIF"""
    return bool(features.check('avif'))

def _save_kwargs(output_format: OutputFormat, quality: int) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {}
    if output_format.is_lossy:
        kwargs['quality'] = map_quality(output_format, quality)
    if output_format in (OutputFormat.JPEG, OutputFormat.PNG):
        kwargs['optimize'] = True
    return kwargs

def encode(
    buffer: ImageBuffer,
    output_format: OutputFormat,
    quality: int = 80,
    quantizer: Quantizer = adaptive_palette
) -> bytes:
    """把缓冲区编码为目标格式的字节流

    Args:
        buffer: RGBA 缓冲区
        output_format: 输出格式
        quality: 质量（仅有损格式使用）
        quantizer: GIF 量化步骤

    Returns:
        编码后的字节
    """
    if buffer.width <= 0 or buffer.height <= 0:
        raise EncodeError(f"图片尺寸无效: {buffer.width}x{buffer.height}")

    image = buffer.pixels
    if image.mode not in ('RGBA', 'RGB'):
        raise EncodeError(f"不支持的像素格式: {image.mode}")

    if output_format is OutputFormat.AVIF and not avif_supported():
        raise EncodeError("当前 Pillow 不支持 AVIF 编码")

    try:
        if output_format is OutputFormat.JPEG:
            # JPEG 不支持透明通道
            image = image.convert('RGB')
        elif output_format is OutputFormat.GIF:
            image = quantizer(image.convert('RGBA'))

        img_byte_arr = io.BytesIO()
        image.save(
            img_byte_arr,
            format=output_format.pil_format,
            **_save_kwargs(output_format, quality)
        )
        return img_byte_arr.getvalue()
    except EncodeError:
        raise
    except Exception as e:
        raise EncodeError(f"编码 {output_format.name} 失败: {str(e)}")
