"""EXIF 元数据保留模块"""

import io
from typing import Optional, Tuple
import piexif

from ..exceptions.custom_exceptions import MetadataError
from ..utils.logging import logger

JPEG_SOI = b'\xff\xd8'

def _has_tags(exif_dict: dict) -> bool:
    return any(exif_dict.get(ifd) for ifd in ('0th', 'Exif', 'GPS', 'Interop', '1st'))

def extract_exif(
    original: bytes,
    new_size: Optional[Tuple[int, int]] = None
) -> bytes:
    """从原始 JPEG 中提取 EXIF，并调整为适用于新图片的形式

    方向重置为 1（解码时像素已按方向旋转），像素尺寸改为新尺寸，
    去掉已过期的缩略图。

    Args:
        original: 原始 JPEG 字节
        new_size: 新图片尺寸 (宽, 高)

    Returns:
        可直接插入的 EXIF 段
    """
    if not original.startswith(JPEG_SOI):
        raise MetadataError("原始数据不是 JPEG")
    try:
        exif_dict = piexif.load(original)
    except Exception as e:
        raise MetadataError(f"解析 EXIF 失败: {str(e)}")

    if not _has_tags(exif_dict):
        raise MetadataError("原图不含 EXIF 元数据")

    zeroth = exif_dict.setdefault('0th', {})
    if piexif.ImageIFD.Orientation in zeroth:
        zeroth[piexif.ImageIFD.Orientation] = 1

    if new_size is not None:
        exif_ifd = exif_dict.setdefault('Exif', {})
        if piexif.ExifIFD.PixelXDimension in exif_ifd:
            exif_ifd[piexif.ExifIFD.PixelXDimension] = new_size[0]
        if piexif.ExifIFD.PixelYDimension in exif_ifd:
            exif_ifd[piexif.ExifIFD.PixelYDimension] = new_size[1]

    exif_dict['thumbnail'] = None
    exif_dict['1st'] = {}

    try:
        return piexif.dump(exif_dict)
    except Exception as e:
        raise MetadataError(f"序列化 EXIF 失败: {str(e)}")

def insert_exif(exif_bytes: bytes, encoded: bytes) -> bytes:
    """把 EXIF 段写入新编码的 JPEG"""
    if not encoded.startswith(JPEG_SOI):
        raise MetadataError("目标数据不是 JPEG")
    output = io.BytesIO()
    try:
        piexif.insert(exif_bytes, encoded, output)
    except Exception as e:
        raise MetadataError(f"写入 EXIF 失败: {str(e)}")
    return output.getvalue()

def splice_metadata(
    original: bytes,
    encoded: bytes,
    enabled: bool,
    new_size: Optional[Tuple[int, int]] = None,
    source_name: str = ''
) -> bytes:
    """尽力把原图元数据带到新图片中

    失败不是致命错误：记录警告并返回未修改的编码结果。

    Args:
        original: 原始字节
        encoded: 新编码的字节
        enabled: 源和目标均为 JPEG 且要求保留元数据
        new_size: 新图片尺寸
        source_name: 源文件名（仅用于日志）

    Returns:
        最终字节
    """
    if not enabled:
        return encoded
    try:
        exif_bytes = extract_exif(original, new_size)
        return insert_exif(exif_bytes, encoded)
    except MetadataError as e:
        logger.warning(f"无法保留元数据 {source_name}: {str(e)}")
        return encoded
