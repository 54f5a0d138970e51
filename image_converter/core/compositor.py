"""图片合成模块"""

import math
from typing import Tuple
from PIL import Image

from ..models.data_models import Geometry, ImageBuffer, Rect
from .geometry import clamp_dimension, round_half_up

# 默认重采样滤镜，禁止使用 NEAREST
DEFAULT_RESAMPLE = Image.Resampling.LANCZOS

def _dest_placement(rect: Rect, canvas_size: Tuple[int, int]) -> Tuple[int, int, int, int]:
    """将目标矩形对齐到整数像素，并保证不超出画布"""
    cw, ch = canvas_size
    w = min(clamp_dimension(round_half_up(rect.width)), cw)
    h = min(clamp_dimension(round_half_up(rect.height)), ch)
    x = min(max(round_half_up(rect.x), 0), cw - w)
    y = min(max(round_half_up(rect.y), 0), ch - h)
    return x, y, w, h

def _resample_region(
    source: Image.Image,
    rect: Rect,
    size: Tuple[int, int],
    resample: int
) -> Image.Image:
    """把源矩形内的像素重采样到指定尺寸

    先裁出覆盖源矩形的最小整数区域，保证矩形外的像素不参与滤波。
    """
    left = max(int(math.floor(rect.x)), 0)
    top = max(int(math.floor(rect.y)), 0)
    right = min(int(math.ceil(rect.x + rect.width)), source.width)
    bottom = min(int(math.ceil(rect.y + rect.height)), source.height)

    region = source.crop((left, top, right, bottom))
    box = (
        rect.x - left,
        rect.y - top,
        rect.x + rect.width - left,
        rect.y + rect.height - top
    )
    if region.size == size and box == (0, 0) + region.size:
        return region
    return region.resize(size, resample, box=box)

def composite(
    source: ImageBuffer,
    geometry: Geometry,
    background: Tuple[int, int, int],
    resample: int = DEFAULT_RESAMPLE
) -> ImageBuffer:
    """按照合成描述把源图绘制到新画布上

    Args:
        source: 源图缓冲区（只读）
        geometry: 几何计算结果
        background: 背景色 RGB
        resample: 重采样滤镜

    Returns:
        新的画布缓冲区
    """
    if resample == Image.Resampling.NEAREST:
        raise ValueError("不支持最近邻重采样")

    canvas_size = (geometry.canvas_width, geometry.canvas_height)
    canvas = Image.new('RGBA', canvas_size, tuple(background[:3]) + (255,))

    if geometry.stretch_fill:
        placement = (0, 0) + canvas_size
    else:
        placement = _dest_placement(geometry.dest_rect, canvas_size)
    x, y, w, h = placement

    drawn = _resample_region(source.pixels, geometry.source_rect, (w, h), resample)
    if drawn.mode != 'RGBA':
        drawn = drawn.convert('RGBA')
    canvas.alpha_composite(drawn, dest=(x, y))

    return ImageBuffer.from_image(canvas)
