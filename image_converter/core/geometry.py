"""几何计算模块

根据源图尺寸和缩放策略计算画布尺寸，以及源矩形到目标矩形的映射。
纯函数，不分配像素缓冲区。
"""

import math

from ..models.data_models import (
    Geometry,
    Rect,
    ResizeMethod,
    ResizeMode,
    ResizePolicy
)

def round_half_up(value: float) -> int:
    """四舍五入（0.5 向上取整，而非银行家舍入）"""
    return int(math.floor(value + 0.5))

def clamp_dimension(value: int) -> int:
    """退化尺寸（<=0）钳制为 1"""
    return value if value > 0 else 1

def _stretch(sw: int, sh: int, cw: int, ch: int) -> Geometry:
    cw, ch = clamp_dimension(cw), clamp_dimension(ch)
    return Geometry(
        canvas_width=cw,
        canvas_height=ch,
        source_rect=Rect(0, 0, sw, sh),
        dest_rect=Rect(0, 0, cw, ch),
        stretch_fill=True
    )

def _crop(sw: int, sh: int, cw: int, ch: int) -> Geometry:
    source_ratio = sw / sh
    canvas_ratio = cw / ch

    if source_ratio > canvas_ratio:
        # 源图更宽，裁掉左右
        crop_w = sh * canvas_ratio
        source = Rect((sw - crop_w) / 2, 0, crop_w, sh)
    else:
        # 源图更高，裁掉上下
        crop_h = sw / canvas_ratio
        source = Rect(0, (sh - crop_h) / 2, sw, crop_h)

    return Geometry(
        canvas_width=cw,
        canvas_height=ch,
        source_rect=source,
        dest_rect=Rect(0, 0, cw, ch),
        stretch_fill=False
    )

def _fit(sw: int, sh: int, cw: int, ch: int) -> Geometry:
    ratio = min(cw / sw, ch / sh)
    draw_w = sw * ratio
    draw_h = sh * ratio
    return Geometry(
        canvas_width=cw,
        canvas_height=ch,
        source_rect=Rect(0, 0, sw, sh),
        dest_rect=Rect((cw - draw_w) / 2, (ch - draw_h) / 2, draw_w, draw_h),
        stretch_fill=False
    )

def resolve_geometry(sw: int, sh: int, policy: ResizePolicy) -> Geometry:
    """计算目标画布及合成描述

    Args:
        sw: 源图宽度
        sh: 源图高度
        policy: 缩放策略

    Returns:
        画布尺寸与源/目标矩形
    """
    if sw <= 0 or sh <= 0:
        raise ValueError(f"源图尺寸无效: {sw}x{sh}")

    if not policy.enabled:
        return _stretch(sw, sh, sw, sh)

    if policy.mode is ResizeMode.PERCENTAGE:
        scale = policy.percentage / 100
        return _stretch(sw, sh, round_half_up(sw * scale), round_half_up(sh * scale))

    method = policy.method
    if method is ResizeMethod.FIT_WIDTH:
        return _stretch(sw, sh, policy.width, round_half_up(policy.width * sh / sw))
    if method is ResizeMethod.FIT_HEIGHT:
        return _stretch(sw, sh, round_half_up(policy.height * sw / sh), policy.height)

    cw = clamp_dimension(policy.width)
    ch = clamp_dimension(policy.height)
    if method is ResizeMethod.CROP:
        return _crop(sw, sh, cw, ch)
    if method is ResizeMethod.FIT:
        return _fit(sw, sh, cw, ch)
    return _stretch(sw, sh, cw, ch)
