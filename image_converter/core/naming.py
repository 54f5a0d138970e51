"""AI 文件命名模块（可选）

调用 Gemini 模型为图片生成简短的英文文件名。需要安装 google-genai：
pip install image-converter[ai]
"""

import os
import re
from typing import Any, Optional

from ..exceptions.custom_exceptions import RemoteNameError
from ..utils.logging import logger

DEFAULT_MODEL = 'gemini-2.5-flash'
DEFAULT_API_KEY_ENV = 'API_KEY'

NAMING_PROMPT = (
    "Describe this image with a short, descriptive, file-safe name in English. "
    "Use 3-5 words separated by hyphens. For example: 'a-cute-cat-sleeping'. "
    "Do not include file extensions, quotes, or any other explanatory text. "
    "Only provide the name string."
)

def sanitize_name(text: str) -> str:
    """把模型回复整理成小写、连字符分隔的 ASCII 名称"""
    name = text.strip().lower()
    name = re.sub(r"['\"`]", '', name)
    name = re.sub(r'[^a-z0-9\s-]', '', name)
    name = re.sub(r'\s+', '-', name)
    name = re.sub(r'-+', '-', name)
    return name.strip('-')

def _create_client(api_key: str) -> Any:
    try:
        from google import genai
    except ImportError as exc:
        raise RemoteNameError(
            "未安装 google-genai，请运行: pip install image-converter[ai]"
        ) from exc
    return genai.Client(api_key=api_key)

def suggest_name(
    image_bytes: bytes,
    mime_type: str,
    model: str = DEFAULT_MODEL,
    api_key: Optional[str] = None,
    api_key_env: str = DEFAULT_API_KEY_ENV,
    client: Any = None
) -> str:
    """为图片生成文件名（不含扩展名）

    Args:
        image_bytes: 图片字节
        mime_type: 图片MIME类型
        model: 模型名
        api_key: API密钥，默认从环境变量读取
        api_key_env: 存放密钥的环境变量名
        client: 已创建的客户端（测试时注入）

    Returns:
        连字符分隔的小写名称
    """
    if client is None:
        api_key = api_key or os.environ.get(api_key_env)
        if not api_key:
            raise RemoteNameError(f"未设置环境变量 {api_key_env}")
        client = _create_client(api_key)

    contents = [
        {'inline_data': {'data': image_bytes, 'mime_type': mime_type}},
        NAMING_PROMPT
    ]

    try:
        response = client.models.generate_content(model=model, contents=contents)
        text = response.text or ''
    except Exception as e:
        raise RemoteNameError(f"AI 命名请求失败: {str(e)}")

    name = sanitize_name(text)
    if not name:
        raise RemoteNameError("AI 未能生成有效的文件名")

    logger.debug(f"AI 命名结果: {name}")
    return name
