"""ZIP 打包模块"""

import io
import zipfile
from typing import Dict, List

from ..exceptions.custom_exceptions import ArchiveError
from ..models.data_models import BatchState, ConversionResult
from ..utils.logging import logger

DEFAULT_ARCHIVE_NAME = 'converted_images.zip'

def create_archive(results: List[ConversionResult]) -> bytes:
    """把成功的输出打包成一个 ZIP

    条目按输出文件名命名并保持顺序；重名时后者覆盖前者。
    空列表得到空压缩包。
    """
    entries: Dict[str, bytes] = {}
    for result in results:
        if not result.success:
            continue
        if result.output_file_name in entries:
            logger.warning(f"压缩包内文件重名，将被覆盖: {result.output_file_name}")
            # 删除后重新插入，使覆盖者排在后面
            del entries[result.output_file_name]
        entries[result.output_file_name] = result.encoded_bytes

    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, 'w', compression=zipfile.ZIP_DEFLATED) as zf:
            for name, data in entries.items():
                zf.writestr(name, data)
    except Exception as e:
        raise ArchiveError(f"创建压缩包失败: {str(e)}")
    return buffer.getvalue()

def archive_batch(state: BatchState) -> bytes:
    """打包批处理中所有成功的结果"""
    successes = state.successes
    if not successes:
        raise ArchiveError("没有可打包的转换结果")
    return create_archive(successes)
