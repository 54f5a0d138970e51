"""文件处理工具模块"""

from pathlib import Path
from typing import List

from ..exceptions.custom_exceptions import FileOperationError
from ..models.data_models import ConversionJob
from .image import ImageProcessor

SUPPORTED_EXTENSIONS = {
    '.jpg', '.jpeg', '.png', '.webp', '.gif', '.avif', '.bmp', '.tif', '.tiff'
}

class FileManager:
    """文件管理工具类"""

    @staticmethod
    def ensure_dir(dir_path: Path) -> None:
        """确保目录存在"""
        try:
            dir_path.mkdir(parents=True, exist_ok=True)
        except Exception as e:
            raise FileOperationError(f"创建目录失败: {str(e)}")

    @staticmethod
    def list_images(directory: Path, recursive: bool = False) -> List[Path]:
        """列出目录中支持的图片，按文件名排序"""
        try:
            pattern = directory.rglob('*') if recursive else directory.glob('*')
            return sorted(
                p for p in pattern
                if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS
            )
        except Exception as e:
            raise FileOperationError(f"列出文件失败: {str(e)}")

    @staticmethod
    def create_job(file_path: Path) -> ConversionJob:
        """为文件创建转换任务（内容在任务执行时才读取）"""
        return ConversionJob(
            name=file_path.name,
            mime_type=ImageProcessor.guess_mime_type(file_path.name),
            source_path=file_path
        )

    @staticmethod
    def load_job_data(job: ConversionJob) -> bytes:
        """取得任务的原始字节"""
        if job.data is not None:
            return job.data
        if job.source_path is None:
            raise FileOperationError(f"任务没有可读取的数据: {job.name}")
        try:
            return job.source_path.read_bytes()
        except Exception as e:
            raise FileOperationError(f"读取文件失败: {str(e)}")

    @staticmethod
    def write_bytes(file_path: Path, data: bytes) -> None:
        """写入文件（自动创建父目录）"""
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(data)
        except Exception as e:
            raise FileOperationError(f"写入文件失败: {str(e)}")

    @staticmethod
    def get_file_size(file_path: Path) -> float:
        """获取文件大小（MB）"""
        try:
            return file_path.stat().st_size / (1024 * 1024)
        except Exception as e:
            raise FileOperationError(f"获取文件大小失败: {str(e)}")
