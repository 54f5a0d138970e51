"""批量转换模块"""

from typing import Callable, Iterator, List, Optional

from ..exceptions.custom_exceptions import ImageConverterError
from ..models.data_models import (
    BatchState,
    ConversionJob,
    ConversionResult,
    EncodeSettings,
    JobStatus,
    OutputFormat,
    ResizePolicy
)
from ..utils.file import FileManager
from ..utils.image import ImageProcessor
from ..utils.logging import logger
from .compositor import composite
from .encoder import encode
from .geometry import resolve_geometry
from .metadata import splice_metadata

ProgressCallback = Callable[[int, int], None]

def convert_job(
    job: ConversionJob,
    policy: ResizePolicy,
    settings: EncodeSettings
) -> ConversionResult:
    """执行单个任务：读取 → 解码 → 几何计算 → 合成 → 编码 → 元数据

    读取/解码/编码失败记录在结果中，不向外抛出。
    """
    try:
        data = FileManager.load_job_data(job)
        source, detected_format = ImageProcessor.decode(data, job.mime_type)
        geometry = resolve_geometry(source.width, source.height, policy)
        canvas = composite(source, geometry, policy.background_rgb)
        # 源缓冲区此后不再使用
        del source

        encoded = encode(canvas, settings.output_format, settings.quality)

        preserve = (
            settings.preserve_metadata
            and settings.output_format is OutputFormat.JPEG
            and ImageProcessor.is_jpeg_source(job.mime_type, detected_format)
        )
        encoded = splice_metadata(
            data,
            encoded,
            preserve,
            new_size=(canvas.width, canvas.height),
            source_name=job.name
        )
    except ImageConverterError as e:
        logger.warning(f"转换失败 {job.name}: {str(e)}")
        return ConversionResult(source_file_name=job.name, error_message=str(e))

    return ConversionResult(
        source_file_name=job.name,
        encoded_bytes=encoded,
        output_file_name=ImageProcessor.derive_output_name(job.name, settings.output_format),
        width=canvas.width,
        height=canvas.height
    )

class BatchConverter:
    """批量转换器

    任务严格按输入顺序逐个处理，同一时刻只保留一个任务的缓冲区。
    """

    def __init__(self, policy: ResizePolicy, settings: EncodeSettings):
        """初始化批量转换器"""
        self.policy = policy
        self.settings = settings

    def iter_batch(self, jobs: List[ConversionJob]) -> Iterator[BatchState]:
        """逐个处理任务，每完成一个任务产出一次批处理状态

        调用方停止迭代即取消后续任务；正在执行的任务总会完成。
        """
        state = BatchState(jobs=list(jobs))

        for index, job in enumerate(state.jobs):
            state.statuses[index] = JobStatus.RUNNING
            try:
                result = convert_job(job, self.policy, self.settings)
            except Exception as e:
                logger.exception(f"处理 {job.name} 时发生意外错误")
                result = ConversionResult(source_file_name=job.name, error_message=str(e))

            state.results[index] = result
            state.statuses[index] = JobStatus.DONE if result.success else JobStatus.FAILED
            yield state

    def run_batch(
        self,
        jobs: List[ConversionJob],
        progress_callback: Optional[ProgressCallback] = None
    ) -> BatchState:
        """处理全部任务

        Args:
            jobs: 任务列表
            progress_callback: 每个任务完成后以 (已完成数, 总数) 调用

        Returns:
            最终的批处理状态
        """
        state = BatchState(jobs=list(jobs))
        for state in self.iter_batch(jobs):
            if progress_callback:
                progress_callback(state.completed_count, state.total)

        logger.info(
            f"批处理完成: 成功 {len(state.successes)}，失败 {len(state.failures)}"
        )
        return state
