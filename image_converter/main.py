"""主程序入口"""

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from image_converter.config.config import ConfigManager, DEFAULT_CONFIG_PATH
from image_converter.core.archive import archive_batch
from image_converter.core.converter import BatchConverter
from image_converter.core.naming import suggest_name
from image_converter.exceptions.custom_exceptions import (
    ArchiveError,
    ImageConverterError,
    RemoteNameError
)
from image_converter.models.data_models import BatchState
from image_converter.utils.file import FileManager
from image_converter.utils.image import ImageProcessor
from image_converter.utils.logging import Logger, logger

def init_app(config_path: Path, log_file: Optional[Path] = None) -> None:
    """初始化应用（命令行的日志文件优先于配置文件）"""
    config_manager = ConfigManager()
    config_manager.init_config(config_path)
    config = config_manager.config
    log_path = log_file or (Path(config.log_file) if config.log_file else None)
    Logger().configure(config.log_level, log_path)
    print("应用初始化完成")

def apply_ai_names(state: BatchState, config_manager: ConfigManager) -> None:
    """用 AI 生成的名称替换输出文件名，失败时保留原名"""
    naming = config_manager.config.naming
    output_format = config_manager.config.conversion.output_format

    for result in state.successes:
        try:
            name = suggest_name(
                result.encoded_bytes,
                output_format.mime_type,
                model=naming.model,
                api_key_env=naming.api_key_env
            )
        except RemoteNameError as e:
            logger.warning(f"AI 命名失败，保留原名 {result.output_file_name}: {str(e)}")
            continue
        result.output_file_name = ImageProcessor.derive_output_name(
            result.source_file_name, output_format, base_name=name
        )

def resolve_name_collisions(state: BatchState) -> None:
    """为重名的输出文件追加序号（a.jpg, a-1.jpg, ...），按大小写不敏感比较"""
    taken = set()
    for result in state.successes:
        name = result.output_file_name
        dot = name.rfind('.')
        stem, suffix = (name[:dot], name[dot:]) if dot > 0 else (name, '')
        index = 0
        while name.lower() in taken:
            index += 1
            name = f"{stem}-{index}{suffix}"
        if name != result.output_file_name:
            logger.warning(f"输出文件重名 {result.output_file_name}，改名为 {name}")
            result.output_file_name = name
        taken.add(name.lower())

def write_outputs(state: BatchState, output_dir: Path) -> List[Path]:
    """把成功的结果逐个写入输出目录"""
    file_manager = FileManager()
    written = []
    for result in state.successes:
        output_path = output_dir / result.output_file_name
        file_manager.write_bytes(output_path, result.encoded_bytes)
        written.append(output_path)
    return written

def process_directory(
    input_dir: Path,
    output_dir: Path,
    config_manager: ConfigManager
) -> Optional[BatchState]:
    """批量处理目录"""
    config = config_manager.config
    file_manager = FileManager()

    input_files = file_manager.list_images(input_dir)
    if not input_files:
        print("没有找到可处理的图片!")
        return None

    print(f"\n待处理的文件 ({len(input_files)}):")
    for file in input_files:
        print(f"- {file.name}")

    print("\n转换设置:")
    print(f"- 输出格式: {config.conversion.output_format.name}")
    print(f"- 质量: {config.conversion.quality}")
    if config.resize.enabled:
        print(f"- 缩放: {config.resize.mode.value} / {config.resize.method.value}")
    print(f"- 保留元数据: {'是' if config.conversion.preserve_metadata else '否'}")

    jobs = [file_manager.create_job(path) for path in input_files]
    converter = BatchConverter(config.resize, config.conversion)

    start_time = time.time()
    pbar = tqdm(total=len(jobs), desc="转换进度", unit="张")

    def on_progress(completed: int, total: int) -> None:
        pbar.update(completed - pbar.n)

    try:
        state = converter.run_batch(jobs, progress_callback=on_progress)
    finally:
        pbar.close()

    if config.naming.enabled:
        print("\n正在生成 AI 文件名...")
        apply_ai_names(state, config_manager)

    resolve_name_collisions(state)

    file_manager.ensure_dir(output_dir)
    written = write_outputs(state, output_dir)

    if config.archive.enabled:
        try:
            archive_path = output_dir / config.archive.file_name
            file_manager.write_bytes(archive_path, archive_batch(state))
            print(f"压缩包: {archive_path}")
        except ArchiveError as e:
            print(f"压缩包创建失败: {str(e)}")

    # 显示处理结果
    print(f"\n批处理完成!")
    print(f"- 总文件数: {state.total}")
    print(f"- 成功转换: {len(written)}")
    print(f"- 转换失败: {len(state.failures)}")
    for failure in state.failures:
        print(f"  - {failure.source_file_name}: {failure.error_message}")
    print(f"- 处理时间: {(time.time() - start_time):.1f} 秒")
    print(f"输出目录: {output_dir}")

    return state

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="批量转换、缩放和压缩图片")
    parser.add_argument('-c', '--config', type=Path, default=DEFAULT_CONFIG_PATH,
                        help="配置文件路径")
    parser.add_argument('-i', '--input', type=Path, default=None,
                        help="输入目录（覆盖配置文件）")
    parser.add_argument('--log-file', type=Path, default=None,
                        help="日志文件路径")
    return parser.parse_args(argv)

def main(argv: Optional[List[str]] = None) -> int:
    """主函数"""
    args = parse_args(argv)
    try:
        # 初始化应用
        print(f"配置文件路径: {args.config}")
        init_app(args.config, args.log_file)

        config_manager = ConfigManager()

        input_dir = args.input or Path(config_manager.config.directories.input)
        if not input_dir.exists():
            print(f"错误: 目录不存在: {input_dir}")
            return 1

        output_dir = Path(str(input_dir) + config_manager.config.directories.output_suffix)

        state = process_directory(input_dir, output_dir, config_manager)
        if state is None:
            return 1
        return 0 if not state.failures else 1

    except ImageConverterError as e:
        print(f"程序执行出错: {str(e)}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
