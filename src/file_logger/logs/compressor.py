"""
归档压缩器

分块读取归档文件并以 gzip 流式压缩到内存。
"""

import gzip
import io
from pathlib import Path

import aiofiles
from loguru import logger

from file_logger.domain.errors import CompressionError
from file_logger.domain.models import CompressedArtifact

COMPRESSED_SUFFIX = ".gz"
CHUNK_SIZE = 64 * 1024


async def compress(
    path: str | Path,
    level: int = 6,
    chunk_size: int = CHUNK_SIZE,
) -> CompressedArtifact:
    """
    压缩文件

    Args:
        path: 源文件路径
        level: gzip 压缩级别
        chunk_size: 每次读取的字节数

    Returns:
        压缩产物（文件名为源文件名加 .gz）

    Raises:
        CompressionError: 文件不存在、读取失败或压缩失败
    """
    path = Path(path)
    buffer = io.BytesIO()
    original_size = 0

    try:
        async with aiofiles.open(path, "rb") as src:
            with gzip.GzipFile(
                filename=path.name,
                fileobj=buffer,
                mode="wb",
                compresslevel=level,
            ) as gz:
                while True:
                    chunk = await src.read(chunk_size)
                    if not chunk:
                        break
                    gz.write(chunk)
                    original_size += len(chunk)
    except FileNotFoundError as e:
        raise CompressionError(f"归档文件不存在: {path}", path=str(path)) from e
    except (OSError, ValueError) as e:
        raise CompressionError(f"压缩失败: {path}: {e}", path=str(path)) from e

    artifact = CompressedArtifact(
        name=f"{path.name}{COMPRESSED_SUFFIX}",
        data=buffer.getvalue(),
        source_path=str(path),
        original_size=original_size,
    )

    if original_size:
        logger.debug(
            f"[compressor] 压缩 {path.name}: "
            f"{original_size} -> {artifact.size_bytes} bytes "
            f"({artifact.ratio * 100:.1f}%)"
        )
    return artifact
