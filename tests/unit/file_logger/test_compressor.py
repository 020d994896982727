"""
归档压缩器单元测试
"""

import gzip

import pytest

from file_logger.domain.errors import CompressionError
from file_logger.logs.compressor import compress


class TestCompress:
    """压缩测试"""

    @pytest.mark.asyncio
    async def test_round_trip(self, tmp_path):
        """测试解压后与源文件一致"""
        source = tmp_path / "server_2026-10-18T08-30-01-123Z.log"
        payload = "".join(f"[2026-10-18T08:30:01.123Z] line {i}\n" for i in range(500))
        source.write_text(payload, encoding="utf-8")

        artifact = await compress(source)

        assert artifact.name == f"{source.name}.gz"
        assert gzip.decompress(artifact.data) == payload.encode("utf-8")
        assert artifact.original_size == len(payload.encode("utf-8"))
        assert artifact.size_bytes < artifact.original_size

    @pytest.mark.asyncio
    async def test_small_chunks(self, tmp_path):
        """测试分块读取"""
        source = tmp_path / "server.log"
        payload = bytes(range(256)) * 40
        source.write_bytes(payload)

        artifact = await compress(source, chunk_size=100)

        assert gzip.decompress(artifact.data) == payload

    @pytest.mark.asyncio
    async def test_empty_file(self, tmp_path):
        """测试空文件"""
        source = tmp_path / "empty.log"
        source.write_bytes(b"")

        artifact = await compress(source)

        assert gzip.decompress(artifact.data) == b""
        assert artifact.ratio == 0.0

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        """测试源文件不存在"""
        with pytest.raises(CompressionError) as exc_info:
            await compress(tmp_path / "missing.log")

        assert exc_info.value.code == "COMPRESSION_ERROR"
        assert exc_info.value.path == str(tmp_path / "missing.log")

    @pytest.mark.asyncio
    async def test_source_untouched(self, tmp_path):
        """测试压缩不修改源文件"""
        source = tmp_path / "server.log"
        source.write_text("keep\n", encoding="utf-8")

        await compress(source)

        assert source.read_text(encoding="utf-8") == "keep\n"
