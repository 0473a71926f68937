import io
import zipfile

import pytest

from media_slicer.archive.builder import ArchiveBuilder
from media_slicer.errors import ArchiveError


@pytest.mark.unit
@pytest.mark.asyncio
async def test_entries_survive_byte_for_byte():
    builder = ArchiveBuilder()
    builder.add("a_segment_01.mp4", b"\x00\x01first")
    builder.add("a_segment_02.mp4", b"second" * 1000)

    blob = await builder.finalize()

    with zipfile.ZipFile(io.BytesIO(blob)) as zf:
        assert zf.namelist() == ["a_segment_01.mp4", "a_segment_02.mp4"]
        assert zf.read("a_segment_01.mp4") == b"\x00\x01first"
        assert zf.read("a_segment_02.mp4") == b"second" * 1000


@pytest.mark.unit
def test_duplicate_names_are_rejected():
    builder = ArchiveBuilder()
    builder.add("x.mp3", b"1")
    with pytest.raises(ArchiveError):
        builder.add("x.mp3", b"2")
    assert len(builder) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_single_shot():
    builder = ArchiveBuilder()
    builder.add("x.mp3", b"1")
    await builder.finalize()
    with pytest.raises(ArchiveError):
        await builder.finalize()
    with pytest.raises(ArchiveError):
        builder.add("y.mp3", b"2")
