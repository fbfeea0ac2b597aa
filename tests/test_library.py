import pytest

from artifactbot.errors import ConfigurationError, DuplicateArtifactError
from artifactbot.library import ArtifactLibrary


async def _chunks(*parts):
    for part in parts:
        yield part


async def _failing_chunks():
    yield b"partial"
    raise RuntimeError("stream interrupted")


@pytest.mark.asyncio
async def test_store_writes_entry(tmp_path):
    library = ArtifactLibrary(tmp_path / "lib")

    path, size = await library.store("archive.zip", _chunks(b"abc", b"def"))

    assert path == tmp_path / "lib" / "archive.zip"
    assert path.read_bytes() == b"abcdef"
    assert size == 6


@pytest.mark.asyncio
async def test_store_overwrites_by_default(tmp_path):
    library = ArtifactLibrary(tmp_path)
    await library.store("archive.zip", _chunks(b"old"))

    path, _ = await library.store("archive.zip", _chunks(b"new"))

    assert path.read_bytes() == b"new"


@pytest.mark.asyncio
async def test_unique_library_rejects_existing_name(tmp_path):
    library = ArtifactLibrary(tmp_path, unique=True)
    await library.store("archive.zip", _chunks(b"old"))

    with pytest.raises(DuplicateArtifactError):
        await library.store("archive.zip", _chunks(b"new"))

    assert (tmp_path / "archive.zip").read_bytes() == b"old"


@pytest.mark.asyncio
async def test_failed_stream_leaves_no_entry(tmp_path):
    library = ArtifactLibrary(tmp_path)

    with pytest.raises(RuntimeError):
        await library.store("archive.zip", _failing_chunks())

    assert list(tmp_path.iterdir()) == []


@pytest.mark.parametrize("name", ["", "..", "nested/archive.zip"])
def test_rejects_names_outside_library(tmp_path, name):
    with pytest.raises(ConfigurationError):
        ArtifactLibrary(tmp_path).path_for(name)
