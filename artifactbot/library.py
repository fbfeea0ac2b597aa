import os
import tempfile
from pathlib import Path
from typing import AsyncIterable, Tuple, Union

import aiofiles

from artifactbot import logger
from artifactbot.errors import ConfigurationError, DuplicateArtifactError


def check_artifact_name(name: str) -> None:
    """Reject names that are not a plain file name inside the library."""
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise ConfigurationError(
            "Artifact name must be a plain file name", field="artifact_name", value=name
        )


class ArtifactLibrary:
    """Directory of captured artifacts, keyed by artifact name.

    Entries are written to a temporary file beside the target and renamed into
    place once the whole stream has arrived, so an interrupted import never
    leaves a partial entry behind.
    """

    def __init__(self, root: Union[str, Path], unique: bool = False) -> None:
        self.root = Path(root)
        self.unique = unique

    def path_for(self, name: str) -> Path:
        check_artifact_name(name)
        return self.root / name

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def _ensure_free(self, name: str) -> None:
        if self.unique and self.exists(name):
            raise DuplicateArtifactError(
                "An artifact with this name already exists",
                field="artifact_name",
                value=name,
            )

    async def store(self, name: str, chunks: AsyncIterable[bytes]) -> Tuple[Path, int]:
        """Persist ``chunks`` under ``name`` and return the path and size."""
        target = self.path_for(name)
        self._ensure_free(name)
        self.root.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{name}.", suffix=".part")
        os.close(fd)
        size = 0
        try:
            async with aiofiles.open(tmp_name, "wb") as fh:
                async for chunk in chunks:
                    await fh.write(chunk)
                    size += len(chunk)
            self._ensure_free(name)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.info("Stored artifact %s (%d bytes) at %s", name, size, target)
        return target, size
