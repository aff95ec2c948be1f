"""
Output writers used by the code generation driver.

A writer receives a path relative to the output root together with the
rendered text. FileWriter writes to disk, MemoryWriter keeps everything in
a dict (tests, dry runs).
"""

from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Dict, Union

from ...errors import OutputWriteError
from ...logging_config import get_logger

logger = get_logger(__name__)


class OutputWriter(ABC):
    """Destination for generated artifacts."""

    @abstractmethod
    def write(self, relative_path: PurePosixPath, text: str) -> bool:
        """
        Store one artifact.

        Returns:
            True if the artifact was written, False if it was left untouched
            because identical content already existed.

        Raises:
            OutputWriteError: If the artifact cannot be stored.
        """


class FileWriter(OutputWriter):
    """Writes artifacts below a root directory, creating directories as needed."""

    def __init__(self, root: Union[str, Path], write_if_changed: bool = True):
        self.root = Path(root)
        self.write_if_changed = write_if_changed

    def target(self, relative_path: PurePosixPath) -> Path:
        return self.root.joinpath(*PurePosixPath(relative_path).parts)

    def write(self, relative_path: PurePosixPath, text: str) -> bool:
        path = self.target(relative_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # only over-write if changed to avoid modifying file times
            if self.write_if_changed and path.is_file():
                with open(path, "r", encoding="utf-8", newline="") as f:
                    if f.read() == text:
                        logger.debug("unchanged: %s", path)
                        return False
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(text)
        except OSError as e:
            raise OutputWriteError(f"Failed to write {path}: {e}", path) from e
        except UnicodeDecodeError as e:
            raise OutputWriteError(f"Failed to read existing {path}: {e}", path) from e

        logger.debug("wrote %s", path)
        return True


class MemoryWriter(OutputWriter):
    """Keeps artifacts in memory, keyed by POSIX-style relative path."""

    def __init__(self):
        self.files: Dict[str, str] = {}

    def write(self, relative_path: PurePosixPath, text: str) -> bool:
        key = str(PurePosixPath(relative_path))
        if self.files.get(key) == text:
            return False
        self.files[key] = text
        return True
