"""
Scratch file management.

The renderer reads HTML from a file path, so every pipeline owns one scratch
file in a caller-chosen directory. The file name is a uuid4 token created with
exclusive-create, so two pipelines can never end up sharing a path.
"""

import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from wkpdf.contexts.rendering.exceptions import ConfigurationError, StorageError
from wkpdf.contexts.rendering.logger import _log_debug, _log_warning

SCRATCH_SUFFIX = ".html"


def resolve_scratch_directory(directory: Union[str, Path, None]) -> Path:
    """
    Validate a scratch directory and return its resolved path.

    Raises:
        ConfigurationError: If directory is unset, relative, or not an existing directory
    """
    if directory is None or str(directory) == "":
        raise ConfigurationError("Path to directory where to store files is not set")

    directory = Path(directory)
    if not directory.is_absolute():
        raise ConfigurationError(f"Path must be absolute: {directory}")
    if not directory.is_dir():
        raise ConfigurationError(f"Path is not an existing directory: {directory}")

    return directory.resolve()


class ScratchFileStore:
    """
    Owns the single scratch HTML file of one pipeline.

    The path is generated lazily on first use and stays the same for the
    lifetime of the store; each write overwrites the previous content.

    Args:
        directory: Absolute path to an existing directory

    Example:
        >>> store = ScratchFileStore(Path("/tmp"))
        >>> with store.session("<p>hi</p>") as html_path:
        ...     run_renderer(html_path)
        >>> store.path.exists()
        False
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = resolve_scratch_directory(directory)
        self._path: Optional[Path] = None

    @property
    def path(self) -> Optional[Path]:
        """Scratch file path, or None if not generated yet."""
        return self._path

    def ensure_path(self) -> Path:
        """Generate (once) a unique scratch path and reserve it on disk."""
        if self._path is not None:
            return self._path

        while True:
            candidate = self.directory / f"{uuid.uuid4().hex}{SCRATCH_SUFFIX}"
            try:
                # Exclusive create reserves the name atomically
                with open(candidate, "x", encoding="utf-8"):
                    pass
            except FileExistsError:
                continue
            except OSError as e:
                raise StorageError(
                    "Could not create scratch file", path=candidate, original_error=e
                ) from e
            break

        self._path = candidate
        _log_debug(f"Reserved scratch file: {candidate}")
        return candidate

    def write(self, content: str) -> Path:
        """
        Overwrite the scratch file with content (UTF-8).

        Raises:
            StorageError: If the file cannot be written
        """
        path = self.ensure_path()
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise StorageError("Could not write scratch file", path=path, original_error=e) from e

        _log_debug(f"Wrote {len(content)} characters to {path.name}")
        return path

    def remove(self) -> bool:
        """
        Delete the scratch file. Never raises.

        Returns:
            True if the file is gone afterwards, False if deletion failed
        """
        if self._path is None:
            return True

        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            _log_warning(f"Could not remove scratch file {self._path}: {e}")
            return False

        _log_debug(f"Removed scratch file: {self._path.name}")
        return True

    @contextmanager
    def session(self, content: str) -> Iterator[Path]:
        """Write content, yield the scratch path, and remove the file on exit."""
        try:
            yield self.write(content)
        finally:
            self.remove()
