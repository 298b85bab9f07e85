"""Exceptions raised by the rendering and delivery contexts."""

from pathlib import Path
from typing import Optional, Sequence


class WkpdfError(Exception):
    """Base class for all wkpdf errors."""


class ConfigurationError(WkpdfError, ValueError):
    """
    Raised when required configuration is missing or invalid at the point of use.

    Covers the scratch directory, title, HTML content, copies, output mode,
    unknown option keys and unknown presets. Not retryable.
    """


class StorageError(WkpdfError, OSError):
    """
    Raised when writing the scratch file or a saved PDF fails.

    Attributes:
        message: Error description
        path: File that could not be written
        original_error: The underlying OSError
    """

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        original_error: Optional[OSError] = None,
    ):
        self.message = message
        self.path = path
        self.original_error = original_error

        parts = [message]
        if path:
            parts.append(f"Path: {path}")
        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))


class SpawnError(WkpdfError):
    """
    Raised when the renderer executable cannot be launched.

    Attributes:
        command: Argument vector that failed to start
        original_error: The OSError raised by process creation
    """

    def __init__(self, command: Sequence[str], original_error: Optional[OSError] = None):
        self.command = list(command)
        self.original_error = original_error

        executable = self.command[0] if self.command else "<empty command>"
        message = f"Could not launch renderer: {executable}"
        if original_error:
            message += f" ({original_error})"

        super().__init__(message)


class RenderError(WkpdfError):
    """
    Raised when the renderer reports an error on stderr or produces no output.

    Attributes:
        message: Error description
        stderr: Raw diagnostic text from the renderer
    """

    def __init__(self, message: str, stderr: str = ""):
        self.message = message
        self.stderr = stderr

        parts = [message]
        if stderr:
            # Truncate diagnostics if too long
            snippet = stderr[:500] + "..." if len(stderr) > 500 else stderr
            parts.append(f"\nRenderer stderr:\n{snippet}")

        super().__init__("\n".join(parts))


class ProcessError(WkpdfError):
    """
    Raised when the renderer exits with a fatal status code (2 or above).

    Attributes:
        returncode: Exit status of the renderer
        stderr: Raw diagnostic text from the renderer
    """

    def __init__(self, returncode: int, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Shell error, return code: {returncode}")


class RenderTimeoutError(WkpdfError, TimeoutError):
    """
    Raised after a renderer that exceeded its deadline has been killed.

    Attributes:
        command: Argument vector of the killed process
        timeout: Deadline in seconds
    """

    def __init__(self, command: Sequence[str], timeout: float):
        self.command = list(command)
        self.timeout = timeout
        super().__init__(f"Renderer did not finish within {timeout:g}s and was terminated")
