"""Typed errors raised by filesystem operations.

Every operation wraps the native ``OSError`` it hits (or the ``ValueError``
raised for a malformed path or configuration) in one of the classes below. The wrapped error keeps ``errno``/``strerror``/``filename`` of the
original, chains it as ``__cause__`` and also derives from the matching
builtin class, so ``except FileNotFoundError`` keeps working for callers.
"""

import errno as errno_codes
import os
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum


class ErrorKind(str, Enum):
    """Category of a filesystem failure."""

    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    ALREADY_EXISTS = "already_exists"
    INVALID_ARGUMENT = "invalid_argument"
    IO = "io"


class FileOperationError(OSError):
    """Base error for a failed filesystem operation."""

    kind: ErrorKind = ErrorKind.IO

    def __init__(
        self,
        operation: str,
        path: str,
        strerror: str | None = None,
        errno: int | None = None,
        target: str | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            operation: Name of the operation that failed (e.g. "copy")
            path: Path the failing primitive was called with
            strerror: Human readable reason
            errno: Native error number, when one is known
            target: Second path of two-path operations (rename, move, copy)
        """
        super().__init__(errno, strerror or self.kind.value.replace("_", " "), path)
        self.operation = operation
        self.path = path
        self.target = target
        if target is not None:
            self.filename2 = target

    def __reduce__(self):
        return (type(self), (self.operation, self.path, self.strerror, self.errno, self.target))

    def __str__(self) -> str:
        if self.target is not None:
            return f"{self.operation} {self.path} -> {self.target}: {self.strerror}"
        return f"{self.operation} {self.path}: {self.strerror}"


class NotFoundError(FileOperationError, FileNotFoundError):
    """The path (or one of its parents) does not exist."""

    kind = ErrorKind.NOT_FOUND


class PermissionDeniedError(FileOperationError, PermissionError):
    """The process lacks the rights to perform the operation."""

    kind = ErrorKind.PERMISSION_DENIED


class AlreadyExistsError(FileOperationError, FileExistsError):
    """The operation would replace something that must not be replaced."""

    kind = ErrorKind.ALREADY_EXISTS


class InvalidArgumentError(FileOperationError, ValueError):
    """The path or argument is not valid for the operation."""

    kind = ErrorKind.INVALID_ARGUMENT


def _error_class(exc: OSError) -> type[FileOperationError]:
    if isinstance(exc, FileNotFoundError):
        return NotFoundError
    if isinstance(exc, PermissionError):
        return PermissionDeniedError
    if isinstance(exc, FileExistsError):
        return AlreadyExistsError
    if isinstance(exc, (IsADirectoryError, NotADirectoryError)) or exc.errno == errno_codes.EINVAL:
        return InvalidArgumentError
    return FileOperationError


def translate_os_error(
    operation: str,
    path: str | os.PathLike[str],
    exc: OSError,
    target: str | os.PathLike[str] | None = None,
) -> FileOperationError:
    """Map a native OSError to the matching FileOperationError.

    Args:
        operation: Name of the failing operation
        path: Primary path of the operation
        exc: Native error raised by the primitive
        target: Second path of the operation, if any

    Returns:
        The typed error (``exc`` itself if it is already typed)
    """
    if isinstance(exc, FileOperationError):
        return exc

    # Prefer the path the primitive itself reported.
    failing = exc.filename if isinstance(exc.filename, str) else os.fspath(path)
    second = exc.filename2 if isinstance(exc.filename2, str) else None
    if second is None and target is not None:
        second = os.fspath(target)
    if second == failing:
        second = None

    cls = _error_class(exc)
    return cls(
        operation,
        failing,
        strerror=exc.strerror or str(exc) or None,
        errno=exc.errno,
        target=second,
    )


@contextmanager
def os_errors(
    operation: str,
    path: str | os.PathLike[str],
    target: str | os.PathLike[str] | None = None,
) -> Iterator[None]:
    """Translate any OSError or ValueError raised inside the block into a FileOperationError."""
    try:
        yield
    except FileOperationError:
        raise
    except OSError as e:
        raise translate_os_error(operation, path, e, target) from e
    except ValueError as e:
        # e.g. an embedded null byte in a path
        raise InvalidArgumentError(
            operation,
            os.fspath(path),
            strerror=str(e),
            target=os.fspath(target) if target is not None else None,
        ) from e
