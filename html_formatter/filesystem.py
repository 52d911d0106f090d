"""Reading and rewriting HTML documents for the command line."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE, HTML_EXTENSIONS

MAX_FILE_SIZE_ENV_VAR = "HTML_FORMATTER_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Read the document size limit from the environment.

    Raises:
        ValueError: If the variable is set to anything but a positive integer.
    """
    raw_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if raw_value is None:
        return default
    if not raw_value.strip().isdigit() or int(raw_value) <= 0:
        raise ValueError(
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {raw_value!r} "
            "(expected a positive integer)"
        )
    return int(raw_value)


def resolve_document(raw_path: str) -> Path:
    """Turn a user-supplied path into the absolute path of an HTML document.

    Args:
        raw_path: Path given on the command line; ``~`` is expanded.

    Returns:
        Path: Resolved path of the document.

    Raises:
        ValueError: If the path is a symlink, is missing, is not a regular
            file, or does not carry an HTML extension.

    Examples:
        resolve_document("templates/index.html")
    """
    path = Path(raw_path).expanduser()

    # --in-place must never write through a link
    if path.is_symlink():
        raise ValueError(f"Symlinks are not supported: {path}")
    if not path.exists():
        raise ValueError(f"{path} does not exist.")

    path = path.resolve()
    if not path.is_file():
        raise ValueError(f"{path} is not a regular file.")
    if path.suffix.lower() not in HTML_EXTENSIONS:
        raise ValueError(
            f"{path} is not an HTML file. Supported extensions are: {', '.join(HTML_EXTENSIONS)}"
        )
    return path


def read_document(path: Path, max_size: int) -> tuple[str, os.stat_result]:
    """Read a UTF-8 document no larger than `max_size` bytes.

    The size is checked on the open handle and again on the bytes read, so a
    file that grows in between is still refused.

    Args:
        path: Document to read.
        max_size: Largest accepted size in bytes.

    Returns:
        tuple[str, os.stat_result]: Decoded text and the metadata of the file
        it came from, used by `write_document` to detect concurrent edits.

    Raises:
        IOError: If the file is too large, unreadable or not valid UTF-8.
    """
    try:
        with open(path, "rb") as handle:
            snapshot = os.fstat(handle.fileno())
            data = handle.read(max_size + 1)
    except OSError as error:
        raise IOError(f"Unable to read {path}: {error}") from error

    if snapshot.st_size > max_size or len(data) > max_size:
        raise IOError(f"{path} exceeds the maximum allowed size of {max_size} bytes.")

    try:
        return data.decode("utf-8"), snapshot
    except UnicodeDecodeError as error:
        raise IOError(f"{path} is not valid UTF-8: {error}") from error


def write_document(path: Path, text: str, snapshot: os.stat_result):
    """Replace a document's content with `text`, keeping its permissions.

    The text goes to a temporary file in the same directory, which is then
    renamed over the document. Line breaks are written unchanged.

    Args:
        path: Document to rewrite.
        text: New content.
        snapshot: Metadata returned by `read_document`.

    Raises:
        IOError: If the document was modified after it was read, or the
            temporary file cannot be written or renamed.

    Examples:
        html, snapshot = read_document(path, get_max_file_size())
        write_document(path, beautify(html) + "\\n", snapshot)
    """
    current = os.stat(path, follow_symlinks=False)
    if _fingerprint(current) != _fingerprint(snapshot):
        raise IOError(f"{path} changed while it was being formatted; refusing to overwrite.")

    descriptor, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
    try:
        with open(descriptor, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(temp_name, stat.S_IMODE(snapshot.st_mode))
        os.replace(temp_name, path)
    except OSError:
        Path(temp_name).unlink(missing_ok=True)
        raise


def _fingerprint(snapshot: os.stat_result) -> tuple[int, int, int]:
    return snapshot.st_ino, snapshot.st_size, snapshot.st_mtime_ns
