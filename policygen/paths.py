import os

from policygen.errors import InvalidPathError


def normalize_path(path: str) -> str:
    """
    Expand a leading '~' and relative segments into an absolute path.
    The path does not have to exist.
    """
    if not path:
        raise InvalidPathError("path must not be empty")

    expanded = os.path.expanduser(path)
    if expanded.startswith("~"):
        raise InvalidPathError(f"cannot resolve home directory in {path!r}")

    return os.path.abspath(expanded)
