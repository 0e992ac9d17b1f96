"""apiline interactive API workflow runner."""

from importlib import metadata

try:
    __version__ = metadata.version("apiline")
except metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = ["__version__"]
