"""Core package for the push-pick regrading job."""

from importlib import metadata

try:
    __version__ = metadata.version("pick-regrade")
except metadata.PackageNotFoundError:  # pragma: no cover - during editable installs
    __version__ = "0.0.0"

__all__ = ["__version__"]
