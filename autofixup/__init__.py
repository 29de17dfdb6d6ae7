"""Fold staged changes into the commits they fix."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("autofixup")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
