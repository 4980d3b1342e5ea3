"""toongraph package initialization."""

from importlib.metadata import version, PackageNotFoundError

from .converter import decode, encode
from .validator import ValidationResult, validate

__all__ = ["__version__", "decode", "encode", "validate", "ValidationResult"]

try:
    __version__ = version("toongraph")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0"
