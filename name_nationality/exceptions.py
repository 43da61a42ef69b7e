"""Exceptions raised while loading and validating nationality models."""
from pathlib import Path
from typing import Union


class ModelError(Exception):
    """Base class for all model related errors."""


class ModelLoadError(ModelError):
    """The model file could not be read or deserialized.

    Attributes:
        path: Path of the model file that failed to load
        cause: The underlying I/O or parse error
    """

    def __init__(self, path: Union[str, Path], cause: BaseException):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to load model from {self.path}: {cause}")


class ModelInvalidError(ModelError, ValueError):
    """The model parameters are inconsistent (dimension or type mismatch)."""


class ModelNotLoadedError(ModelError, RuntimeError):
    """A classifier was requested without a model."""
