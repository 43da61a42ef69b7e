"""Name nationality package: predicts a nationality label from a person's name."""
import logging

from name_nationality.classifier import NationalityClassifier, PredictionResult, softmax
from name_nationality.exceptions import (
    ModelError,
    ModelLoadError,
    ModelInvalidError,
    ModelNotLoadedError,
)
from name_nationality.features import extract_features, iter_ngrams, name_ngrams, prepare_name
from name_nationality.model import Model

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "NationalityClassifier",
    "PredictionResult",
    "softmax",
    "Model",
    "ModelError",
    "ModelLoadError",
    "ModelInvalidError",
    "ModelNotLoadedError",
    "extract_features",
    "iter_ngrams",
    "name_ngrams",
    "prepare_name",
]
