"""Main classifier module for name nationality classification."""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, List, Dict, Tuple, Union

import numpy as np

from name_nationality.config import (
    MODEL_PATH,
    METADATA_PATH,
    DEFAULT_MIN_CONFIDENCE,
    UNCERTAIN_LABEL,
)
from name_nationality.exceptions import ModelNotLoadedError
from name_nationality.features import extract_features
from name_nationality.model import Model

logger = logging.getLogger(__name__)


@dataclass
class PredictionResult:
    """Result of classification with diagnostics.

    Attributes:
        label: Predicted nationality label
        probabilities: Probability of every class, in model class order
        feature_counts: Recognized n-grams and how often they occur in the name
    """
    label: str
    probabilities: Dict[str, float]
    feature_counts: Dict[str, int]


def softmax(scores: np.ndarray) -> np.ndarray:
    """Convert scores to probabilities along the last axis.

    The maximum is subtracted before exponentiating so large scores do not
    overflow; the result equals exp(s) / sum(exp(s)).
    """
    exps = np.exp(scores - np.max(scores, axis=-1, keepdims=True))
    return exps / exps.sum(axis=-1, keepdims=True)


def _validate_name(name) -> str:
    if name is None:
        raise ValueError("Name cannot be None")

    if not isinstance(name, str):
        raise TypeError(f"Name must be a string, got {type(name).__name__}")

    return name


def _validate_names(names) -> List[str]:
    if names is None:
        raise ValueError("Names list cannot be None")

    if not isinstance(names, list):
        raise ValueError("Names must be a list")

    if not names:
        raise ValueError("Names list cannot be empty")

    for i, name in enumerate(names):
        if name is None:
            raise ValueError(f"Name at index {i} cannot be None")
        if not isinstance(name, str):
            raise TypeError(f"Name at index {i} must be a string, got {type(name).__name__}")

    return names


def _validate_min_confidence(min_confidence: float) -> None:
    if not 0.0 <= min_confidence <= 1.0:
        raise ValueError("min_confidence must be between 0.0 and 1.0")


class NationalityClassifier:
    """Predicts the nationality of a name with a logistic-regression model.

    The classifier holds no state besides its immutable Model, so a single
    instance can be shared between threads.

    Example:
        >>> classifier = NationalityClassifier.from_path("features.json")
        >>> classifier.predict("Petrov")
        'russia'
    """

    def __init__(self, model: Model, metadata_path: Optional[Path] = None):
        """
        Initialize the NationalityClassifier.

        Args:
            model: Trained Model
            metadata_path: Optional custom path to the training metadata file

        Raises:
            ModelNotLoadedError: If model is None
            TypeError: If model is not a Model instance
        """
        if model is None:
            raise ModelNotLoadedError("Model has not been loaded")

        if not isinstance(model, Model):
            raise TypeError(f"Expected a Model, got {type(model).__name__}")

        self._model = model
        self.metadata_path = Path(metadata_path) if metadata_path else METADATA_PATH

    @classmethod
    def from_path(cls, path: Optional[Union[str, Path]] = None) -> "NationalityClassifier":
        """
        Create a classifier from a JSON model file.

        Training metadata is looked up as metadata.json next to the model file.

        Args:
            path: Path to the model file, defaults to the packaged model

        Returns:
            NationalityClassifier using the loaded model

        Raises:
            ModelLoadError: If the file cannot be read or parsed
            ModelInvalidError: If the model dimensions are inconsistent
        """
        path = Path(path) if path is not None else MODEL_PATH
        model = Model.load(path)
        return cls(model, metadata_path=path.parent / METADATA_PATH.name)

    @property
    def model(self) -> Model:
        return self._model

    @property
    def classes(self) -> Tuple[str, ...]:
        return self._model.classes

    def extract_features(self, name: str) -> Dict[str, int]:
        """Count the model's vocabulary n-grams in a name."""
        return extract_features(_validate_name(name), self._model.feature_index)

    def _score_counts(self, feature_counts: Dict[str, int]) -> np.ndarray:
        model = self._model
        if not feature_counts:
            return model.intercepts.copy()

        columns = np.fromiter(
            (model.feature_index[ngram] for ngram in feature_counts),
            dtype=np.intp,
            count=len(feature_counts),
        )
        counts = np.fromiter(feature_counts.values(), dtype=np.float64, count=len(feature_counts))
        return model.intercepts + model.coefficients[:, columns] @ counts

    def scores(self, name: str) -> np.ndarray:
        """
        Compute the raw logistic-regression score of every class.

        Args:
            name: The name to score

        Returns:
            Array of scores in model class order
        """
        return self._score_counts(self.extract_features(name))

    def predict(self, name: str) -> str:
        """
        Predict the nationality of a name.

        Ties between equal scores go to the class listed first in the model.

        Args:
            name: The name to classify. An empty string is valid and is
                  classified from the intercepts alone.

        Returns:
            The predicted class label

        Raises:
            ValueError: If name is None
            TypeError: If name is not a string

        Example:
            >>> classifier.predict("Wang")
            'china'
        """
        return self._model.classes[int(np.argmax(self.scores(name)))]

    def predict_probabilities(self, name: str) -> Dict[str, float]:
        """
        Get the probability of every class for a name (softmax of the scores).

        Args:
            name: The name to classify

        Returns:
            Dictionary mapping class labels to probabilities summing to 1.0

        Example:
            >>> probabilities = classifier.predict_probabilities("Wang")
            >>> max(probabilities, key=probabilities.get)
            'china'
        """
        return self._to_mapping(softmax(self.scores(name)))

    def _to_mapping(self, probabilities: np.ndarray) -> Dict[str, float]:
        return {label: float(p) for label, p in zip(self._model.classes, probabilities)}

    def explain(self, name: str) -> PredictionResult:
        """Classify a name and return the features behind the decision.

        Args:
            name: The name to classify

        Returns:
            PredictionResult with label, probabilities and feature counts
        """
        feature_counts = self.extract_features(name)
        scores = self._score_counts(feature_counts)

        return PredictionResult(
            label=self._model.classes[int(np.argmax(scores))],
            probabilities=self._to_mapping(softmax(scores)),
            feature_counts=feature_counts,
        )

    def _score_list(self, names: List[str]) -> np.ndarray:
        names = _validate_names(names)
        model = self._model
        feature_index = model.feature_index

        counts = np.zeros((len(names), model.num_features), dtype=np.float64)
        for row, name in enumerate(names):
            for ngram, count in extract_features(name, feature_index).items():
                counts[row, feature_index[ngram]] = count

        return counts @ model.coefficients.T + model.intercepts

    def predict_list(self, names: List[str]) -> List[str]:
        """
        Predict the nationality of a list of names.

        Args:
            names: List of names to classify

        Returns:
            List of class labels corresponding to each input name

        Raises:
            ValueError: If names is None, not a list, empty, or contains None values
            TypeError: If an element is not a string

        Example:
            >>> classifier.predict_list(["Wang", "Petrov", "John Smith"])
            ['china', 'russia', 'rest']
        """
        scores = self._score_list(names)
        logger.debug("Classified %d names", len(names))
        classes = self._model.classes
        return [classes[i] for i in np.argmax(scores, axis=1)]

    def predict_with_confidence(
        self,
        name: str,
        min_confidence: float = DEFAULT_MIN_CONFIDENCE
    ) -> Tuple[str, float]:
        """Predict a nationality, or UNCERTAIN when the model is unsure.

        Confidence is the probability of the winning class.

        Args:
            name: The name to classify
            min_confidence: Minimum confidence threshold (0.0-1.0)

        Returns:
            Tuple of (label, confidence) where label is UNCERTAIN if
            confidence is below min_confidence

        Raises:
            ValueError: If min_confidence is out of range or name is None

        Example:
            >>> classifier.predict_with_confidence("Wang", min_confidence=0.8)
            ('china', 0.99...)
        """
        _validate_min_confidence(min_confidence)

        probabilities = softmax(self.scores(name))
        best = int(np.argmax(probabilities))
        confidence = float(probabilities[best])

        if confidence < min_confidence:
            return (UNCERTAIN_LABEL, confidence)

        return (self._model.classes[best], confidence)

    def predict_list_with_confidence(
        self,
        names: List[str],
        min_confidence: float = DEFAULT_MIN_CONFIDENCE
    ) -> List[Tuple[str, float]]:
        """Predict nationalities for a list, with UNCERTAIN below the threshold.

        Args:
            names: List of names to classify
            min_confidence: Minimum confidence threshold (0.0-1.0)

        Returns:
            List of (label, confidence) tuples
        """
        _validate_min_confidence(min_confidence)

        probabilities = softmax(self._score_list(names))
        classes = self._model.classes

        output = []
        for row in probabilities:
            best = int(np.argmax(row))
            confidence = float(row[best])
            if confidence < min_confidence:
                output.append((UNCERTAIN_LABEL, confidence))
            else:
                output.append((classes[best], confidence))

        return output

    def get_metadata(self) -> Optional[dict]:
        """
        Get training metadata if available.

        Returns:
            Dictionary with training metadata (accuracy, training date, etc.) or None
        """
        if not self.metadata_path.exists():
            return None

        with open(self.metadata_path, "r", encoding="utf-8") as f:
            return json.load(f)
