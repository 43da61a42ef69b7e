"""Trained logistic-regression parameters for nationality classification.

A model file is a JSON object with four fields::

    {
        "features": [" w", "wa", "ng", ...],
        "classes": ["china", "russia", "rest"],
        "coefficients": [[...], [...], [...]],
        "intercepts": [-0.2, -0.3, 0.4]
    }

``coefficients`` has one row per class and one column per feature, so the
order of ``features`` and ``classes`` is significant.
"""
import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Sequence, Tuple, Union

import numpy as np

from name_nationality.exceptions import ModelInvalidError, ModelLoadError

logger = logging.getLogger(__name__)

MODEL_FIELDS = ("features", "classes", "coefficients", "intercepts")


def _as_labels(values: Any, field_name: str) -> Tuple[str, ...]:
    if isinstance(values, (str, bytes)) or not isinstance(values, (Sequence, np.ndarray)):
        raise ModelInvalidError(f"'{field_name}' must be a list of strings")

    labels = tuple(values)
    for i, value in enumerate(labels):
        if not isinstance(value, str):
            raise ModelInvalidError(
                f"'{field_name}' entry at index {i} must be a string, got {type(value).__name__}"
            )

    if len(set(labels)) != len(labels):
        duplicates = sorted(value for value, count in Counter(labels).items() if count > 1)
        raise ModelInvalidError(f"'{field_name}' contains duplicates: {duplicates}")

    return labels


def _as_float_array(values: Any, field_name: str) -> np.ndarray:
    try:
        array = np.array(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ModelInvalidError(f"'{field_name}' must contain only numbers: {e}") from e

    if not np.all(np.isfinite(array)):
        raise ModelInvalidError(f"'{field_name}' contains NaN or infinite values")

    return array


def _read_only_view(array: np.ndarray) -> np.ndarray:
    # A view of a read-only base cannot be made writeable again.
    array.flags.writeable = False
    view = array.view()
    view.flags.writeable = False
    return view


@dataclass(frozen=True, eq=False)
class Model:
    """Immutable container for the vocabulary, labels and weights of a model.

    Attributes:
        features: Ordered n-gram vocabulary (column order of ``coefficients``)
        classes: Ordered class labels (row order of ``coefficients``)
        coefficients: Read-only array of shape (n_classes, n_features)
        intercepts: Read-only array of shape (n_classes,)
        feature_index: Read-only mapping from n-gram to column index
    """
    features: Tuple[str, ...]
    classes: Tuple[str, ...]
    coefficients: np.ndarray
    intercepts: np.ndarray
    feature_index: Mapping[str, int] = field(init=False, repr=False)

    def __post_init__(self):
        features = _as_labels(self.features, "features")
        classes = _as_labels(self.classes, "classes")

        if not classes:
            raise ModelInvalidError("Model must define at least one class")

        rows = self.coefficients
        if isinstance(rows, (str, bytes)) or not isinstance(rows, (Sequence, np.ndarray)):
            raise ModelInvalidError("'coefficients' must be a list of rows")

        # Row lengths are checked before numpy sees them, so ragged input
        # is reported as a dimension mismatch rather than a dtype failure.
        if len(rows) != len(classes):
            raise ModelInvalidError(
                f"'coefficients' has {len(rows)} rows but there are {len(classes)} classes"
            )
        for i, row in enumerate(rows):
            if isinstance(row, (str, bytes)) or not isinstance(row, (Sequence, np.ndarray)):
                raise ModelInvalidError(f"'coefficients' row {i} must be a list of numbers")
            if len(row) != len(features):
                raise ModelInvalidError(
                    f"'coefficients' row {i} ({classes[i]!r}) has {len(row)} values "
                    f"but there are {len(features)} features"
                )

        coefficients = _as_float_array(rows, "coefficients")
        if coefficients.ndim != 2 or coefficients.shape != (len(classes), len(features)):
            raise ModelInvalidError(
                f"'coefficients' has shape {coefficients.shape} but expected "
                f"({len(classes)}, {len(features)}) numbers"
            )

        intercepts = _as_float_array(self.intercepts, "intercepts")

        if intercepts.ndim != 1 or intercepts.shape[0] != len(classes):
            raise ModelInvalidError(
                f"'intercepts' has shape {intercepts.shape} but there are {len(classes)} classes"
            )

        object.__setattr__(self, "features", features)
        object.__setattr__(self, "classes", classes)
        object.__setattr__(self, "_coefficients", coefficients)
        object.__setattr__(self, "_intercepts", intercepts)
        object.__setattr__(self, "coefficients", _read_only_view(coefficients))
        object.__setattr__(self, "intercepts", _read_only_view(intercepts))
        object.__setattr__(
            self,
            "feature_index",
            MappingProxyType({feature: i for i, feature in enumerate(features)}),
        )

    def __eq__(self, other):
        if not isinstance(other, Model):
            return NotImplemented
        return (
            self.features == other.features
            and self.classes == other.classes
            and np.array_equal(self.coefficients, other.coefficients)
            and np.array_equal(self.intercepts, other.intercepts)
        )

    @property
    def num_features(self) -> int:
        return len(self.features)

    @property
    def num_classes(self) -> int:
        return len(self.classes)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Model":
        """Build a model from a mapping with the four model fields.

        Args:
            data: Mapping with ``features``, ``classes``, ``coefficients``
                  and ``intercepts`` keys. Extra keys are ignored.

        Returns:
            Validated Model

        Raises:
            ModelInvalidError: If a field is missing or the dimensions disagree
        """
        if not isinstance(data, Mapping):
            raise ModelInvalidError(
                f"Model data must be a JSON object, got {type(data).__name__}"
            )

        missing = [name for name in MODEL_FIELDS if name not in data]
        if missing:
            raise ModelInvalidError(f"Model data is missing fields: {', '.join(missing)}")

        return cls(
            features=data["features"],
            classes=data["classes"],
            coefficients=data["coefficients"],
            intercepts=data["intercepts"],
        )

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Model":
        """Load a model from a JSON file.

        Args:
            path: Path to the JSON model file

        Returns:
            Validated Model

        Raises:
            ModelLoadError: If the file cannot be read, is not valid JSON,
                            or is not an object with the four model fields
            ModelInvalidError: If the fields are present but inconsistent
        """
        path = Path(path)

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Could not read model file %s: %s", path, e)
            raise ModelLoadError(path, e) from e

        if not isinstance(data, dict):
            error = TypeError(f"expected a JSON object, got {type(data).__name__}")
            logger.error("Could not read model file %s: %s", path, error)
            raise ModelLoadError(path, error)

        missing = [name for name in MODEL_FIELDS if name not in data]
        if missing:
            error = KeyError(f"missing fields: {', '.join(missing)}")
            logger.error("Could not read model file %s: %s", path, error)
            raise ModelLoadError(path, error)

        model = cls.from_dict(data)
        logger.debug(
            "Loaded model from %s (%d features, %d classes)",
            path,
            model.num_features,
            model.num_classes,
        )
        return model

    def to_dict(self) -> Dict[str, list]:
        """Return the model as plain lists, in the JSON file layout."""
        return {
            "features": list(self.features),
            "classes": list(self.classes),
            "coefficients": self.coefficients.tolist(),
            "intercepts": self.intercepts.tolist(),
        }

    def save(self, path: Union[str, Path]) -> None:
        """Write the model to a JSON file, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, ensure_ascii=False)

        logger.debug("Saved model to %s", path)
