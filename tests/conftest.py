"""Shared fixtures for the name nationality tests."""
from pathlib import Path

import pytest

from name_nationality import Model, NationalityClassifier

FIXTURES_DIR = Path(__file__).parent / "fixtures"
TOY_MODEL_PATH = FIXTURES_DIR / "toy_model.json"


@pytest.fixture
def toy_model_path() -> Path:
    """Path to a small three-class model (china / russia / rest)."""
    return TOY_MODEL_PATH


@pytest.fixture
def toy_model(toy_model_path) -> Model:
    return Model.load(toy_model_path)


@pytest.fixture
def classifier(toy_model) -> NationalityClassifier:
    return NationalityClassifier(toy_model)


@pytest.fixture
def model_data() -> dict:
    """Minimal valid model parameters as plain lists."""
    return {
        "features": ["a", "b", " a"],
        "classes": ["x", "y"],
        "coefficients": [[1.0, 0.0, 0.5], [0.0, 1.0, -0.5]],
        "intercepts": [0.0, 0.1],
    }
