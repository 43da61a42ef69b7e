"""Configuration settings for the name nationality package."""
import copy
import os
from pathlib import Path
import yaml
from typing import Dict, Any, Tuple

# Package directory
PACKAGE_DIR = Path(__file__).parent

# Model artifacts directory
MODELS_DIR = PACKAGE_DIR / "models"

# Model file paths
MODEL_PATH = MODELS_DIR / "features.json"
METADATA_PATH = MODELS_DIR / "metadata.json"
TRAINING_CONFIG_PATH = MODELS_DIR / "training_config.yaml"

# Data directory (for training scripts)
DATA_DIR = Path(os.environ.get("NAME_NATIONALITY_DATA_DIR", PACKAGE_DIR.parent / "data"))

# Character n-gram lengths used by the feature vocabulary
NGRAM_MIN = 1
NGRAM_MAX = 3

# Confidence API defaults
DEFAULT_MIN_CONFIDENCE = 0.5
UNCERTAIN_LABEL = "UNCERTAIN"

# Training defaults, used for any key missing from the training config
DEFAULT_VECTORIZER_CONFIG = {
    "max_features": 20000,
    "min_df": 1,
}

DEFAULT_MODEL_CONFIG = {
    "type": "LogisticRegression",
    "params": {
        "C": 1.0,
        "max_iter": 1000,
        "random_state": 42,
    },
}


def load_training_config() -> Dict[str, Any]:
    """Load training configuration from YAML file.

    Returns:
        Dictionary containing training configuration.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config file is empty.
        yaml.YAMLError: If config file is malformed.
    """
    if not TRAINING_CONFIG_PATH.exists():
        raise FileNotFoundError(
            f"Training configuration not found at {TRAINING_CONFIG_PATH}. "
            f"Please ensure the config file exists."
        )

    with open(TRAINING_CONFIG_PATH, 'r') as f:
        config = yaml.safe_load(f)

    if config is None:
        raise ValueError(f"Config file {TRAINING_CONFIG_PATH} is empty or invalid")

    return config


def save_training_config(config_data: Dict[str, Any]) -> None:
    """Save training configuration to YAML file.

    Args:
        config_data: Dictionary containing training configuration to save.
    """
    MODELS_DIR.mkdir(parents=True, exist_ok=True)

    with open(TRAINING_CONFIG_PATH, 'w') as f:
        yaml.safe_dump(config_data, f, default_flow_style=False, sort_keys=False)


def training_settings(config_data: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Resolve vectorizer and model settings from a training config.

    Keys missing from the ``train`` section (including individual model
    params) are filled from DEFAULT_VECTORIZER_CONFIG and DEFAULT_MODEL_CONFIG.
    A different model type does not inherit the default params.

    Args:
        config_data: Full training configuration, e.g. from load_training_config().

    Returns:
        Tuple of (vectorizer_config, model_config).

    Example:
        >>> vec, model = training_settings({"train": {"model": {"params": {"C": 0.5}}}})
        >>> model["params"]["C"], model["params"]["max_iter"]
        (0.5, 1000)
    """
    train = config_data.get("train") or {}

    vec_config = copy.deepcopy(DEFAULT_VECTORIZER_CONFIG)
    vec_config.update(train.get("vectorizer") or {})

    model_section = train.get("model") or {}
    model_type = model_section.get("type", DEFAULT_MODEL_CONFIG["type"])
    params = (
        copy.deepcopy(DEFAULT_MODEL_CONFIG["params"])
        if model_type == DEFAULT_MODEL_CONFIG["type"]
        else {}
    )
    params.update(model_section.get("params") or {})

    return vec_config, {"type": model_type, "params": params}
