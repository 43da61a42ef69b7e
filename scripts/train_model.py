#!/usr/bin/env python
"""
Model training script for the name nationality classifier.

This script:
1. Loads prepared training data (name, nationality columns)
2. Builds a character n-gram count vectorizer using the package's feature scheme
3. Trains a logistic-regression classifier with parameters from the YAML config
4. Evaluates it using cross-validation and the test set
5. Exports the JSON model file read by NationalityClassifier, plus metadata
"""
import argparse
import json
import time
from datetime import datetime
from pathlib import Path

import joblib
import numpy as np
import pandas as pd
from sklearn.feature_extraction.text import CountVectorizer
from sklearn.linear_model import LogisticRegression
from sklearn.model_selection import cross_val_score
from sklearn.metrics import accuracy_score, f1_score, classification_report

# Add path to import from name_nationality package
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))
from name_nationality.config import (
    DATA_DIR,
    MODELS_DIR,
    load_training_config,
    save_training_config,
    training_settings,
)
from name_nationality.features import name_ngrams
from name_nationality.model import Model


def create_vectorizer_from_config(config: dict) -> CountVectorizer:
    """Create a count vectorizer over the package's character n-grams.

    Args:
        config: Dictionary containing vectorizer configuration.

    Returns:
        Unfitted CountVectorizer.
    """
    return CountVectorizer(
        analyzer=name_ngrams,
        max_features=config.get("max_features"),
        min_df=config.get("min_df", 1),
    )


def create_model_from_config(config: dict) -> LogisticRegression:
    """Create a model instance from configuration dictionary.

    Args:
        config: Dictionary containing model configuration.

    Returns:
        Instantiated model object.
    """
    model_type = config.get("type", "LogisticRegression")
    params = config.get("params", {}).copy()

    if model_type != "LogisticRegression":
        raise ValueError(f"Unsupported model type: {model_type}")

    return LogisticRegression(**params)


def export_model(vectorizer: CountVectorizer, classifier: LogisticRegression) -> Model:
    """Convert a fitted vectorizer and logistic regression into a Model.

    Binary classifiers store a single weight row for the second class. It
    is expanded to two rows with a zero row for the first class, which
    gives the same probabilities under softmax as the logistic function.

    Args:
        vectorizer: Fitted CountVectorizer using name_ngrams
        classifier: Fitted LogisticRegression

    Returns:
        Model with the same decision function as the classifier.
    """
    features = [str(f) for f in vectorizer.get_feature_names_out()]
    classes = [str(c) for c in classifier.classes_]
    coefficients = np.asarray(classifier.coef_, dtype=np.float64)
    intercepts = np.asarray(classifier.intercept_, dtype=np.float64)

    if len(classes) == 2 and coefficients.shape[0] == 1:
        coefficients = np.vstack([np.zeros_like(coefficients), coefficients])
        intercepts = np.concatenate([[0.0], intercepts])

    return Model(
        features=features,
        classes=classes,
        coefficients=coefficients,
        intercepts=intercepts,
    )


def load_data(data_dir: Path) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Load train and test data."""
    train_path = data_dir / "train.csv"
    test_path = data_dir / "test.csv"

    if not train_path.exists():
        raise FileNotFoundError(
            f"Training data not found at {train_path}. "
            f"Expected a CSV with 'name' and 'nationality' columns."
        )

    if not test_path.exists():
        raise FileNotFoundError(
            f"Test data not found at {test_path}. "
            f"Expected a CSV with 'name' and 'nationality' columns."
        )

    train_df = pd.read_csv(train_path, dtype=str, keep_default_na=False, na_values=[""])
    test_df = pd.read_csv(test_path, dtype=str, keep_default_na=False, na_values=[""])

    # Filter out rows with missing values in name or nationality columns
    train_df_original_len = len(train_df)
    test_df_original_len = len(test_df)

    train_df = train_df.dropna(subset=["name", "nationality"])
    test_df = test_df.dropna(subset=["name", "nationality"])

    train_filtered = train_df_original_len - len(train_df)
    test_filtered = test_df_original_len - len(test_df)

    if train_filtered > 0:
        print(f"Warning: Filtered {train_filtered:,} rows with missing data from training set")
    if test_filtered > 0:
        print(f"Warning: Filtered {test_filtered:,} rows with missing data from test set")

    print(f"Loaded training data: {len(train_df):,} samples")
    print(f"Loaded test data: {len(test_df):,} samples")

    return train_df, test_df


def evaluate_model(classifier, X_train, y_train, X_test, y_test, cv=3):
    """Evaluate a model using cross-validation and test set."""
    if cv > 1:
        cv_scores = cross_val_score(classifier, X_train, y_train, cv=cv, scoring="accuracy")
        cv_mean = float(cv_scores.mean())
        cv_std = float(cv_scores.std())
    else:
        cv_mean = cv_std = None

    start_time = time.time()
    classifier.fit(X_train, y_train)
    train_time = time.time() - start_time

    y_pred = classifier.predict(X_test)

    return {
        "cv_mean": cv_mean,
        "cv_std": cv_std,
        "test_accuracy": float(accuracy_score(y_test, y_pred)),
        "test_f1": float(f1_score(y_test, y_pred, average="weighted")),
        "train_time": train_time,
    }


def main():
    parser = argparse.ArgumentParser(description="Train the name nationality classifier")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=DATA_DIR,
        help=f"Directory containing train.csv and test.csv (default: {DATA_DIR})",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=MODELS_DIR,
        help=f"Output directory for the exported model (default: {MODELS_DIR})",
    )
    parser.add_argument(
        "--cv-folds",
        type=int,
        default=3,
        help="Number of cross-validation folds, 1 to skip (default: 3)",
    )
    parser.add_argument(
        "--save-sklearn",
        action="store_true",
        help="Also save the fitted scikit-learn vectorizer and model with joblib",
    )

    args = parser.parse_args()

    args.output_dir.mkdir(parents=True, exist_ok=True)

    print("=" * 80)
    print("Loading data...")
    print("=" * 80)
    train_df, test_df = load_data(args.data_dir)

    X_train_text = train_df["name"].values
    y_train = train_df["nationality"].values
    X_test_text = test_df["name"].values
    y_test = test_df["nationality"].values

    try:
        config = load_training_config()
    except (FileNotFoundError, ValueError) as e:
        print(f"Warning: Could not load config ({e}), using defaults")
        config = {}

    vec_config, model_config = training_settings(config)

    print(f"Vectorizer: char n-grams (1-3) with params {vec_config}")
    print(f"Model: {model_config.get('type')} with params {model_config.get('params', {})}")

    vectorizer = create_vectorizer_from_config(vec_config)
    classifier = create_model_from_config(model_config)

    print("\nFitting vectorizer...")
    X_train = vectorizer.fit_transform(X_train_text)
    X_test = vectorizer.transform(X_test_text)
    print(f"Vocabulary size: {len(vectorizer.vocabulary_):,}")

    print("\nTraining and evaluating model...")
    metrics = evaluate_model(classifier, X_train, y_train, X_test, y_test, cv=args.cv_folds)

    print("\n" + "=" * 80)
    print("RESULTS")
    print("=" * 80)
    if metrics["cv_mean"] is not None:
        print(f"CV Accuracy: {metrics['cv_mean']:.4f} (+/- {metrics['cv_std']:.4f})")
    print(f"Test Accuracy: {metrics['test_accuracy']:.4f}")
    print(f"Test F1 (weighted): {metrics['test_f1']:.4f}")
    print(f"Train Time: {metrics['train_time']:.2f}s")
    print("\nFinal Model Performance on Test Set:")
    print(classification_report(y_test, classifier.predict(X_test)))

    # Record the configuration and accuracy that produced this model
    config["train"] = {
        "vectorizer": vec_config,
        "model": model_config,
        "accuracy": {
            "test_accuracy": metrics["test_accuracy"],
            "test_f1": metrics["test_f1"],
            "cv_mean": metrics["cv_mean"],
            "cv_std": metrics["cv_std"],
        },
        "last_updated": datetime.now().isoformat(),
    }
    save_training_config(config)

    print("\n" + "=" * 80)
    print("Saving model artifacts...")
    print("=" * 80)

    model = export_model(vectorizer, classifier)
    model_path = args.output_dir / "features.json"
    model.save(model_path)
    print(f"Model saved to: {model_path}")

    if args.save_sklearn:
        joblib.dump(classifier, args.output_dir / "sklearn_model.pkl")
        joblib.dump(vectorizer, args.output_dir / "sklearn_vectorizer.pkl")
        print(f"scikit-learn artifacts saved to: {args.output_dir}")

    metadata = {
        "training_date": datetime.now().isoformat(),
        "classifier": model_config.get("type", "LogisticRegression"),
        "classes": list(model.classes),
        "num_features": model.num_features,
        "test_accuracy": metrics["test_accuracy"],
        "test_f1": metrics["test_f1"],
        "cv_accuracy_mean": metrics["cv_mean"],
        "cv_accuracy_std": metrics["cv_std"],
        "training_samples": len(train_df),
        "test_samples": len(test_df),
    }

    metadata_path = args.output_dir / "metadata.json"
    with open(metadata_path, "w") as f:
        json.dump(metadata, f, indent=2)
    print(f"Metadata saved to: {metadata_path}")

    print("\n" + "=" * 80)
    print("Training complete!")
    print("=" * 80)
    print("\nNext steps:")
    print("  1. Run tests: pytest")
    print("  2. Try the classifier:")
    print('     python -c "from name_nationality import NationalityClassifier; '
          'print(NationalityClassifier.from_path().predict(\'Petrov\'))"')


if __name__ == "__main__":
    main()
