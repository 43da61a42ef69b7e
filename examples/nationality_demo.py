#!/usr/bin/env python3
"""
Demonstration of nationality prediction for single names and lists.

Usage:
    python examples/nationality_demo.py [path/to/features.json]
"""
import sys

from name_nationality import NationalityClassifier


def main():
    """Show predictions, probabilities and confidence filtering."""
    if len(sys.argv) > 1:
        classifier = NationalityClassifier.from_path(sys.argv[1])
    else:
        classifier = NationalityClassifier.from_path()

    print("Name Nationality Classifier - Demo")
    print("=" * 50)
    print()

    names = ["Wang", "Petrov", "John Smith", "Наталья Гор", "彦媛", "Zhang", "Ivanov"]

    print("Example 1: Predictions")
    print("-" * 50)
    for name, label in zip(names, classifier.predict_list(names)):
        print(f"{name:<20} {label:<15}")
    print()

    print("Example 2: Probabilities")
    print("-" * 50)
    for name in names[:3]:
        probabilities = classifier.predict_probabilities(name)
        formatted = ", ".join(f"{label}={p:.3f}" for label, p in probabilities.items())
        print(f"{name:<20} {formatted}")
    print()

    print("Example 3: Confidence threshold 0.8")
    print("-" * 50)
    for name, (label, confidence) in zip(names, classifier.predict_list_with_confidence(names, 0.8)):
        print(f"{name:<20} {label:<15} {confidence:.3f}")
    print()


if __name__ == "__main__":
    main()
