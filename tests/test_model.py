"""Unit tests for the Model container and its JSON loader."""
import dataclasses
import json
import logging

import numpy as np
import pytest

from name_nationality.exceptions import ModelError, ModelInvalidError, ModelLoadError
from name_nationality.model import Model


class TestModelConstruction:
    """Tests for building and validating a Model."""

    def test_from_dict(self, model_data):
        model = Model.from_dict(model_data)

        assert model.features == ("a", "b", " a")
        assert model.classes == ("x", "y")
        assert model.coefficients.shape == (2, 3)
        assert model.intercepts.shape == (2,)
        assert model.num_features == 3
        assert model.num_classes == 2

    def test_feature_index(self, model_data):
        model = Model.from_dict(model_data)
        assert dict(model.feature_index) == {"a": 0, "b": 1, " a": 2}

    def test_ignores_extra_keys(self, model_data):
        model_data["version"] = 3
        assert Model.from_dict(model_data).classes == ("x", "y")

    def test_accepts_numpy_arrays(self, model_data):
        model = Model(
            features=model_data["features"],
            classes=model_data["classes"],
            coefficients=np.array(model_data["coefficients"]),
            intercepts=np.array(model_data["intercepts"]),
        )
        assert model == Model.from_dict(model_data)

    def test_empty_vocabulary(self):
        model = Model(features=[], classes=["x", "y"], coefficients=[[], []], intercepts=[0.0, 1.0])
        assert model.coefficients.shape == (2, 0)

    def test_copies_input(self, model_data):
        """Changing the source lists afterwards does not affect the model."""
        model = Model.from_dict(model_data)
        model_data["coefficients"][0][0] = 99.0
        model_data["features"].append("zzz")

        assert model.coefficients[0, 0] == 1.0
        assert model.num_features == 3

    def test_equality(self, model_data):
        assert Model.from_dict(model_data) == Model.from_dict(model_data)

        model_data["intercepts"] = [0.0, 0.2]
        other = Model.from_dict(model_data)
        model_data["intercepts"] = [0.0, 0.1]
        assert Model.from_dict(model_data) != other


class TestModelImmutability:
    """The model is shared between threads and must not change after construction."""

    def test_fields_cannot_be_reassigned(self, model_data):
        model = Model.from_dict(model_data)
        with pytest.raises(dataclasses.FrozenInstanceError):
            model.classes = ("z",)

    def test_arrays_are_read_only(self, model_data):
        model = Model.from_dict(model_data)

        with pytest.raises(ValueError):
            model.coefficients[0, 0] = 5.0
        with pytest.raises(ValueError):
            model.intercepts[0] = 5.0

    def test_arrays_cannot_be_made_writeable(self, model_data):
        model = Model.from_dict(model_data)

        with pytest.raises(ValueError):
            model.coefficients.flags.writeable = True
        with pytest.raises(ValueError):
            model.intercepts.flags.writeable = True

        assert model.coefficients[0, 0] == 1.0

    def test_feature_index_is_read_only(self, model_data):
        model = Model.from_dict(model_data)
        with pytest.raises(TypeError):
            model.feature_index["new"] = 3

    def test_labels_are_tuples(self, model_data):
        model = Model.from_dict(model_data)
        assert isinstance(model.features, tuple)
        assert isinstance(model.classes, tuple)


class TestModelValidation:
    """Malformed parameters fail at construction with ModelInvalidError."""

    def test_coefficient_row_length_mismatch(self, model_data):
        model_data["coefficients"][1] = [0.0, 1.0]
        with pytest.raises(ModelInvalidError, match="row 1 .* has 2 values but there are 3 features"):
            Model.from_dict(model_data)

    def test_coefficient_row_count_mismatch(self, model_data):
        model_data["coefficients"] = model_data["coefficients"][:1]
        with pytest.raises(ModelInvalidError, match="1 rows but there are 2 classes"):
            Model.from_dict(model_data)

    def test_coefficients_nested_too_deep(self, model_data):
        model_data["coefficients"] = [[[1.0], [0.0], [0.5]], [[0.0], [1.0], [-0.5]]]
        with pytest.raises(ModelInvalidError, match="'coefficients' has shape \\(2, 3, 1\\)"):
            Model.from_dict(model_data)

    def test_coefficients_nested_too_deep_with_extra_values(self, model_data):
        model_data["coefficients"] = [
            [[1, 2], [3, 4], [5, 6]],
            [[7, 8], [9, 10], [11, 12]],
        ]
        with pytest.raises(ModelInvalidError, match="'coefficients' has shape \\(2, 3, 2\\)"):
            Model.from_dict(model_data)

    def test_coefficients_nested_ragged(self, model_data):
        model_data["coefficients"] = [[[1.0], [0.0, 2.0], [0.5]], [[0.0], [1.0], [-0.5]]]
        with pytest.raises(ModelInvalidError, match="'coefficients'"):
            Model.from_dict(model_data)

    def test_intercept_count_mismatch(self, model_data):
        model_data["intercepts"] = [0.0, 0.1, 0.2]
        with pytest.raises(ModelInvalidError, match="'intercepts'"):
            Model.from_dict(model_data)

    def test_no_classes(self):
        with pytest.raises(ModelInvalidError, match="at least one class"):
            Model(features=["a"], classes=[], coefficients=[], intercepts=[])

    def test_duplicate_features(self, model_data):
        model_data["features"] = ["a", "b", "a"]
        with pytest.raises(ModelInvalidError, match="'features' contains duplicates: \\['a'\\]"):
            Model.from_dict(model_data)

    def test_duplicate_classes(self, model_data):
        model_data["classes"] = ["x", "x"]
        with pytest.raises(ModelInvalidError, match="'classes' contains duplicates"):
            Model.from_dict(model_data)

    def test_non_string_feature(self, model_data):
        model_data["features"] = ["a", 2, "c"]
        with pytest.raises(ModelInvalidError, match="index 1 must be a string"):
            Model.from_dict(model_data)

    def test_string_instead_of_list(self, model_data):
        model_data["classes"] = "xy"
        with pytest.raises(ModelInvalidError, match="'classes' must be a list"):
            Model.from_dict(model_data)

    def test_non_numeric_coefficient(self, model_data):
        model_data["coefficients"][0][1] = "heavy"
        with pytest.raises(ModelInvalidError, match="only numbers"):
            Model.from_dict(model_data)

    def test_nan_intercept(self, model_data):
        model_data["intercepts"] = [float("nan"), 0.0]
        with pytest.raises(ModelInvalidError, match="NaN or infinite"):
            Model.from_dict(model_data)

    def test_missing_field(self, model_data):
        del model_data["intercepts"]
        with pytest.raises(ModelInvalidError, match="missing fields: intercepts"):
            Model.from_dict(model_data)

    def test_not_a_mapping(self):
        with pytest.raises(ModelInvalidError, match="must be a JSON object"):
            Model.from_dict([1, 2, 3])

    def test_is_value_error(self, model_data):
        """ModelInvalidError can be caught as ValueError or ModelError."""
        model_data["intercepts"] = [0.0]
        with pytest.raises(ValueError):
            Model.from_dict(model_data)
        with pytest.raises(ModelError):
            Model.from_dict(model_data)


class TestModelLoad:
    """Tests for Model.load."""

    def test_load(self, tmp_path, model_data):
        path = tmp_path / "model.json"
        path.write_text(json.dumps(model_data), encoding="utf-8")

        assert Model.load(path) == Model.from_dict(model_data)

    def test_load_accepts_str_path(self, tmp_path, model_data):
        path = tmp_path / "model.json"
        path.write_text(json.dumps(model_data), encoding="utf-8")

        assert Model.load(str(path)).classes == ("x", "y")

    def test_missing_file(self, tmp_path):
        path = tmp_path / "missing.json"

        with pytest.raises(ModelLoadError, match="Failed to load model from") as exc_info:
            Model.load(path)

        assert exc_info.value.path == path
        assert isinstance(exc_info.value.cause, FileNotFoundError)
        assert exc_info.value.__cause__ is exc_info.value.cause

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "model.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ModelLoadError) as exc_info:
            Model.load(path)

        assert isinstance(exc_info.value.cause, json.JSONDecodeError)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "model.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")

        with pytest.raises(ModelLoadError, match="expected a JSON object"):
            Model.load(path)

    def test_missing_field(self, tmp_path, model_data):
        del model_data["coefficients"]
        path = tmp_path / "model.json"
        path.write_text(json.dumps(model_data), encoding="utf-8")

        with pytest.raises(ModelLoadError, match="coefficients"):
            Model.load(path)

    @pytest.mark.parametrize(
        "content",
        ["[1, 2, 3]", '{"features": [], "classes": ["x"]}', "{not json"],
    )
    def test_load_failures_are_logged(self, tmp_path, caplog, content):
        path = tmp_path / "model.json"
        path.write_text(content, encoding="utf-8")

        with caplog.at_level(logging.ERROR, logger="name_nationality.model"):
            with pytest.raises(ModelLoadError):
                Model.load(path)

        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert str(path) in errors[0].getMessage()

    def test_deeply_nested_coefficients_are_invalid_not_value_error(self, tmp_path, model_data):
        model_data["coefficients"] = [[[1.0], [0.0], [0.5]], [[0.0], [1.0], [-0.5]]]
        path = tmp_path / "model.json"
        path.write_text(json.dumps(model_data), encoding="utf-8")

        with pytest.raises(ModelInvalidError, match="has shape"):
            Model.load(path)

    def test_dimension_mismatch_is_invalid_not_load_error(self, tmp_path, model_data):
        model_data["coefficients"][0] = [1.0]
        path = tmp_path / "model.json"
        path.write_text(json.dumps(model_data), encoding="utf-8")

        with pytest.raises(ModelInvalidError):
            Model.load(path)

    def test_load_fixture_with_unicode_features(self, toy_model):
        assert "на" in toy_model.feature_index
        assert "彦" in toy_model.feature_index
        assert toy_model.classes == ("china", "russia", "rest")


class TestModelSave:
    """Tests for Model.to_dict and Model.save."""

    def test_to_dict(self, model_data):
        assert Model.from_dict(model_data).to_dict() == model_data

    def test_save_and_load(self, tmp_path, toy_model):
        path = tmp_path / "nested" / "features.json"
        toy_model.save(path)

        assert path.exists()
        assert Model.load(path) == toy_model

    def test_save_writes_only_model_fields(self, tmp_path, toy_model):
        path = tmp_path / "features.json"
        toy_model.save(path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert set(data) == {"features", "classes", "coefficients", "intercepts"}
