"""
Smoke tests for typed models and adapters.
"""

import numpy as np
import pytest

from models.color import RGBA, ClassColorEntry, ClassColorTable, normalize_class_key
from models.config import Config, ClassifierConfig, ProjectorConfig
from models.detection import (
    Annotation,
    RawDetection,
    detections_from_tensors,
    detections_to_numpy,
)
from models.errors import InvalidInputError
from models.labels import LabelsTable


class TestRGBA:
    def test_from_list(self):
        assert RGBA.from_value([1, 0, 0]) == RGBA(1.0, 0.0, 0.0, 1.0)
        assert RGBA.from_value([0, 0, 1, 0.5]).a == 0.5

    def test_from_hex(self):
        assert RGBA.from_value("#ff0000") == RGBA(1.0, 0.0, 0.0, 1.0)
        assert RGBA.from_value("#00000000").a == 0.0

    def test_invalid_values(self):
        with pytest.raises(ValueError):
            RGBA.from_value([1, 0])
        with pytest.raises(ValueError):
            RGBA.from_value([2.0, 0, 0])
        with pytest.raises(ValueError):
            RGBA.from_value("#fff")

    def test_to_bgr255(self):
        assert RGBA(1.0, 0.0, 0.0).to_bgr255() == (0, 0, 255)
        assert RGBA(0.0, 1.0, 0.0).to_bgr255() == (0, 255, 0)


class TestClassColorTable:
    def test_case_and_whitespace_insensitive(self, color_table):
        assert color_table.resolve("  Hose ") == RGBA(0.0, 0.0, 1.0)
        assert color_table.resolve("CYLINDER") == RGBA(1.0, 0.0, 0.0)

    def test_configured_name_is_normalized_too(self):
        table = ClassColorTable([ClassColorEntry("  Hose\t", RGBA(0.0, 0.0, 1.0))])
        assert table.resolve("hose") == RGBA(0.0, 0.0, 1.0)

    def test_first_match_wins(self):
        table = ClassColorTable(
            entries=[
                ClassColorEntry("pin", RGBA(0.0, 1.0, 0.0)),
                ClassColorEntry("PIN", RGBA(1.0, 0.0, 0.0)),
            ],
        )
        assert table.resolve("Pin") == RGBA(0.0, 1.0, 0.0)

    def test_no_match_uses_default(self, color_table):
        assert color_table.resolve("trigger") == RGBA(0.5, 0.5, 0.5)

    def test_empty_name_uses_default(self, color_table):
        assert color_table.resolve("") == RGBA(0.5, 0.5, 0.5)
        assert color_table.resolve(None) == RGBA(0.5, 0.5, 0.5)

    def test_deterministic_across_calls(self, color_table):
        first = [color_table.resolve(n) for n in ("pin", "hose", "x", "pin")]
        second = [color_table.resolve(n) for n in ("pin", "x", "hose", "pin")]
        assert first[0] == second[0] == first[3]
        assert first[1] == second[2]

    def test_from_config(self):
        table = ClassColorTable.from_config(
            [{"class_name": "hose", "color": "#0000ff"}],
            default_color=[1, 1, 1, 1],
        )
        assert len(table) == 1
        assert table.resolve("HOSE") == RGBA(0.0, 0.0, 1.0)
        assert table.default == RGBA(1.0, 1.0, 1.0)

    def test_normalize_class_key(self):
        assert normalize_class_key("  Fire_Extinguisher ") == "fire_extinguisher"
        assert normalize_class_key(None) == ""


class TestLabelsTable:
    def test_from_text_trims_entries(self):
        labels = LabelsTable.from_text(" cylinder \r\nhose\n  pin")
        assert list(labels) == ["cylinder", "hose", "pin"]

    def test_trailing_newline_keeps_empty_entry(self):
        labels = LabelsTable.from_text("a\nb\n")
        assert len(labels) == 3
        assert labels[2] == ""

    def test_bounds(self, labels):
        assert labels.contains(0)
        assert labels.contains(3)
        assert not labels.contains(4)
        assert not labels.contains(-1)
        with pytest.raises(IndexError):
            labels[4]

    def test_coerce(self, labels):
        assert LabelsTable.coerce(labels) is labels
        assert list(LabelsTable.coerce(["a ", " b"])) == ["a", "b"]
        assert list(LabelsTable.coerce("x\ny")) == ["x", "y"]

    def test_missing_text_fails(self):
        with pytest.raises(InvalidInputError):
            LabelsTable.from_text(None)


class TestDetectionAdapters:
    def test_from_tensors(self):
        boxes = np.array([[320, 320, 64, 64], [10, 20, 30, 40]], dtype=np.float32)
        labels = np.array([0, 2])
        detections = detections_from_tensors(boxes, labels)
        assert len(detections) == 2
        assert detections[0] == RawDetection((320.0, 320.0), (64.0, 64.0), 0)
        assert detections[1].class_id == 2

    def test_empty_tensors(self):
        assert detections_from_tensors(np.zeros((0, 4)), np.zeros((0,))) == []

    def test_shape_mismatch_fails(self):
        with pytest.raises(InvalidInputError):
            detections_from_tensors(np.zeros((2, 4)), np.zeros((3,)))
        with pytest.raises(InvalidInputError):
            detections_from_tensors(np.zeros((2, 3)), np.zeros((2,)))
        with pytest.raises(InvalidInputError):
            detections_from_tensors(None, np.zeros((2,)))

    def test_to_numpy(self):
        boxes, labels = detections_to_numpy([RawDetection((1, 2), (3, 4), 5)])
        assert boxes.shape == (1, 4)
        assert labels.tolist() == [5]

    def test_is_finite(self):
        assert RawDetection((1, 2), (3, 4), 0).is_finite
        assert not RawDetection((float("nan"), 2), (3, 4), 0).is_finite
        assert not RawDetection((1, 2), (float("inf"), 4), 0).is_finite

    def test_annotation_depth(self):
        a = Annotation((0, 0), (1, 1), "Class: x", "x", world_position=(1.0, 2.0, 3.0))
        assert a.has_world_position
        assert a.depth == 3.0
        b = Annotation((0, 0), (1, 1), "Class: x", "x")
        assert b.depth == 0.0


class TestConfig:
    def test_defaults(self):
        cfg = Config.from_dict({})
        assert cfg.projector.max_annotations == 200
        assert cfg.classifier is None
        assert cfg.log_level == "INFO"

    def test_roundtrip(self, valid_config):
        cfg = Config.from_dict(valid_config)
        assert cfg.classifier == ClassifierConfig(threshold=0.5, apply_softmax=False)
        assert cfg.projector.camera_resolution == [1280, 960]
        again = Config.from_dict(cfg.to_dict())
        assert again == cfg

    def test_projector_color_table(self, valid_config):
        projector = ProjectorConfig.from_dict(valid_config["projector"])
        table = projector.color_table()
        assert table.resolve("Cylinder") == RGBA(1.0, 0.0, 0.0, 1.0)
        assert table.resolve("unknown") == RGBA(1.0, 1.0, 1.0, 1.0)
