"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from algorithms.projection.projector import AnnotationProjector  # noqa: E402
from models.color import RGBA, ClassColorEntry, ClassColorTable  # noqa: E402
from models.labels import LabelsTable  # noqa: E402
from rendering.recording import RecordingMarkerFactory  # noqa: E402


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
labels_path: "config/labels.txt"

projector:
  max_annotations: 200
  camera_resolution: [1280, 960]
  display_size: [640, 640]
  default_color: [1.0, 1.0, 1.0, 1.0]
  class_colors:
    - class_name: "cylinder"
      color: [1.0, 0.0, 0.0, 1.0]
    - class_name: "hose"
      color: "#0000ff"

classifier:
  threshold: 0.5
  apply_softmax: false

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "projector": {
            "max_annotations": 200,
            "camera_resolution": [1280, 960],
            "display_size": [640, 640],
            "default_color": [1.0, 1.0, 1.0, 1.0],
            "class_colors": [
                {"class_name": "cylinder", "color": [1.0, 0.0, 0.0, 1.0]},
                {"class_name": "hose", "color": [0.0, 0.0, 1.0, 1.0]},
            ],
        },
        "classifier": {
            "threshold": 0.5,
            "apply_softmax": False,
        },
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }


@pytest.fixture
def labels():
    return LabelsTable.from_text("cylinder\nhose\npin\ntrigger")


@pytest.fixture
def color_table():
    return ClassColorTable(
        entries=[
            ClassColorEntry("cylinder", RGBA(1.0, 0.0, 0.0)),
            ClassColorEntry("hose", RGBA(0.0, 0.0, 1.0)),
            ClassColorEntry("pin", RGBA(0.0, 1.0, 0.0)),
        ],
        default=RGBA(0.5, 0.5, 0.5),
    )


@pytest.fixture
def factory():
    return RecordingMarkerFactory()


@pytest.fixture
def notifications():
    return []


@pytest.fixture
def make_projector(labels, color_table, factory, notifications):
    """Build a projector with a recording factory and a notification log."""

    def _make(**overrides):
        kwargs = dict(
            labels=labels,
            color_table=color_table,
            raycast=None,
            marker_factory=factory,
            camera_resolution=(1280, 960),
            display_size=(320, 320),
            on_objects_detected=notifications.append,
        )
        kwargs.update(overrides)
        return AnnotationProjector(**kwargs)

    return _make
