"""
Detection overlay replay tool.

Replays recorded inference output through the annotation projector and the
threshold classifier, logging what would be shown on the AR display.

Usage:
    python src/main.py --config config/config.yaml --detections recordings/run1.npz --display

Arguments:
    --config: Path to configuration file
    --detections: Recorded inference output (.npz)
    --labels: Labels file (overrides labels_path from config)
    --display: Show the OpenCV marker preview
"""

import argparse
import logging
import math
import os
import sys
from typing import Any, Dict, Optional, Tuple

import yaml

from inference.replay import ReplayBackend
from models.color import RGBA
from models.labels import LabelsTable
from ops.logging import setup_logging, VALID_LEVELS
from pipeline.engine import create_engine_from_config
from rendering.opencv_markers import OpenCVMarkerFactory


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Fold override into base in place; nested sections merge key by key."""
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _read_yaml(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load the overlay configuration.

    Files are read from the directory of config_path, later ones overriding
    earlier ones:
    - default.yaml: shipped projector, classifier and logging defaults
    - config.yaml: per-device overrides (camera resolution, class colors)
    - config_path itself, when it is a different file

    Exits the process when a file cannot be parsed.
    """
    config_dir = os.path.dirname(config_path)
    device_path = os.path.join(config_dir, "config.yaml")
    try:
        merged = _deep_merge(
            _read_yaml(os.path.join(config_dir, "default.yaml")),
            _read_yaml(device_path),
        )
        if os.path.abspath(config_path) != os.path.abspath(device_path):
            merged = _deep_merge(merged, _read_yaml(config_path))
        return merged
    except (OSError, yaml.YAMLError) as e:
        logging.error(f"Failed to load configuration from {config_dir or '.'}: {e}")
        sys.exit(1)


def _is_positive_pair(value: Any) -> bool:
    return (
        isinstance(value, list)
        and len(value) == 2
        and all(isinstance(x, (int, float)) and math.isfinite(x) and x > 0 for x in value)
    )


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration file structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    required_sections = ['projector', 'log_path', 'log_level']
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    # Validate projector settings
    projector = config.get('projector') or {}
    max_annotations = projector.get('max_annotations', 200)
    if not isinstance(max_annotations, int) or isinstance(max_annotations, bool) or max_annotations < 1:
        return False, "projector.max_annotations must be a positive integer"

    if 'camera_resolution' not in projector:
        return False, "Missing projector.camera_resolution"
    if not _is_positive_pair(projector['camera_resolution']):
        return False, "projector.camera_resolution must be a list of positive [width, height]"
    if 'display_size' in projector and not _is_positive_pair(projector['display_size']):
        return False, "projector.display_size must be a list of positive [width, height]"

    try:
        RGBA.from_value(projector.get('default_color', [1.0, 1.0, 1.0, 1.0]))
    except (TypeError, ValueError) as e:
        return False, f"projector.default_color is invalid: {e}"

    class_colors = projector.get('class_colors') or []
    if not isinstance(class_colors, list):
        return False, "projector.class_colors must be a list"
    for i, entry in enumerate(class_colors):
        if not isinstance(entry, dict) or not isinstance(entry.get('class_name'), str):
            return False, f"projector.class_colors[{i}] needs a class_name string"
        try:
            RGBA.from_value(entry.get('color'))
        except (TypeError, ValueError) as e:
            return False, f"projector.class_colors[{i}].color is invalid: {e}"

    # Optional classifier settings
    classifier = config.get('classifier') or {}
    if classifier:
        threshold = classifier.get('threshold', 0.5)
        if not isinstance(threshold, (int, float)) or not math.isfinite(threshold):
            return False, "classifier.threshold must be a finite number"
        if not isinstance(classifier.get('apply_softmax', False), bool):
            return False, "classifier.apply_softmax must be a boolean"

    if config.get('labels_path') is not None and not isinstance(config['labels_path'], str):
        return False, "labels_path must be a string"

    # Validate log settings
    if config['log_level'] not in VALID_LEVELS:
        return False, f"log_level must be one of: {', '.join(VALID_LEVELS)}"

    return True, None


def load_labels(labels_path: str) -> LabelsTable:
    """Read a newline-delimited UTF-8 labels file."""
    with open(labels_path, "r", encoding="utf-8") as f:
        labels = LabelsTable.from_text(f.read())
    logging.info(f"Loaded {len(labels)} labels from {labels_path}")
    return labels


def main():
    """Main application function."""
    parser = argparse.ArgumentParser(description='Detection Overlay - recorded inference replay')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--detections', type=str, required=True,
                        help='Recorded inference output (.npz)')
    parser.add_argument('--labels', type=str, default=None,
                        help='Labels file (overrides labels_path)')
    parser.add_argument('--display', action='store_true',
                        help='Enable marker preview window')
    args = parser.parse_args()

    # Load configuration
    config = load_config(args.config)

    # Validate configuration
    is_valid, error_msg = validate_config(config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        sys.exit(1)

    # Setup logging
    setup_logging(config['log_path'], config['log_level'])
    logging.info("Starting Detection Overlay replay")

    labels_path = args.labels or config.get('labels_path')
    if not labels_path:
        logging.error("No labels file given (use --labels or labels_path)")
        sys.exit(1)

    try:
        labels = load_labels(labels_path)
        source = ReplayBackend.from_npz(args.detections)
    except (OSError, ValueError) as e:
        logging.error(f"Failed to load inputs: {e}")
        sys.exit(1)

    display_size = config['projector'].get('display_size', [640, 640])
    factory = OpenCVMarkerFactory(display_size=tuple(display_size))

    def on_objects_detected(count: int) -> None:
        logging.info(f"Objects detected: {count}")

    engine = create_engine_from_config(
        config,
        source=source,
        labels=labels,
        marker_factory=factory,
        display=args.display,
        on_objects_detected=on_objects_detected,
    )
    stats = engine.run()

    logging.info(
        f"Replay finished: cycles={stats.cycle_count}, annotations={stats.annotation_count}, "
        f"failed={stats.failed_cycles}, pool_size={len(engine.annotate_stage.projector.pool)}"
    )


if __name__ == "__main__":
    main()
