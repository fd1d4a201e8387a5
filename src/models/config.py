"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .color import ClassColorTable


@dataclass
class ProjectorConfig:
    """Annotation projector configuration."""
    max_annotations: int = 200
    camera_resolution: List[int] = field(default_factory=lambda: [1280, 960])
    display_size: List[float] = field(default_factory=lambda: [640.0, 640.0])
    default_color: List[float] = field(default_factory=lambda: [1.0, 1.0, 1.0, 1.0])
    class_colors: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ProjectorConfig":
        """Adapter: Create from config dictionary."""
        return cls(
            max_annotations=d.get("max_annotations", 200),
            camera_resolution=d.get("camera_resolution", [1280, 960]),
            display_size=d.get("display_size", [640.0, 640.0]),
            default_color=d.get("default_color", [1.0, 1.0, 1.0, 1.0]),
            class_colors=d.get("class_colors") or [],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_annotations": self.max_annotations,
            "camera_resolution": self.camera_resolution,
            "display_size": self.display_size,
            "default_color": self.default_color,
            "class_colors": self.class_colors,
        }

    def color_table(self) -> ClassColorTable:
        return ClassColorTable.from_config(self.class_colors, self.default_color)


@dataclass
class ClassifierConfig:
    """Threshold classifier configuration."""
    threshold: float = 0.5
    apply_softmax: bool = False

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ClassifierConfig":
        return cls(
            threshold=d.get("threshold", 0.5),
            apply_softmax=d.get("apply_softmax", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "threshold": self.threshold,
            "apply_softmax": self.apply_softmax,
        }


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    projector: ProjectorConfig = field(default_factory=ProjectorConfig)
    classifier: Optional[ClassifierConfig] = None
    labels_path: Optional[str] = None
    log_path: str = "logs/overlay.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        projector = ProjectorConfig.from_dict(d.get("projector", {}) or {})
        classifier_dict = d.get("classifier")
        classifier = ClassifierConfig.from_dict(classifier_dict) if classifier_dict else None

        return cls(
            projector=projector,
            classifier=classifier,
            labels_path=d.get("labels_path"),
            log_path=d.get("log_path", "logs/overlay.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary (for saving or passing to existing code)."""
        d: Dict[str, Any] = {
            "projector": self.projector.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
        if self.classifier:
            d["classifier"] = self.classifier.to_dict()
        if self.labels_path is not None:
            d["labels_path"] = self.labels_path
        return d
