"""
Labels table: class id to display name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple, Union

from .errors import InvalidInputError


@dataclass(frozen=True)
class LabelsTable:
    """
    Ordered class names indexed by class id.

    Built once from newline-delimited text; each entry is trimmed of
    surrounding whitespace.
    """
    names: Tuple[str, ...]

    @classmethod
    def from_text(cls, text: str) -> "LabelsTable":
        if text is None:
            raise InvalidInputError("Labels text is missing")
        names = tuple(line.strip() for line in text.split("\n"))
        for i, name in enumerate(names):
            logging.debug(f"Label[{i}]: '{name}' (Length: {len(name)})")
        return cls(names=names)

    @classmethod
    def from_sequence(cls, names: Sequence[str]) -> "LabelsTable":
        if names is None:
            raise InvalidInputError("Labels sequence is missing")
        return cls(names=tuple(str(n).strip() for n in names))

    @classmethod
    def coerce(cls, labels: Union["LabelsTable", str, Sequence[str]]) -> "LabelsTable":
        """Adapter: Accept a table, raw text or a sequence of names."""
        if isinstance(labels, LabelsTable):
            return labels
        if isinstance(labels, str):
            return cls.from_text(labels)
        return cls.from_sequence(labels)

    def contains(self, class_id: int) -> bool:
        """Whether class_id indexes within bounds."""
        return 0 <= class_id < len(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def __getitem__(self, class_id: int) -> str:
        if not self.contains(class_id):
            raise IndexError(f"Class id {class_id} out of range (0..{len(self.names) - 1})")
        return self.names[class_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)
