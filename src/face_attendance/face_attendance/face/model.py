from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

FaceDescriptor = Tuple[float, ...]


@dataclass(frozen=True)
class EnrolledFace:
    """Một phần tử của roster: nhân viên + descriptor đã đăng ký."""

    employee_id: int
    descriptor: FaceDescriptor


@dataclass(frozen=True)
class MatchResult:
    employee_id: int
    distance: float

    @property
    def confidence(self) -> float:
        """Relative score (1 - distance). Not a probability; may leave [0, 1]."""
        return 1.0 - self.distance
