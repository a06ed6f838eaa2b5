from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

import numpy as np

from ..core.constants import DEFAULT_MATCH_THRESHOLD
from .model import EnrolledFace, FaceDescriptor, MatchResult

logger = logging.getLogger(__name__)


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance, or ``inf`` for vectors that cannot be compared."""

    if len(a) != len(b) or len(a) == 0:
        return math.inf
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if not (np.all(np.isfinite(va)) and np.all(np.isfinite(vb))):
        return math.inf
    return float(np.linalg.norm(va - vb))


class FaceMatcher:
    """Nearest-descriptor search over the enrolled roster.

    ``threshold`` is an absolute Euclidean distance; a best distance above it
    means "not recognised".
    """

    def __init__(self, threshold: float = DEFAULT_MATCH_THRESHOLD):
        self.threshold = float(threshold)

    def distances(self, probe: FaceDescriptor, roster: Sequence[EnrolledFace]) -> np.ndarray:
        """Distance to every roster entry, in roster order."""

        out = np.full(len(roster), np.inf, dtype=np.float64)
        p = np.asarray(probe, dtype=np.float64)
        if p.size == 0 or not np.all(np.isfinite(p)):
            return out

        # Stack comparable entries so the scan is one vectorised op.
        rows: List[int] = []
        vectors: List[FaceDescriptor] = []
        for i, face in enumerate(roster):
            if len(face.descriptor) == p.size:
                rows.append(i)
                vectors.append(face.descriptor)
        if not rows:
            return out

        mat = np.asarray(vectors, dtype=np.float64)  # (K, D)
        finite = np.all(np.isfinite(mat), axis=1)
        dists = np.linalg.norm(mat - p, axis=1)
        dists[~finite] = np.inf
        out[np.asarray(rows)] = dists
        return out

    def best(self, probe: FaceDescriptor, roster: Sequence[EnrolledFace]) -> Optional[MatchResult]:
        """Closest roster entry regardless of threshold (ties -> first in roster order)."""

        if not roster:
            return None
        dists = self.distances(probe, roster)
        best_i = int(np.argmin(dists))
        best_d = float(dists[best_i])
        if math.isinf(best_d):
            return None
        return MatchResult(employee_id=roster[best_i].employee_id, distance=best_d)

    def accepts(self, result: Optional[MatchResult]) -> bool:
        """A distance exactly at the threshold still counts as a match."""
        return result is not None and result.distance <= self.threshold

    def match(self, probe: FaceDescriptor, roster: Sequence[EnrolledFace]) -> Optional[MatchResult]:
        result = self.best(probe, roster)
        if result is None:
            logger.debug("No comparable descriptor in roster of %d", len(roster))
            return None
        if not self.accepts(result):
            logger.debug(
                "Best candidate employee=%s distance=%.4f above threshold=%.4f",
                result.employee_id,
                result.distance,
                self.threshold,
            )
            return None
        return result
