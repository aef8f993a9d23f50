"""Configuration helpers for the spatial index and the scatter sampler."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Literal, Optional

IndexingMode = Literal["grid", "legacy"]
CandidateSequence = Literal["uniform", "halton"]

INDEXING_MODES = ("grid", "legacy")
CANDIDATE_SEQUENCES = ("uniform", "halton")


@dataclass
class PointMapOptions:
    """Knobs for :class:`~artgeom.pointmap.PointMap`.

    ``indexing="grid"`` buckets shapes by origin-relative ``(cell_x, cell_y)``
    pairs. ``indexing="legacy"`` reproduces the historical flat-index formula
    and its bucket-count derived row width, for sketches that must regenerate
    old outputs exactly. The legacy formula only addresses ``resolution ** 2``
    buckets for bounds whose far edge is at a positive coordinate; insertions
    that would index past that are rejected.

    ``widen_search`` lets grid-mode distance queries look further than the
    3x3 block when ``max_distance`` exceeds one cell.
    """

    indexing: IndexingMode = "grid"
    widen_search: bool = True

    def __post_init__(self) -> None:
        if self.indexing not in INDEXING_MODES:
            raise ValueError(
                f"unknown indexing mode {self.indexing!r}; expected one of {INDEXING_MODES}"
            )


@dataclass
class ScatterOptions:
    count: int = 500
    min_distance: float = 10.0
    resolution: int = 32
    sequence: CandidateSequence = "uniform"
    max_attempts: Optional[int] = None
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.sequence not in CANDIDATE_SEQUENCES:
            raise ValueError(
                f"unknown candidate sequence {self.sequence!r}; expected one of {CANDIDATE_SEQUENCES}"
            )
        if self.count < 0:
            raise ValueError(f"count must be non-negative, got {self.count}")


_DEFAULT_OPTIONS = PointMapOptions()


def get_default_options() -> PointMapOptions:
    return copy.deepcopy(_DEFAULT_OPTIONS)


def set_default_options(options: PointMapOptions) -> None:
    global _DEFAULT_OPTIONS
    _DEFAULT_OPTIONS = copy.deepcopy(options)


__all__ = [
    "CANDIDATE_SEQUENCES",
    "CandidateSequence",
    "INDEXING_MODES",
    "IndexingMode",
    "PointMapOptions",
    "ScatterOptions",
    "get_default_options",
    "set_default_options",
]
