"""Data model of a boosted Haar cascade and the detector's tuning settings."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import pairwise
from typing import Iterator, Sequence

Rectangle = tuple[int, int, int, int]


@dataclass(frozen=True)
class CascadeStage:
    """One stage of the cascade: a set of weak classifiers.

    Weak classifier ``i`` uses the rectangles and weights in the range
    ``rect_num[i]:rect_num[i + 1]``. Each rectangle is ``(x, y, w, h)``
    relative to the detection window.
    """

    thresholds: Sequence[int]
    alpha1: Sequence[int]
    alpha2: Sequence[int]
    rect_num: Sequence[int]
    weights: Sequence[int]
    rectangles: Sequence[Rectangle]

    def __post_init__(self) -> None:
        for name in ("thresholds", "alpha1", "alpha2", "rect_num", "weights"):
            object.__setattr__(self, name, tuple(int(v) for v in getattr(self, name)))
        rects = tuple(tuple(int(v) for v in rect) for rect in self.rectangles)
        object.__setattr__(self, "rectangles", rects)

        count = len(self.thresholds)
        if len(self.alpha1) != count or len(self.alpha2) != count:
            raise ValueError("thresholds, alpha1 and alpha2 must have the same length")
        if len(self.rect_num) != count + 1:
            raise ValueError("rect_num must hold one entry more than thresholds")
        if self.rect_num[0] < 0 or any(b < a for a, b in pairwise(self.rect_num)):
            raise ValueError("rect_num must be non-negative and non-decreasing")
        if len(self.rectangles) != len(self.weights):
            raise ValueError("each rectangle needs exactly one weight")
        if self.rect_num[-1] > len(self.weights):
            raise ValueError("rect_num refers past the end of the rectangles")
        if any(len(rect) != 4 for rect in rects):
            raise ValueError("rectangles must be (x, y, w, h) tuples")

    @property
    def stage_size(self) -> int:
        """Number of weak classifiers in the stage."""
        return len(self.thresholds)

    @property
    def rectangles_size(self) -> int:
        """Number of rectangle coordinates (four per rectangle)."""
        return 4 * len(self.rectangles)

    def _span(self, index: int) -> slice:
        if not 0 <= index < self.stage_size:
            raise IndexError(f"weak classifier {index} out of range")
        return slice(self.rect_num[index], self.rect_num[index + 1])

    def rectangles_of(self, index: int) -> tuple[Rectangle, ...]:
        """Rectangles used by weak classifier ``index``."""
        return self.rectangles[self._span(index)]

    def weights_of(self, index: int) -> tuple[int, ...]:
        """Weights of the rectangles of weak classifier ``index``."""
        return self.weights[self._span(index)]


@dataclass(frozen=True)
class Cascade:
    """A sequence of stages, each with the threshold its sum must reach."""

    thresholds: Sequence[int]
    stages: Sequence[CascadeStage]

    def __post_init__(self) -> None:
        object.__setattr__(self, "thresholds", tuple(int(t) for t in self.thresholds))
        object.__setattr__(self, "stages", tuple(self.stages))
        if len(self.thresholds) != len(self.stages):
            raise ValueError("one threshold is needed per stage")

    @property
    def stages_num(self) -> int:
        return len(self.stages)

    def __len__(self) -> int:
        return len(self.stages)

    def __iter__(self) -> Iterator[tuple[CascadeStage, int]]:
        """Yield ``(stage, threshold)`` pairs in evaluation order."""
        return iter(zip(self.stages, self.thresholds))


@dataclass(frozen=True)
class DetectorSettings:
    """Tuning knobs of the face detector."""

    detect_stride: int = 1
    max_windows: int = 20
    non_max_threshold: int = 250
    stages_in_l1: int = 5
    total_stages: int = 25
    layers: tuple[bool, bool, bool] = (True, True, True)
    window_size: int = 24

    def __post_init__(self) -> None:
        object.__setattr__(self, "layers", tuple(bool(v) for v in self.layers))
        if self.detect_stride < 1:
            raise ValueError("detect_stride must be at least 1")
        if self.max_windows < 0:
            raise ValueError("max_windows must not be negative")
        if self.total_stages < 0:
            raise ValueError("total_stages must not be negative")
        if not 0 <= self.stages_in_l1 <= self.total_stages:
            raise ValueError("stages_in_l1 must lie between 0 and total_stages")
        if self.window_size < 1:
            raise ValueError("window_size must be at least 1")
        if len(self.layers) != 3:
            raise ValueError("layers must have three entries")