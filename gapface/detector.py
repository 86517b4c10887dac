"""Multi-scale face detection with a boosted Haar cascade."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from .cascade import Cascade, CascadeStage, DetectorSettings
from .draw import draw_rectangle
from .kernels import (
    evaluate_cascade,
    integral_image,
    resize_bilinear,
    squared_integral_image,
)
from .pyramid import pyramid_levels

BASE_LEVEL = (64, 48)
LEVEL_FACTOR = 1.25
PREVIEW_SIZE = (160, 120)
FRAME_THICKNESS = 5

_SHORT_SIZE = 2
_POINTER_SIZE = 4


@dataclass(frozen=True)
class Detection:
    """A detected window in input-image coordinates."""

    x: int
    y: int
    w: int
    h: int
    score: int


def rect_intersect_area(a: Detection, b: Detection) -> int:
    """Area shared by two rectangles, 0 when they do not overlap."""
    x = max(a.x, b.x)
    y = max(a.y, b.y)
    size_x = min(a.x + a.w, b.x + b.w) - x
    size_y = min(a.y + a.h, b.y + b.h) - y
    if size_x <= 0 or size_y <= 0:
        return 0
    return size_x * size_y


def non_max_suppress(
    detections: Iterable[Detection], threshold: int = 250
) -> list[Detection]:
    """Drop the weaker of every pair overlapping by at least ``threshold`` pixels.

    On equal scores the later detection is dropped. Survivors keep their order.
    """
    items = list(detections)
    removed = [False] * len(items)
    for i, current in enumerate(items):
        if removed[i]:
            continue
        for j, other in enumerate(items):
            if j == i or removed[j]:
                continue
            if rect_intersect_area(current, other) >= threshold:
                if other.score > current.score:
                    removed[i] = True
                    break
                removed[j] = True
    return [item for item, gone in zip(items, removed) if not gone]


def stage_footprint(stage: CascadeStage) -> int:
    """Bytes reserved for a stage buffer, counting per-entry 32-bit pointers."""
    return (
        2 * _SHORT_SIZE
        + stage.stage_size * 4 * _POINTER_SIZE
        + stage.rectangles_size * _POINTER_SIZE
        + (stage.rectangles_size // 4) * _POINTER_SIZE
    )


def largest_stage_footprint(cascade: Cascade) -> int:
    """Largest :func:`stage_footprint` among the stages, 0 for no stages."""
    return max((stage_footprint(stage) for stage in cascade.stages), default=0)


@dataclass
class DetectionResult:
    """Outcome of one detector run on a frame."""

    detections: list[Detection]
    candidate_count: int
    image: bytearray
    preview: bytearray

    @property
    def num_faces(self) -> int:
        return len(self.detections)


class FaceDetector:
    """Scans three pyramid levels of a gray frame with a cascade."""

    def __init__(self, cascade: Cascade, settings: DetectorSettings | None = None):
        settings = settings if settings is not None else DetectorSettings()
        used = settings.total_stages
        if len(cascade) < used:
            raise ValueError(
                f"cascade has {len(cascade)} stages, {used} are required"
            )
        self.cascade = Cascade(cascade.thresholds[:used], cascade.stages[:used])
        self.settings = settings
        self.levels = pyramid_levels(*BASE_LEVEL, 3, LEVEL_FACTOR)

    def _candidates(
        self, image: Sequence[int], width: int, height: int
    ) -> list[Detection]:
        settings = self.settings
        win = settings.window_size
        stride = settings.detect_stride
        found: list[Detection] = []
        for enabled, (wout, hout) in zip(settings.layers, self.levels):
            if not enabled:
                continue
            scaled = resize_bilinear(image, width, height, wout, hout)
            if win > wout or win > hout:
                continue
            response = evaluate_cascade(
                integral_image(scaled, wout, hout),
                squared_integral_image(scaled, wout, hout),
                wout,
                hout,
                self.cascade,
                win,
                win,
                stride,
            )
            map_w = wout - win + 1
            for i in range(0, hout - win + 1, stride):
                for j in range(0, map_w, stride):
                    result = response[i * map_w + j]
                    if result == 0:
                        continue
                    if len(found) >= settings.max_windows:
                        return found
                    found.append(
                        Detection(
                            x=(j * width) // wout,
                            y=(i * height) // hout,
                            w=(win * width) // wout,
                            h=(win * height) // hout,
                            score=result,
                        )
                    )
        return found

    def detect(self, image: Sequence[int], width: int, height: int) -> list[Detection]:
        """Faces found in a gray frame, after non-maximum suppression."""
        return non_max_suppress(
            self._candidates(image, width, height), self.settings.non_max_threshold
        )

    def annotate(
        self,
        image: bytearray,
        width: int,
        height: int,
        detections: Iterable[Detection],
    ) -> None:
        """Draw a thick black frame around each detection, in place."""
        for d in detections:
            for k in range(FRAME_THICKNESS):
                draw_rectangle(
                    image, height, width, d.x - k, d.y - k, d.w + 2 * k, d.h + 2 * k, 0
                )

    def run(self, image: Sequence[int], width: int, height: int) -> DetectionResult:
        """Detect faces, frame them on a copy of the frame and make a preview."""
        candidates = self._candidates(image, width, height)
        detections = non_max_suppress(candidates, self.settings.non_max_threshold)
        annotated = bytearray(image[: width * height])
        self.annotate(annotated, width, height, detections)
        preview = resize_bilinear(annotated, width, height, *PREVIEW_SIZE)
        return DetectionResult(
            detections=detections,
            candidate_count=len(candidates),
            image=annotated,
            preview=preview,
        )