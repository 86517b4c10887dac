"""Sizes of the image pyramid the detector scans."""

from __future__ import annotations


def pyramid_levels(
    width: int, height: int, count: int, factor: float = 1.25
) -> list[tuple[int, int]]:
    """Return ``count`` level sizes, starting at ``(width, height)``.

    Each following level divides the previous size by ``factor`` and
    truncates toward zero.
    """
    if width < 1 or height < 1:
        raise ValueError("level dimensions must be positive")
    if count < 0:
        raise ValueError("count must not be negative")
    if factor <= 0:
        raise ValueError("factor must be positive")

    levels: list[tuple[int, int]] = []
    size = (width, height)
    for _ in range(count):
        if size[0] < 1 or size[1] < 1:
            raise ValueError(f"pyramid level {size[0]}x{size[1]} is empty")
        levels.append(size)
        size = (int(size[0] / factor), int(size[1] / factor))
    return levels