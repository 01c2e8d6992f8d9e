from __future__ import annotations

from typing import Callable

# card id -> rendered height of the card's text column, or None if not measurable
MeasureContent = Callable[[str], float | None]


def clamp_image_height(content_height: float, cap: int) -> int:
    return int(min(max(0.0, content_height), cap))


class LayoutAdjuster:
    """Keeps card images no taller than their text, up to a fixed cap.

    Needs re-running after every render that adds image cards and on resize,
    since text height depends on the rendered width.
    """

    def __init__(self, cap: int = 300) -> None:
        self.cap = cap
        self._card_ids: tuple[str, ...] = ()

    @property
    def card_ids(self) -> tuple[str, ...]:
        return self._card_ids

    def track(self, card_ids: tuple[str, ...], *, has_images: bool) -> None:
        self._card_ids = card_ids if has_images else ()

    def adjust(self, measure: MeasureContent) -> dict[str, int]:
        heights: dict[str, int] = {}
        for card_id in self._card_ids:
            content_height = measure(card_id)
            if content_height is None:
                continue
            heights[card_id] = clamp_image_height(content_height, self.cap)
        return heights
