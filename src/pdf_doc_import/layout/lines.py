"""Clustering of positioned fragments into horizontal text lines."""

from collections.abc import Iterable, Iterator

from ..config import DEFAULT_THRESHOLDS, LayoutThresholds
from .models import PositionedTextItem, TextLine


def _line_groups(
    items: list[PositionedTextItem], tolerance_factor: float
) -> Iterator[tuple[PositionedTextItem, ...]]:
    """Yield fragment groups sharing a Y band, top to bottom.

    A fragment joins the open group when it lies within
    ``font_size * tolerance_factor`` of the Y that opened the group.
    """
    group: tuple[PositionedTextItem, ...] = ()
    reference_y = 0.0
    for item in items:
        if group and abs(item.y - reference_y) <= item.font_size * tolerance_factor:
            group = (*group, item)
            continue
        if group:
            yield group
        group = (item,)
        reference_y = item.y
    if group:
        yield group


def group_into_lines(
    items: Iterable[PositionedTextItem],
    thresholds: LayoutThresholds = DEFAULT_THRESHOLDS,
) -> tuple[TextLine, ...]:
    """Group one page's fragments into lines ordered top to bottom.

    Args:
        items: The page's fragments in any order.
        thresholds: Heuristic constants; uses ``line_tolerance_factor``.

    Returns:
        Lines whose fragments are sorted left to right. Empty input gives
        an empty tuple.
    """
    ordered = sorted(items, key=lambda item: (item.y, item.x))
    return tuple(
        TextLine.from_items(group)
        for group in _line_groups(ordered, thresholds.line_tolerance_factor)
    )
