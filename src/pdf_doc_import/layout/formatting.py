"""Character formatting derived from raw PDF font attributes."""

import math
import re
from collections.abc import Iterable, Sequence

from .models import CharacterFormatting, FormattingRun, PositionedTextItem

FALLBACK_FONT_FAMILY = "Arial"

# Substring of the normalized font name -> canonical family, checked in order
FONT_ALIASES: tuple[tuple[str, str], ...] = (
    ("helvetica", "Arial"),
    ("arial", "Arial"),
    ("times", "Times New Roman"),
    ("timesnewroman", "Times New Roman"),
    ("courier", "Courier New"),
    ("couriernew", "Courier New"),
    ("georgia", "Georgia"),
    ("verdana", "Verdana"),
    ("tahoma", "Tahoma"),
    ("trebuchet", "Trebuchet MS"),
    ("impact", "Impact"),
    ("comic", "Comic Sans MS"),
)

_SEPARATORS = re.compile(r"[-_,.\s]")
_STYLE_KEYWORDS = re.compile(
    r"bold|italic|oblique|regular|medium|light|black|heavy", re.IGNORECASE
)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def map_font_family(font_name: str) -> str:
    """Map a raw PDF font name such as ``ABCDEE+Helvetica-Bold`` to a family."""
    normalized = _STYLE_KEYWORDS.sub("", _SEPARATORS.sub("", font_name.lower()))
    for alias, family in FONT_ALIASES:
        if alias in normalized:
            return family
    return FALLBACK_FONT_FAMILY


def map_formatting(item: PositionedTextItem) -> CharacterFormatting:
    color = (
        f"#{item.color.r:02x}{item.color.g:02x}{item.color.b:02x}"
        if item.color
        else "#000000"
    )
    return CharacterFormatting(
        font_family=map_font_family(item.font_name),
        font_size=round_half_up(item.font_size),
        font_weight=item.font_weight or "normal",
        font_style=item.font_style or "normal",
        color=color,
    )


def merge_formatting_runs(runs: Iterable[FormattingRun]) -> tuple[FormattingRun, ...]:
    """Merge adjacent runs whose formatting is identical.

    Zero-width runs are dropped, so the result is the unique minimal run
    list covering the same characters.
    """
    merged: list[FormattingRun] = []
    for run in runs:
        if run.end_index <= run.start_index:
            continue
        if (
            merged
            and merged[-1].formatting == run.formatting
            and merged[-1].end_index == run.start_index
        ):
            merged[-1] = merged[-1].model_copy(update={"end_index": run.end_index})
        else:
            merged.append(run)
    return tuple(merged)


def _append_separator(text: str, runs: list[FormattingRun]) -> str:
    # Separators belong to the run before them
    runs[-1] = runs[-1].model_copy(update={"end_index": runs[-1].end_index + 1})
    return text + " "


def compose_text(
    lines: Sequence[Sequence[PositionedTextItem]],
    always_separate: bool = False,
) -> tuple[str, tuple[FormattingRun, ...]]:
    """Concatenate fragments into text with contiguous formatting runs.

    Fragments on one line are joined by a space unless the text already ends
    with one, or always when ``always_separate`` is set. Consecutive lines
    are always joined by a space.
    """
    text = ""
    runs: list[FormattingRun] = []
    for line_index, items in enumerate(lines):
        if line_index and text:
            text = _append_separator(text, runs)
        for item in items:
            if not item.text:
                continue
            if text and (always_separate or not text.endswith(" ")):
                text = _append_separator(text, runs)
            start = len(text)
            text += item.text
            runs.append(
                FormattingRun(
                    start_index=start,
                    end_index=len(text),
                    formatting=map_formatting(item),
                )
            )
    return text, merge_formatting_runs(runs)


def strip_runs(
    text: str, runs: Sequence[FormattingRun]
) -> tuple[str, tuple[FormattingRun, ...]]:
    """Strip surrounding whitespace from text, clipping runs to match."""
    stripped = text.strip()
    if not stripped:
        return "", ()
    lead = len(text) - len(text.lstrip())
    end = lead + len(stripped)
    clipped = (
        FormattingRun(
            start_index=max(run.start_index, lead) - lead,
            end_index=min(run.end_index, end) - lead,
            formatting=run.formatting,
        )
        for run in runs
        if run.end_index > lead and run.start_index < end
    )
    return stripped, merge_formatting_runs(clipped)
