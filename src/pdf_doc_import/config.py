"""Import options and layout heuristics."""

import os

from pydantic import BaseModel, ConfigDict, Field

# Accepted tables below this confidence are reported back as a soft warning
LOW_CONFIDENCE_WARNING = 0.8


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class ImportOptions(BaseModel):
    """Caller-supplied options for one import."""

    detect_tables: bool = True
    extract_images: bool = True
    table_confidence_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    # Only used by the extraction stage
    password: str = ""

    @classmethod
    def from_env(cls, **overrides) -> "ImportOptions":
        """Build options from PDF_IMPORT_* environment variables.

        Keyword arguments that are not None take precedence over the
        environment.
        """
        values = {
            "detect_tables": _env_flag("PDF_IMPORT_DETECT_TABLES", True),
            "extract_images": _env_flag("PDF_IMPORT_EXTRACT_IMAGES", True),
            "table_confidence_threshold": float(
                os.getenv("PDF_IMPORT_TABLE_CONFIDENCE", "0.7")
            ),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


class LayoutThresholds(BaseModel):
    """Tunable constants of the layout heuristics.

    Distances are in source units (PDF points).
    """

    model_config = ConfigDict(frozen=True)

    # Line clustering: a fragment joins the current line within
    # font_size * line_tolerance_factor of its reference Y
    line_tolerance_factor: float = 0.5

    # Paragraph segmentation
    paragraph_gap_factor: float = 1.5
    indent_change_threshold: float = 20
    default_line_spacing: float = 20

    # Table detection
    column_bucket_size: float = 5
    column_frequency_ratio: float = 0.3
    min_column_frequency: int = 2
    min_column_gap: float = 30
    column_slot_tolerance: float = 15
    min_table_rows: int = 2
    min_table_columns: int = 2
    default_last_column_width: float = 100

    # Alignment classification
    alignment_tolerance: float = 10
    justify_width_ratio: float = 0.9

    # Images wider than this are placed as blocks
    block_image_min_width: float = 200

    # Margin used when the first page has no text
    default_margin: float = 72


DEFAULT_THRESHOLDS = LayoutThresholds()
