"""Runtime settings read from the environment."""
import os

LOG_LEVEL = os.environ.get("KINSHIP_LOG_LEVEL", "INFO").upper()

# "canonical" spoofs the root as male for the layout pass and mirrors the
# result for female roots; "actual" hands the real gender to the layout.
ROOT_ORIENTATION = os.environ.get("KINSHIP_ROOT_ORIENTATION", "canonical").lower()

LAYOUT_PLACEHOLDERS = os.environ.get("KINSHIP_LAYOUT_PLACEHOLDERS", "true").lower() in ("1", "true", "yes")

CACHE_SIZE = int(os.environ.get("KINSHIP_CACHE_SIZE", "32"))

ORIENTATIONS = ("canonical", "actual")


def validate_orientation(value: str) -> str:
    value = (value or "").strip().lower()
    if value not in ORIENTATIONS:
        raise ValueError(f"Unknown root orientation {value!r}, expected one of {ORIENTATIONS}")
    return value
