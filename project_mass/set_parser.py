"""
Parsing of individual set cells.

Working sets live in the numbered "Set N" columns and look like
"3x225", "3 x 185mh^" or "10x135m/h". Warm-up sets are only ever
written as comma-separated shorthand at the start of a Notes cell.
"""

import re
from dataclasses import replace
from typing import List, Optional, Tuple

from .config import DIFFICULTY_TOKENS, SKIP_VALUES
from .models import Difficulty, SetRecord


INCREASE_WEIGHT_MARKER = "^"

_MID_HARD = re.compile(r"m/h", re.IGNORECASE)
_EASY_MID = re.compile(r"e/m", re.IGNORECASE)

# tried in this order; the first match wins
_REPS_X_WEIGHT = re.compile(r"^(\d+)\s*x\s*(\d+(?:\.\d+)?)\s*$", re.IGNORECASE)
_REPS_X_UNKNOWN = re.compile(r"^(\d+)\s*x\s*\?\s*$", re.IGNORECASE)
_REPS_X_UNCERTAIN = re.compile(r"^(\d+)\s*x\s*(\d+)\?\s*$", re.IGNORECASE)
_REPS_X_ONLY = re.compile(r"^(\d+)\s*x\s*$", re.IGNORECASE)

_WARMUP_START = re.compile(r"^\s*\d+\s*x\s*\d+", re.IGNORECASE)

_HYPHENS_ONLY = re.compile(r"^-{2,}$")
_DASHES_ONLY = re.compile(r"^[-–—]+$")
_LONG_DASH = re.compile(r"[–—]")


def is_skip_value(value: str) -> bool:
    """True for cells that mean "nothing logged here"."""
    return value.strip().lower() in SKIP_VALUES


def _strip_difficulty(text: str) -> Tuple[str, Optional[Difficulty]]:
    """Remove a trailing difficulty token, longest token first."""
    lower = text.lower()
    for token in DIFFICULTY_TOKENS:
        if lower.endswith(token):
            return text[: -len(token)].strip(), Difficulty.from_token(token)
    return text, None


def _match_reps_weight(text: str) -> Optional[Tuple[int, float]]:
    """Run the reps/weight patterns in order and return the first hit."""
    match = _REPS_X_WEIGHT.match(text)
    if match:
        return int(match.group(1)), float(match.group(2))

    # bodyweight or unknown load
    match = _REPS_X_UNKNOWN.match(text)
    if match:
        return int(match.group(1)), 0.0

    # "10x9?" - weight logged but not trusted
    match = _REPS_X_UNCERTAIN.match(text)
    if match:
        return int(match.group(1)), float(match.group(2))

    # "4x" - entry never finished
    match = _REPS_X_ONLY.match(text)
    if match:
        return int(match.group(1)), 0.0

    return None


def parse_set_cell(raw: Optional[str]) -> Optional[SetRecord]:
    """
    Parse a single set cell.

    Parameters:
        raw: Cell text such as "3x225mh^" or "10 x 60".

    Returns:
        SetRecord, or None when the cell holds no usable set.
    """
    if not raw:
        return None
    trimmed = raw.strip()
    if not trimmed or trimmed.lower() in SKIP_VALUES:
        return None

    increase_weight = INCREASE_WEIGHT_MARKER in trimmed
    clean = trimmed.replace(INCREASE_WEIGHT_MARKER, "").strip()

    clean = _MID_HARD.sub("mh", clean)
    clean = _EASY_MID.sub("em", clean)

    clean, difficulty = _strip_difficulty(clean)

    parsed = _match_reps_weight(clean)
    if parsed is None:
        return None

    reps, weight = parsed
    if reps <= 0:
        return None

    return SetRecord(
        reps=reps,
        weight=weight,
        difficulty=difficulty,
        increase_weight=increase_weight,
        is_warmup=False,
        raw_text=trimmed,
    )


def parse_warmup_notes(notes_raw: Optional[str]) -> Tuple[List[SetRecord], str]:
    """
    Split warm-up sets off the front of a Notes cell.

    Notes like "12x45e, 12x95e, 10x135m, 8x185mh, felt good" yield four
    warm-up sets and the remaining text "felt good". Notes that do not
    open with a set are returned untouched.

    Parameters:
        notes_raw: Notes cell text.

    Returns:
        Tuple of (warmup sets, remaining notes).
    """
    if not notes_raw or not notes_raw.strip():
        return [], ""

    notes = notes_raw.strip()
    if not _WARMUP_START.match(notes):
        return [], notes

    parts = notes.split(",")
    warmup_sets: List[SetRecord] = []
    leading: List[str] = []
    last_set_index = -1

    for i, part in enumerate(parts):
        parsed = parse_set_cell(part.strip())
        if parsed:
            warmup_sets.append(replace(parsed, is_warmup=True))
            last_set_index = i
        elif last_set_index >= 0:
            break
        else:
            # text ahead of the first warm-up is still a note
            leading.append(part.strip())

    if not warmup_sets:
        return [], notes

    tail = ",".join(parts[last_set_index + 1 :]).strip()
    remaining = ", ".join(piece for piece in leading + [tail] if piece)
    return warmup_sets, remaining


def is_split_marker(value: Optional[str]) -> bool:
    """
    Check for a dash-only cell meaning "logged on a different date".

    Two or more hyphens count, as does any run of en/em dashes, with or
    without hyphens mixed in. A single hyphen does not.
    """
    if not value:
        return False
    trimmed = value.strip()
    if not trimmed:
        return False

    if _HYPHENS_ONLY.match(trimmed):
        return True
    return bool(_DASHES_ONLY.match(trimmed) and _LONG_DASH.search(trimmed))
