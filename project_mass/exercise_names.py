"""Cycle-aware exercise name resolution."""

from typing import Dict, Optional

from .config import CYCLE_2_EXERCISE_MAP


REMAPPED_CYCLE = 2


def resolve_exercise_name(
    header_name: str,
    day_number: int,
    cycle_number: int,
    remap: Optional[Dict[int, Dict[str, Optional[str]]]] = None,
) -> str:
    """
    Return the exercise actually performed in a column.

    Sheet headers name the cycle 1 exercise. Cycle 3 repeats cycle 1, so
    only cycle 2 consults the substitution table. A header mapped to
    None, or missing from the table, keeps its own name.

    Parameters:
        header_name: Exercise name from the sheet header.
        day_number: Training day of the sheet.
        cycle_number: Active cycle of the row.
        remap: Substitution table, defaults to CYCLE_2_EXERCISE_MAP.

    Returns:
        Effective exercise name.
    """
    if cycle_number != REMAPPED_CYCLE:
        return header_name

    table = CYCLE_2_EXERCISE_MAP if remap is None else remap
    day_map = table.get(day_number)
    if day_map is None:
        return header_name

    if header_name not in day_map:
        return header_name

    substitute = day_map[header_name]
    if substitute is None:
        return header_name
    return substitute
