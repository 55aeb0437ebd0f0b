"""
Segment detection within one day-sheet.

A sheet holds every run of the program back to back. Runs are told
apart by long gaps between dated rows or by blank rows left between
them. Detection is a fold over the rows in sheet order.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date
from functools import reduce
from typing import List, Optional, Tuple

from .config import DATE_GAP_THRESHOLD
from .dates import days_between
from .models import CycleMarker, ParsedRow, Segment, SheetData


logger = logging.getLogger(__name__)


# consecutive empty rows that close a segment
EMPTY_ROWS_FOR_BREAK = 2


@dataclass(frozen=True)
class SegmentState:
    """Accumulator threaded through the row fold."""

    segments: Tuple[Segment, ...] = ()
    current_rows: Tuple[ParsedRow, ...] = ()
    current_cycle_markers: Tuple[CycleMarker, ...] = ()
    last_date: Optional[date] = None
    empty_streak: int = 0


def _flush(state: SegmentState, sheet: SheetData) -> SegmentState:
    """
    Close the accumulated rows into a segment.

    Rows without exercises or a cycle label are dropped. When no row
    carries both exercises and a date there is nothing to place on the
    calendar, so the accumulation is left open for the next segment.
    """
    kept = [r for r in state.current_rows if r.has_exercises or r.is_cycle_marker]
    if not kept:
        return replace(state, current_rows=(), current_cycle_markers=())

    dates = sorted(r.date for r in kept if r.has_exercises and r.date is not None)
    if not dates:
        return state

    segment = Segment(
        gid=sheet.gid,
        day_number=sheet.day_number,
        focus=sheet.focus,
        start_date=dates[0],
        end_date=dates[-1],
        rows=kept,
        cycle_markers=list(state.current_cycle_markers),
    )
    return replace(
        state,
        segments=state.segments + (segment,),
        current_rows=(),
        current_cycle_markers=(),
    )


def _step(
    state: SegmentState,
    indexed_row: Tuple[int, ParsedRow],
    sheet: SheetData,
    gap_threshold: int,
) -> SegmentState:
    """Advance the fold by one row."""
    index, row = indexed_row

    if row.is_empty:
        state = replace(state, empty_streak=state.empty_streak + 1)
        if state.empty_streak >= EMPTY_ROWS_FOR_BREAK and state.current_rows:
            state = replace(_flush(state, sheet), last_date=None)
        return state

    state = replace(state, empty_streak=0)

    if row.is_cycle_marker:
        marker = CycleMarker(row_index=index, cycle_number=row.cycle_number, date=row.date)
        return replace(
            state,
            current_rows=state.current_rows + (row,),
            current_cycle_markers=state.current_cycle_markers + (marker,),
        )

    if row.date is not None and state.last_date is not None:
        if days_between(state.last_date, row.date) > gap_threshold:
            state = _flush(state, sheet)

    state = replace(state, current_rows=state.current_rows + (row,))
    if row.date is not None:
        state = replace(state, last_date=row.date)
    return state


def fold_segments(
    sheet: SheetData, gap_threshold: int = DATE_GAP_THRESHOLD
) -> Tuple[List[Segment], SegmentState]:
    """
    Fold a sheet's rows into segments.

    Parameters:
        sheet: Parsed day-sheet.
        gap_threshold: Largest gap in days allowed inside one segment.

    Returns:
        Tuple of (segments, final state after the closing flush).
    """
    state = reduce(
        lambda acc, item: _step(acc, item, sheet, gap_threshold),
        enumerate(sheet.rows),
        SegmentState(),
    )
    state = _flush(state, sheet)

    undated = sum(1 for r in state.current_rows if r.has_exercises)
    if undated:
        logger.warning(
            f"Day {sheet.day_number} ({sheet.focus}): dropping {undated} trailing "
            f"rows with exercises but no resolved date"
        )

    return list(state.segments), state


def detect_segments(
    sheet: SheetData, gap_threshold: int = DATE_GAP_THRESHOLD
) -> List[Segment]:
    """
    Group a sheet's rows into contiguous date-bounded segments.

    Parameters:
        sheet: Parsed day-sheet.
        gap_threshold: Largest gap in days allowed inside one segment.

    Returns:
        Segments in sheet order.
    """
    segments, _ = fold_segments(sheet, gap_threshold)
    logger.info(f"Day {sheet.day_number} ({sheet.focus}): {len(segments)} segments")
    return segments
