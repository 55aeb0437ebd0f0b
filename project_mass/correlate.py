"""
Instance correlation and workout building.

Segments detected on the six day-sheets are matched to the known
program instances by date overlap, then turned into workouts keyed by
microcycle (week) and training day.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Callable, Dict, List, Optional, Set, Tuple

from .config import KNOWN_INSTANCES
from .exercise_names import resolve_exercise_name
from .models import (
    KnownInstance,
    ProgramInstance,
    Segment,
    WorkoutData,
    WorkoutExercise,
)


logger = logging.getLogger(__name__)


MICROCYCLES_PER_CYCLE = 4

NameResolver = Callable[[str, int, int], str]


@dataclass
class CorrelationResult:
    """Known instances with their segments, plus segments nobody claimed."""

    instances: List[ProgramInstance] = field(default_factory=list)
    unmatched: List[Segment] = field(default_factory=list)


def overlap_days(segment: Segment, known: KnownInstance) -> int:
    """
    Inclusive day overlap between a segment and a known instance.

    Ongoing instances are open-ended. Zero or less means no overlap.
    """
    known_end = known.end_date if known.end_date is not None else segment.end_date
    start = max(segment.start_date, known.start_date)
    end = min(segment.end_date, known_end)
    return (end - start).days + 1


def match_segment(
    segment: Segment, known_instances: List[KnownInstance]
) -> Optional[KnownInstance]:
    """
    Pick the known instance with the largest overlap.

    Ties go to the instance whose start date is closest to the segment's.
    Returns None when nothing overlaps.
    """
    best: Optional[KnownInstance] = None
    best_key: Optional[Tuple[int, int]] = None

    for known in known_instances:
        overlap = overlap_days(segment, known)
        if overlap <= 0:
            continue
        key = (overlap, -abs((segment.start_date - known.start_date).days))
        if best_key is None or key > best_key:
            best, best_key = known, key

    return best


def reconcile_cycle_markers(segment: Segment, known: KnownInstance) -> Segment:
    """
    Make cycle marker numbers agree with the instance's cycle list.

    A marker naming a cycle the instance never ran takes the next listed
    cycle after the previous marker, or the last listed cycle.
    """
    if not segment.cycle_markers:
        return segment

    cycles = sorted(known.cycles) or [1]
    previous = cycles[0]
    markers = []

    for marker in segment.cycle_markers:
        number = marker.cycle_number
        if number not in cycles:
            later = [c for c in cycles if c > previous]
            number = later[0] if later else cycles[-1]
            logger.warning(
                f"Day {segment.day_number} row {marker.row_index}: cycle "
                f"{marker.cycle_number} not in {known.name} cycles {cycles}, "
                f"using cycle {number}"
            )
        markers.append(replace(marker, cycle_number=number))
        previous = number

    return replace(segment, cycle_markers=markers)


def _instance_dates(segments: List[Segment], fallback: date) -> Tuple[date, date]:
    dates = sorted(
        r.date for s in segments for r in s.rows if r.has_exercises and r.date is not None
    )
    if not dates:
        return fallback, fallback
    return dates[0], dates[-1]


def correlate_instances(
    segments: List[Segment],
    known_instances: Optional[List[KnownInstance]] = None,
) -> CorrelationResult:
    """
    Match segments from all sheets to the known program instances.

    Parameters:
        segments: Segments from every day-sheet.
        known_instances: Reference instances, defaults to KNOWN_INSTANCES.

    Returns:
        CorrelationResult with one ProgramInstance per known instance,
        in instance number order, and the segments that overlap none.
    """
    known_instances = KNOWN_INSTANCES if known_instances is None else known_instances

    by_number: Dict[int, List[Segment]] = defaultdict(list)
    unmatched: List[Segment] = []

    for segment in sorted(segments, key=lambda s: (s.start_date, s.day_number)):
        known = match_segment(segment, known_instances)
        if known is None:
            logger.warning(
                f"Day {segment.day_number} segment {segment.start_date} to "
                f"{segment.end_date} overlaps no known instance, needs review"
            )
            unmatched.append(segment)
            continue
        by_number[known.number].append(reconcile_cycle_markers(segment, known))

    instances = []
    for known in sorted(known_instances, key=lambda k: k.number):
        matched = by_number.get(known.number, [])
        start, end = _instance_dates(matched, known.start_date)
        instances.append(
            ProgramInstance(
                number=known.number,
                name=known.name,
                start_date=start,
                end_date=end,
                is_ongoing=known.is_ongoing,
                cycles=list(known.cycles),
                segments=matched,
            )
        )
        logger.info(f"#{known.number} {known.name}: {len(matched)} segments")

    return CorrelationResult(instances=instances, unmatched=unmatched)


def _day_workouts(
    segments: List[Segment], instance: ProgramInstance, resolver: NameResolver
) -> List[WorkoutData]:
    """Number the rows of one training day into microcycles."""
    workouts = []
    current_cycle = 1
    micro_counter = 0
    cycle_start_micro = 0
    open_split: Set[str] = set()

    for segment in segments:
        markers = iter(segment.cycle_markers)
        day_number = segment.day_number
        open_split = set()

        for row in segment.rows:
            if row.is_cycle_marker:
                marker = next(markers, None)
                current_cycle = marker.cycle_number if marker else row.cycle_number
                cycle_start_micro = micro_counter
                open_split = set()
                continue

            if not row.has_exercises:
                continue

            # a split continuation logs exercises the open split has not
            names = {ex.exercise_name for ex in row.exercises}
            if row.had_split_markers and open_split and not names & open_split:
                open_split |= names
            else:
                micro_counter += 1
                open_split = set(names) if row.had_split_markers else set()

            week_number = (current_cycle - 1) * MICROCYCLES_PER_CYCLE + (
                micro_counter - cycle_start_micro
            )

            exercises = [
                WorkoutExercise(
                    exercise_name=resolver(ex.exercise_name, day_number, current_cycle),
                    order=idx + 1,
                    working_sets=ex.working_sets,
                    warmup_sets=ex.warmup_sets,
                    notes=ex.notes,
                )
                for idx, ex in enumerate(row.exercises)
            ]

            has_sets = any(e.working_sets or e.warmup_sets for e in exercises)
            workouts.append(
                WorkoutData(
                    day_number=day_number,
                    week_number=week_number,
                    cycle_number=current_cycle,
                    scheduled_date=row.date or instance.start_date,
                    exercises=exercises,
                    status="completed" if has_sets else "skipped",
                )
            )

    return workouts


def _merge_split(group: List[WorkoutData]) -> WorkoutData:
    """Merge rows logged for the same day and week into one workout."""
    ordered = sorted(group, key=lambda w: w.scheduled_date)
    first, last = ordered[0], ordered[-1]

    exercises = []
    for workout in ordered:
        for ex in workout.exercises:
            exercises.append(
                replace(ex, order=len(exercises) + 1, performed_date=workout.scheduled_date)
            )

    return replace(
        first,
        end_date=last.scheduled_date if last.scheduled_date != first.scheduled_date else None,
        exercises=exercises,
        status="completed",
    )


def build_workouts(
    instance: ProgramInstance, resolver: NameResolver = resolve_exercise_name
) -> List[WorkoutData]:
    """
    Build the workouts of one program instance.

    Each data row is one microcycle of its training day. Cycle marker
    rows switch the active cycle, which also decides the exercise names
    via the resolver. Rows that land on the same day and week are a
    workout split across gym sessions and are merged.

    Parameters:
        instance: Correlated program instance.
        resolver: Maps (header name, day, cycle) to the exercise performed.

    Returns:
        Workouts sorted by week then day.
    """
    by_day: Dict[int, List[Segment]] = defaultdict(list)
    for segment in instance.segments:
        by_day[segment.day_number].append(segment)

    workouts: List[WorkoutData] = []
    for day_number in sorted(by_day):
        day_segments = sorted(by_day[day_number], key=lambda s: s.start_date)
        workouts.extend(_day_workouts(day_segments, instance, resolver))

    groups: Dict[Tuple[int, int], List[WorkoutData]] = {}
    for workout in workouts:
        groups.setdefault((workout.day_number, workout.week_number), []).append(workout)

    merged = [
        group[0] if len(group) == 1 else _merge_split(group) for group in groups.values()
    ]
    return sorted(merged, key=lambda w: (w.week_number, w.day_number))


def collect_all_exercise_names(
    instances: List[ProgramInstance], resolver: NameResolver = resolve_exercise_name
) -> Set[str]:
    """Every effective exercise name across all cycles of the instances."""
    names: Set[str] = set()
    for instance in instances:
        for workout in build_workouts(instance, resolver):
            names.update(ex.exercise_name for ex in workout.exercises)
    return names
