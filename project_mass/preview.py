"""
Dry-run preview of an import.

Prints what would be written for each program instance without
touching any data store.
"""

import logging
from typing import Iterable, List

from .config import DAY_NAMES, DAY_TYPE
from .correlate import build_workouts
from .dates import format_date_short
from .models import ImportStats, ProgramInstance, WorkoutData


logger = logging.getLogger(__name__)


def _print_workout(workout: WorkoutData) -> None:
    split = " [SPLIT]" if workout.is_split else ""
    day_name = DAY_NAMES.get(workout.day_number, f"Day {workout.day_number}")
    day_type = DAY_TYPE.get(workout.day_number, "")
    print(
        f"      W{workout.week_number}D{workout.day_number} C{workout.cycle_number} "
        f"{day_name} [{day_type}] ({format_date_short(workout.scheduled_date)}): "
        f"{len(workout.exercises)} exercises, {workout.working_set_count} working sets{split}"
    )
    for ex in workout.exercises:
        sets = ", ".join(s.label() for s in ex.working_sets)
        warmups = ", ".join(s.label() for s in ex.warmup_sets)
        warmup_text = f" [warmup: {warmups}]" if warmups else ""
        print(f"         {ex.order}. {ex.exercise_name}: {sets}{warmup_text}")


def preview_import(
    instances: List[ProgramInstance],
    exercise_names: Iterable[str],
    verbose: bool = False,
    sheet_count: int = 6,
) -> ImportStats:
    """
    Print a dry-run report and return the counts it would import.

    Parameters:
        instances: Correlated program instances.
        exercise_names: Every effective exercise name.
        verbose: Also list each workout and its sets.
        sheet_count: Number of day-sheets loaded.

    Returns:
        ImportStats for the previewed instances.
    """
    stats = ImportStats()
    names = sorted(set(exercise_names))

    print("\n" + "=" * 60)
    print("UNIQUE EXERCISES (all cycles)")
    print("=" * 60)
    for name in names:
        print(f"   • {name}")
    print(f"   Total: {len(names)} exercises")
    stats.exercises_created = len(names)

    print("\n" + "=" * 60)
    print("PROGRAM INSTANCES")
    print("=" * 60)
    stats.program_instances_created = len(instances)

    for instance in instances:
        workouts = build_workouts(instance)
        working = sum(w.working_set_count for w in workouts)
        warmup = sum(w.warmup_set_count for w in workouts)
        splits = sum(1 for w in workouts if w.is_split)
        end_text = "ongoing" if instance.is_ongoing else format_date_short(instance.end_date)

        print(f"\n   #{instance.number} {instance.name}")
        print(f"      {format_date_short(instance.start_date)} -> {end_text}")
        print(f"      Cycles: {', '.join(str(c) for c in instance.cycles)}")
        print(
            f"      {len(workouts)} workouts, {working + warmup} total sets "
            f"({working} working, {warmup} warmup)"
        )
        print(f"      {len(instance.segments)}/{sheet_count} sheets matched")
        if splits:
            print(f"      {splits} split workouts")

        if verbose:
            for workout in workouts:
                _print_workout(workout)

        stats.workout_instances_created += len(workouts)
        stats.exercise_instances_created += sum(len(w.exercises) for w in workouts)
        stats.set_instances_created += working + warmup
        stats.working_sets_created += working
        stats.warmup_sets_created += warmup
        stats.split_workouts_detected += splits

        if not instance.segments:
            stats.warnings.append(f"#{instance.number} {instance.name} has no matching segments")

    print("\n" + "=" * 60)
    return stats


def print_stats(stats: ImportStats) -> None:
    """Print the totals of a preview."""
    print("\nIMPORT TOTALS")
    print(f"   Exercises: {stats.exercises_created}")
    print(f"   Program instances: {stats.program_instances_created}")
    print(f"   Workouts: {stats.workout_instances_created}")
    print(f"   Exercise entries: {stats.exercise_instances_created}")
    print(
        f"   Sets: {stats.set_instances_created} "
        f"({stats.working_sets_created} working, {stats.warmup_sets_created} warmup)"
    )
    print(f"   Split workouts: {stats.split_workouts_detected}")
    if stats.unmatched_segments:
        print(f"   Unmatched segments: {stats.unmatched_segments}")

    for warning in stats.warnings:
        logger.warning(warning)
