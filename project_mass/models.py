"""Data models for the Project Mass import."""

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple


CYCLE_LABEL_PATTERN = re.compile(r"^cycle\s*(\d+)", re.IGNORECASE)


class Difficulty(str, Enum):
    """Perceived effort suffix logged after a set."""

    E = "e"
    EM = "em"
    M = "m"
    MH = "mh"
    H = "h"
    VH = "vh"

    @classmethod
    def from_token(cls, token: Optional[str]) -> Optional["Difficulty"]:
        """Convert a raw suffix token to a difficulty, or None."""
        if not token:
            return None
        return cls(token.lower())


@dataclass(frozen=True)
class SheetConfig:
    """Static identity of one day-sheet."""

    gid: int
    day_number: int
    focus: str


@dataclass(frozen=True)
class KnownInstance:
    """A named run of the program with its official date range."""

    number: int
    name: str
    start_date: date
    end_date: Optional[date]
    cycles: List[int] = field(default_factory=lambda: [1])

    @property
    def is_ongoing(self) -> bool:
        """An instance without an end date is still running."""
        return self.end_date is None


@dataclass(frozen=True)
class ExerciseLayout:
    """Columns belonging to one exercise block in a sheet."""

    name: str
    set_columns: Tuple[int, ...] = ()
    notes_column: Optional[int] = None


@dataclass(frozen=True)
class SetRecord:
    """A single parsed set. ``raw_text`` keeps the cell as logged."""

    reps: int
    weight: float
    difficulty: Optional[Difficulty] = None
    increase_weight: bool = False
    is_warmup: bool = False
    raw_text: str = ""

    def label(self) -> str:
        """Short form used in previews, e.g. ``3x225mh^``."""
        weight = f"{self.weight:g}"
        text = f"{self.reps}x{weight}"
        if self.difficulty:
            text += self.difficulty.value
        if self.increase_weight:
            text += "^"
        return text


@dataclass(frozen=True)
class RowExercise:
    """One exercise performed on one logged row."""

    exercise_name: str
    working_sets: List[SetRecord] = field(default_factory=list)
    warmup_sets: List[SetRecord] = field(default_factory=list)
    notes: str = ""

    @property
    def set_count(self) -> int:
        return len(self.working_sets) + len(self.warmup_sets)


@dataclass(frozen=True)
class ParsedRow:
    """A single data row from one day-sheet."""

    instance_label: str
    day_label: str
    date: Optional[date]
    raw_date_text: str
    exercises: List[RowExercise] = field(default_factory=list)
    had_split_markers: bool = False

    @property
    def cycle_number(self) -> Optional[int]:
        """Cycle announced by this row, if it is a cycle marker row."""
        match = CYCLE_LABEL_PATTERN.match(self.day_label)
        if match:
            return int(match.group(1))
        return None

    @property
    def is_cycle_marker(self) -> bool:
        return self.cycle_number is not None

    @property
    def has_exercises(self) -> bool:
        return len(self.exercises) > 0

    @property
    def is_empty(self) -> bool:
        """No exercises, no cycle label and no resolved date."""
        return not self.exercises and not self.is_cycle_marker and self.date is None


@dataclass(frozen=True)
class CycleMarker:
    """Sentinel row announcing that a cycle begins."""

    row_index: int
    cycle_number: int
    date: Optional[date]


@dataclass
class SheetData:
    """One sheet's worth of parsed rows."""

    gid: int
    day_number: int
    focus: str
    exercise_names: List[str] = field(default_factory=list)
    rows: List[ParsedRow] = field(default_factory=list)

    @property
    def data_rows(self) -> List[ParsedRow]:
        """Rows that logged at least one exercise."""
        return [r for r in self.rows if r.has_exercises]


@dataclass(frozen=True)
class Segment:
    """A contiguous, gap-free run of rows on one day-sheet."""

    gid: int
    day_number: int
    focus: str
    start_date: date
    end_date: date
    rows: List[ParsedRow] = field(default_factory=list)
    cycle_markers: List[CycleMarker] = field(default_factory=list)

    @property
    def workout_rows(self) -> List[ParsedRow]:
        return [r for r in self.rows if r.has_exercises]


@dataclass
class ProgramInstance:
    """A known instance with the segments matched to it."""

    number: int
    name: str
    start_date: date
    end_date: date
    is_ongoing: bool
    cycles: List[int]
    segments: List[Segment] = field(default_factory=list)


@dataclass(frozen=True)
class WorkoutExercise:
    """One exercise inside a built workout."""

    exercise_name: str
    order: int
    working_sets: List[SetRecord] = field(default_factory=list)
    warmup_sets: List[SetRecord] = field(default_factory=list)
    notes: str = ""
    performed_date: Optional[date] = None


@dataclass(frozen=True)
class WorkoutData:
    """One day of one microcycle, possibly split over several dates."""

    day_number: int
    week_number: int
    cycle_number: int
    scheduled_date: date
    end_date: Optional[date] = None
    exercises: List[WorkoutExercise] = field(default_factory=list)
    status: str = "completed"

    @property
    def is_split(self) -> bool:
        return self.end_date is not None

    @property
    def working_set_count(self) -> int:
        return sum(len(e.working_sets) for e in self.exercises)

    @property
    def warmup_set_count(self) -> int:
        return sum(len(e.warmup_sets) for e in self.exercises)


@dataclass
class ImportStats:
    """Counts collected while previewing an import."""

    exercises_created: int = 0
    program_instances_created: int = 0
    workout_instances_created: int = 0
    exercise_instances_created: int = 0
    set_instances_created: int = 0
    warmup_sets_created: int = 0
    working_sets_created: int = 0
    split_workouts_detected: int = 0
    unmatched_segments: int = 0
    warnings: List[str] = field(default_factory=list)
