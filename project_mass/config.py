"""Configuration management for the Project Mass import."""

import os
from datetime import date
from pathlib import Path
from dataclasses import dataclass
from typing import Dict, List, Optional

from dotenv import load_dotenv

from .models import KnownInstance, SheetConfig


# load environment variables from .env file
load_dotenv()


DEFAULT_SPREADSHEET_ID = "1gBNQ4_NBQ0I3hT3bZNo9LZHLfhSkXTQ92Ns7-tXMRkU"


@dataclass(frozen=True)
class SheetsConfig:
    """Google Sheets CSV export settings."""

    spreadsheet_id: str
    export_url: str = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/export"
    timeout_seconds: float = 30.0

    @classmethod
    def from_env(cls) -> "SheetsConfig":
        """
        Create config from environment variables.
        """
        spreadsheet_id = os.getenv("PROJECT_MASS_SPREADSHEET_ID", DEFAULT_SPREADSHEET_ID)
        timeout_raw = os.getenv("PROJECT_MASS_FETCH_TIMEOUT", "30")

        try:
            timeout = float(timeout_raw)
        except ValueError:
            raise ValueError(
                f"PROJECT_MASS_FETCH_TIMEOUT must be a number of seconds, got {timeout_raw!r}"
            )

        return cls(spreadsheet_id=spreadsheet_id, timeout_seconds=timeout)

    def csv_url(self) -> str:
        """Base export URL for this spreadsheet."""
        return self.export_url.format(spreadsheet_id=self.spreadsheet_id)


@dataclass(frozen=True)
class PathConfig:
    """File path configuration."""

    base_dir: Path
    data_dir: Path

    @classmethod
    def default(cls) -> "PathConfig":
        """
        Create default path configuration.
        """
        base = Path(__file__).parent.parent
        data_dir = os.getenv("PROJECT_MASS_DATA_DIR")
        return cls(
            base_dir=base,
            data_dir=Path(data_dir) if data_dir else base / "data",
        )

    def sheet_file(self, day_number: int) -> Path:
        """Local CSV export for one day-sheet."""
        return self.data_dir / f"day{day_number}.csv"


@dataclass(frozen=True)
class AppConfig:
    """Application-wide configuration."""

    sheets: SheetsConfig
    paths: PathConfig

    @classmethod
    def load(cls) -> "AppConfig":
        """
        Load full application configuration.
        """
        return cls(sheets=SheetsConfig.from_env(), paths=PathConfig.default())


# =============================================================================
# SHEETS
# =============================================================================

SHEET_CONFIGS: List[SheetConfig] = [
    SheetConfig(gid=484725860, day_number=1, focus="Lower Strength"),
    SheetConfig(gid=1288547180, day_number=2, focus="Upper Push Strength"),
    SheetConfig(gid=954466183, day_number=3, focus="Upper Pull Strength"),
    SheetConfig(gid=1309240948, day_number=5, focus="Lower Hypertrophy"),
    SheetConfig(gid=2074668672, day_number=6, focus="Upper Push Hypertrophy"),
    SheetConfig(gid=1273628631, day_number=7, focus="Upper Pull Hypertrophy"),
]

DAY_TYPE: Dict[int, str] = {
    1: "Strength",
    2: "Strength",
    3: "Strength",
    5: "Hypertrophy",
    6: "Hypertrophy",
    7: "Hypertrophy",
}

DAY_NAMES: Dict[int, str] = {cfg.day_number: cfg.focus for cfg in SHEET_CONFIGS}


# =============================================================================
# KNOWN INSTANCES
# =============================================================================

KNOWN_INSTANCES: List[KnownInstance] = [
    KnownInstance(1, "Project Mass - Feb 2016", date(2016, 2, 3), date(2016, 3, 7), [1]),
    KnownInstance(2, "Project Mass - Apr 2017", date(2017, 4, 3), date(2017, 5, 25), [1]),
    KnownInstance(3, "Project Mass - Mar 2018", date(2018, 3, 19), date(2018, 9, 5), [1, 2, 3]),
    KnownInstance(4, "Project Mass - Feb 2019", date(2019, 2, 19), date(2019, 6, 13), [1, 2]),
    KnownInstance(5, "Project Mass - Oct 2019", date(2019, 10, 21), date(2020, 3, 9), [1, 2, 3]),
    KnownInstance(6, "Project Mass - Mar 2021", date(2021, 3, 2), date(2021, 6, 11), [1, 2]),
    KnownInstance(7, "Project Mass - Oct 2021", date(2021, 10, 11), date(2021, 12, 27), [1]),
    KnownInstance(8, "Project Mass - Jan 2022", date(2022, 1, 31), date(2022, 3, 21), [1, 2]),
    KnownInstance(9, "Project Mass - Jun 2022", date(2022, 6, 28), date(2022, 9, 14), [1]),
    KnownInstance(10, "Project Mass - Dec 2023", date(2023, 12, 2), date(2024, 2, 27), [1, 2]),
    KnownInstance(11, "Project Mass - Oct 2024", date(2024, 10, 14), date(2024, 12, 28), [1]),
    KnownInstance(12, "Project Mass - Jan 2026", date(2026, 1, 26), None, [1]),
]


# =============================================================================
# CELL VOCABULARY
# =============================================================================

# compared case-insensitively against the trimmed cell
SKIP_VALUES = frozenset(
    [
        "n/a",
        "dnf",
        "no time",
        "not complete",
        "--",
        "---",
        "",
        "no machine",
        "no time ",
    ]
)

# longest first so "h" never matches the tail of "mh" or "vh"
DIFFICULTY_TOKENS = ("vh", "mh", "em", "e", "m", "h")

# days between consecutive dated rows that start a new segment
DATE_GAP_THRESHOLD = 14


# =============================================================================
# CYCLE 2 EXERCISE SUBSTITUTIONS
# =============================================================================

# Headers always name the cycle 1 lift. In cycle 2 some columns log a
# different lift. None means the column keeps its header exercise.
CYCLE_2_EXERCISE_MAP: Dict[int, Dict[str, Optional[str]]] = {
    # Lower Strength
    1: {
        "Barbell Squat": "Wide Stance Squat",
        "Barbell Deadlift": "Sumo Deadlift",
        "Leg Press": "High Stance Leg Press",
        "Romanian Deadlift": "Wide Stance Snatch Grip Deadlift",
    },
    # Upper Push Strength
    2: {
        "Barbell Bench Press (Medium Grip)": "Wide Grip Bench Press",
        "Barbell Incline Bench Press (Medium-Grip)": "Decline Bench Press",
        "Standing Military Press": "Push Press",
        "Close-Grip Barbell Bench Press": "Weighted Dips",
    },
    # Upper Pull Strength
    3: {
        "Bent Over Barbell Row": None,
        "Pull Ups": "T-Bar Row",
        "Barbell Curl": "Upright Row",
        "Barbell Shrug": "EZ-Bar Curl",
    },
    # Lower Hypertrophy
    5: {
        "Barbell Squat": "Front Squat",
        "Dumbbell Walking Lunge": None,
        "Leg Extensions": None,
        "Lying Leg Curls": "Seated Leg Curls",
        "Hyperextensions": "Sissy Squat",
        "Stiff-Legged Dumbbell Deadlift (Dumbbell Romanian Deadlift)": None,
        "Leg Press": "Single-Leg Press",
        "Seated Calf Raise": "Donkey Calf Raise",
        "Calf Press on the Leg Press Machine": None,
        "Standing Calf Raises": None,
    },
    # Upper Push Hypertrophy
    6: {
        "Dumbbell Bench Press": "Incline Dumbbell Press",
        "Barbell Incline Bench Press (Medium-Grip)": "Machine Bench Press",
        "Flat Bench Cable Flyes": None,
        "Seated Dumbbell Press": "Dumbbell Shoulder Press",
        "Side Lateral Raise": "Front Incline Raise",
        "Reverse Machine Flyes": None,
        "EZ Bar Skullcrusher": None,
        "Cable Rope Overhead Triceps Extension": None,
        "Tricep Pushdown - Rope Attachment": "Reverse Grip Pushdown",
        "Tricep Dumbbell Kickback": None,
        "Dips - Tricep Version": None,
    },
    # Upper Pull Hypertrophy
    7: {
        "Pullups": "V-Bar Pullup",
        "Seated Cable Rows": "Seal Row",
        "Wide Grip Lat Pulldown": "Underhand Lat Pulldown",
        "One-Arm Dumbbell Row": "Bent Over Two-Dumbbell Row",
        "Smith Machine Bent Over Row": None,
        "Bicep Curl": "EZ-Bar Curl",
        "Standing Bicep Cable Curls": "High Cable Curls",
        "Incline Dumbbell Curl": None,
    },
}
