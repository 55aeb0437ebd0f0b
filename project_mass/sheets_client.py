"""
Google Sheets client for fetching and parsing the Project Mass log.

Each training day lives on its own sheet. Sheets are downloaded as CSV
exports (or read from previously saved exports) and parsed into
SheetData: a fixed exercise layout plus one ParsedRow per logged row.
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import requests

from .config import AppConfig, SheetsConfig, SHEET_CONFIGS
from .dates import parse_date
from .models import (
    CYCLE_LABEL_PATTERN,
    ExerciseLayout,
    ParsedRow,
    RowExercise,
    SheetConfig,
    SheetData,
)
from .set_parser import is_skip_value, is_split_marker, parse_set_cell, parse_warmup_notes


logger = logging.getLogger(__name__)


EXERCISE_NAME_ROW = 2
SET_HEADER_ROW = 3
FIRST_DATA_ROW = 4
FIRST_EXERCISE_COLUMN = 3
CYCLE_LABEL_SEARCH_COLUMNS = 5


class SheetFetchError(RuntimeError):
    """Raised when a sheet export cannot be downloaded."""


class SheetLayoutError(ValueError):
    """Raised when a sheet is missing its header rows."""


class SheetsCsvClient:
    """Client for downloading day-sheets as CSV exports."""

    def __init__(self, config: SheetsConfig):
        """
        Initialize client with sheets configuration.
        """
        self._config = config

    def fetch_sheet_csv(self, gid: int) -> str:
        """
        Fetch a single sheet as CSV text.

        Parameters:
            gid: Sheet gid within the spreadsheet.

        Returns:
            Raw CSV text.

        Raises:
            SheetFetchError: If the export request does not succeed.
        """
        logger.info(f"Fetching sheet {gid} from spreadsheet {self._config.spreadsheet_id}")
        response = requests.get(
            self._config.csv_url(),
            params={"format": "csv", "gid": gid},
            headers={"Accept": "text/csv"},
            allow_redirects=True,
            timeout=self._config.timeout_seconds,
        )
        if not response.ok:
            raise SheetFetchError(
                f"Failed to fetch sheet {gid}: {response.status_code} {response.reason}"
            )
        return response.text


def _get_cell(row: List[str], idx: Optional[int]) -> str:
    """Safely get a trimmed cell value from a row."""
    if idx is not None and 0 <= idx < len(row):
        return (row[idx] or "").strip()
    return ""


@dataclass
class _OpenExercise:
    """Exercise block still accepting columns during the header scan."""

    name: str
    set_columns: List[int] = field(default_factory=list)
    notes_column: Optional[int] = None

    def close(self) -> ExerciseLayout:
        return ExerciseLayout(
            name=self.name,
            set_columns=tuple(self.set_columns),
            notes_column=self.notes_column,
        )


def parse_exercise_layout(rows: List[List[str]]) -> List[ExerciseLayout]:
    """
    Derive exercise column blocks from the header rows.

    Row 2 names each exercise once, above its first column. Row 3 labels
    the columns under it "Set 1".."Set 7" and "Notes". Blank columns
    between blocks carry neither and are skipped.

    Parameters:
        rows: All rows of the sheet.

    Returns:
        Exercise layouts in column order, or an empty list if the
        header rows are missing.
    """
    if len(rows) < FIRST_DATA_ROW:
        return []

    name_row = rows[EXERCISE_NAME_ROW]
    header_row = rows[SET_HEADER_ROW]

    layouts: List[ExerciseLayout] = []
    current: Optional[_OpenExercise] = None

    for col in range(FIRST_EXERCISE_COLUMN, len(name_row)):
        name = _get_cell(name_row, col)
        sub_header = _get_cell(header_row, col).lower()

        if name:
            if current is not None:
                layouts.append(current.close())
            current = _OpenExercise(name=name)

        if current is None:
            continue

        if sub_header.startswith("set"):
            current.set_columns.append(col)
        elif sub_header == "notes":
            current.notes_column = col

    if current is not None:
        layouts.append(current.close())

    return layouts


def _parse_exercise(row: List[str], layout: ExerciseLayout) -> Optional[RowExercise]:
    """Parse one exercise block of a row. Returns None when it logged nothing."""
    working_sets = []
    for col in layout.set_columns:
        cell = _get_cell(row, col)
        if not cell or is_skip_value(cell) or is_split_marker(cell):
            continue
        parsed = parse_set_cell(cell)
        if parsed:
            working_sets.append(parsed)

    warmup_sets, notes = parse_warmup_notes(_get_cell(row, layout.notes_column))

    if not working_sets and not warmup_sets:
        return None

    return RowExercise(
        exercise_name=layout.name,
        working_sets=working_sets,
        warmup_sets=warmup_sets,
        notes=notes,
    )


def _only_split_markers(row: List[str], layout: ExerciseLayout) -> bool:
    """True when the set columns hold split markers and nothing else of substance."""
    has_marker = False
    for col in layout.set_columns:
        cell = _get_cell(row, col)
        if is_split_marker(cell):
            has_marker = True
        elif cell and not is_skip_value(cell):
            return False
    return has_marker


def parse_data_row(
    row: List[str], layouts: List[ExerciseLayout], year_hint: Optional[int] = None
) -> ParsedRow:
    """
    Parse one data row into its dated exercises.

    Parameters:
        row: Raw cells of the row.
        layouts: Exercise layout of the sheet.
        year_hint: Year of the latest dated row, for "M/D" dates.

    Returns:
        ParsedRow with every exercise that logged a working or warm-up set.
    """
    raw_date = _get_cell(row, 2)

    exercises = []
    had_split_markers = False

    for layout in layouts:
        # done on a different date
        if _only_split_markers(row, layout):
            had_split_markers = True
            continue

        exercise = _parse_exercise(row, layout)
        if exercise is not None:
            exercises.append(exercise)

    return ParsedRow(
        instance_label=_get_cell(row, 0),
        day_label=_get_cell(row, 1),
        date=parse_date(raw_date, year_hint),
        raw_date_text=raw_date,
        exercises=exercises,
        had_split_markers=had_split_markers,
    )


def _is_empty_row(row: List[str]) -> bool:
    return all(not (cell or "").strip() for cell in row)


def _find_cycle_number(row: List[str]) -> Optional[int]:
    """Look for a "Cycle N" label in the leading cells."""
    for idx in range(min(len(row), CYCLE_LABEL_SEARCH_COLUMNS)):
        match = CYCLE_LABEL_PATTERN.match(_get_cell(row, idx))
        if match:
            return int(match.group(1))
    return None


def read_csv_rows(csv_text: str) -> List[List[str]]:
    """Split CSV text into rows, keeping blank lines as empty rows."""
    return [row for row in csv.reader(io.StringIO(csv_text))]


def parse_sheet_rows(rows: List[List[str]], sheet: SheetConfig) -> SheetData:
    """
    Parse the rows of one day-sheet.

    Parameters:
        rows: All rows of the sheet, header rows included.
        sheet: Identity of the sheet.

    Returns:
        SheetData with one ParsedRow per row after the headers.

    Raises:
        SheetLayoutError: If the header rows are missing.
    """
    if len(rows) < FIRST_DATA_ROW:
        raise SheetLayoutError(
            f"Sheet {sheet.gid} ({sheet.focus}) has fewer than {FIRST_DATA_ROW} header rows"
        )

    layouts = parse_exercise_layout(rows)
    parsed_rows: List[ParsedRow] = []
    last_year: Optional[int] = None

    for row_num, row in enumerate(rows[FIRST_DATA_ROW:], start=FIRST_DATA_ROW + 1):
        # kept as a boundary hint for segment detection
        if _is_empty_row(row):
            parsed_rows.append(ParsedRow("", "", None, ""))
            continue

        cycle_number = _find_cycle_number(row)
        if cycle_number is not None:
            raw_date = _get_cell(row, 2)
            parsed_rows.append(
                ParsedRow(
                    instance_label="",
                    day_label=f"Cycle {cycle_number}",
                    date=parse_date(raw_date, last_year),
                    raw_date_text=raw_date,
                )
            )
            continue

        parsed = parse_data_row(row, layouts, last_year)
        if parsed.date is not None:
            last_year = parsed.date.year
        elif parsed.raw_date_text and parsed.exercises:
            logger.warning(
                f"Sheet {sheet.gid} row {row_num}: could not parse date "
                f"{parsed.raw_date_text!r}"
            )
        parsed_rows.append(parsed)

    return SheetData(
        gid=sheet.gid,
        day_number=sheet.day_number,
        focus=sheet.focus,
        exercise_names=[layout.name for layout in layouts],
        rows=parsed_rows,
    )


def parse_sheet_csv(csv_text: str, sheet: SheetConfig) -> SheetData:
    """
    Parse a full sheet CSV export into structured data.
    """
    return parse_sheet_rows(read_csv_rows(csv_text), sheet)


def load_sheet_from_file(filepath: Path, sheet: SheetConfig) -> SheetData:
    """
    Load one day-sheet from a saved CSV export.

    Raises:
        FileNotFoundError: If file does not exist.
    """
    if not filepath.exists():
        raise FileNotFoundError(f"Sheet export not found: {filepath}")

    with open(filepath, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))

    sheet_data = parse_sheet_rows(rows, sheet)
    logger.info(
        f"Loaded Day {sheet.day_number} ({sheet.focus}) from {filepath}: "
        f"{len(sheet_data.data_rows)} data rows"
    )
    return sheet_data


def load_all_sheets(
    config: AppConfig,
    offline: bool = False,
    save: bool = False,
    sheets: Optional[List[SheetConfig]] = None,
) -> List[SheetData]:
    """
    Load every day-sheet, from the spreadsheet or from saved exports.

    Parameters:
        config: Application configuration.
        offline: Read saved exports from the data directory instead of fetching.
        save: Write fetched CSV text to the data directory.
        sheets: Sheets to load; defaults to all six day-sheets.

    Returns:
        One SheetData per sheet, in sheet order.
    """
    sheets = sheets if sheets is not None else SHEET_CONFIGS
    results = []

    if offline:
        for sheet in sheets:
            results.append(load_sheet_from_file(config.paths.sheet_file(sheet.day_number), sheet))
        return results

    client = SheetsCsvClient(config.sheets)
    for sheet in sheets:
        csv_text = client.fetch_sheet_csv(sheet.gid)

        if save:
            path = config.paths.sheet_file(sheet.day_number)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(csv_text, encoding="utf-8")
            logger.info(f"Saved Day {sheet.day_number} export to {path}")

        sheet_data = parse_sheet_csv(csv_text, sheet)
        logger.info(
            f"Day {sheet.day_number} ({sheet.focus}): {len(sheet_data.data_rows)} data rows, "
            f"{len(sheet_data.exercise_names)} exercises"
        )
        results.append(sheet_data)

    return results
