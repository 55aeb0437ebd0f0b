"""
Tests for instance correlation and workout building.
"""

from datetime import date

from project_mass.correlate import (
    build_workouts,
    collect_all_exercise_names,
    correlate_instances,
    match_segment,
    overlap_days,
    reconcile_cycle_markers,
)
from project_mass.models import (
    CycleMarker,
    KnownInstance,
    ParsedRow,
    ProgramInstance,
    RowExercise,
    Segment,
    SetRecord,
)


MARCH_2018 = KnownInstance(3, "Project Mass - Mar 2018", date(2018, 3, 19), date(2018, 9, 5), [1, 2, 3])
FEB_2019 = KnownInstance(4, "Project Mass - Feb 2019", date(2019, 2, 19), date(2019, 6, 13), [1, 2])
JAN_2026 = KnownInstance(12, "Project Mass - Jan 2026", date(2026, 1, 26), None, [1])
KNOWN = [MARCH_2018, FEB_2019, JAN_2026]


def _row(d, *names, split=False):
    exercises = [
        RowExercise(exercise_name=n, working_sets=[SetRecord(3, 225.0)], warmup_sets=[SetRecord(8, 135.0, is_warmup=True)])
        for n in names or ("Barbell Squat",)
    ]
    return ParsedRow("", "Day 1", d, "", exercises=exercises, had_split_markers=split)


def _cycle_row(number):
    return ParsedRow("", f"Cycle {number}", None, "")


def _segment(start, end, rows=None, day=1, markers=None):
    return Segment(
        gid=day,
        day_number=day,
        focus="Lower Strength",
        start_date=start,
        end_date=end,
        rows=rows if rows is not None else [_row(start), _row(end)],
        cycle_markers=markers or [],
    )


def _instance(segments, known=MARCH_2018):
    return ProgramInstance(
        number=known.number,
        name=known.name,
        start_date=known.start_date,
        end_date=known.end_date or known.start_date,
        is_ongoing=known.is_ongoing,
        cycles=known.cycles,
        segments=segments,
    )


class TestMatchSegment:
    """Tests for overlap and best-match selection."""

    def test_overlap_inclusive(self):
        """Test overlap counts both end days."""
        segment = _segment(date(2018, 9, 5), date(2018, 9, 20))
        assert overlap_days(segment, MARCH_2018) == 1

    def test_drifted_dates_still_match(self):
        """Test a segment starting a few days early matches its instance."""
        segment = _segment(date(2018, 3, 17), date(2018, 4, 30))
        assert match_segment(segment, KNOWN) is MARCH_2018

    def test_ongoing_instance(self):
        """Test an instance without an end date is open-ended."""
        segment = _segment(date(2026, 2, 1), date(2026, 4, 1))
        assert match_segment(segment, KNOWN) is JAN_2026

    def test_no_overlap(self):
        """Test a segment between instances matches nothing."""
        segment = _segment(date(2020, 5, 1), date(2020, 6, 1))
        assert match_segment(segment, KNOWN) is None

    def test_tie_goes_to_closest_start(self):
        """Test equal overlap is broken by the closest start date."""
        first = KnownInstance(1, "A", date(2020, 1, 1), date(2020, 1, 10))
        second = KnownInstance(2, "B", date(2020, 1, 20), date(2020, 1, 29))
        segment = _segment(date(2020, 1, 6), date(2020, 1, 24))

        assert overlap_days(segment, first) == overlap_days(segment, second) == 5
        assert match_segment(segment, [second, first]) is first

    def test_largest_overlap_wins(self):
        """Test a segment spanning two instances goes to the larger overlap."""
        first = KnownInstance(1, "A", date(2020, 1, 1), date(2020, 1, 10))
        second = KnownInstance(2, "B", date(2020, 1, 12), date(2020, 3, 1))
        segment = _segment(date(2020, 1, 8), date(2020, 2, 1))

        assert match_segment(segment, [first, second]) is second


class TestReconcileCycleMarkers:
    """Tests for reconcile_cycle_markers."""

    def test_valid_markers_kept(self):
        """Test markers named in the instance cycles are unchanged."""
        markers = [CycleMarker(3, 2, None), CycleMarker(9, 3, None)]
        segment = _segment(date(2018, 3, 19), date(2018, 8, 1), markers=markers)

        assert reconcile_cycle_markers(segment, MARCH_2018).cycle_markers == markers

    def test_unknown_cycle_takes_next(self):
        """Test a marker for an unlisted cycle takes the next listed one."""
        markers = [CycleMarker(3, 2, None), CycleMarker(9, 5, None)]
        segment = _segment(date(2018, 3, 19), date(2018, 8, 1), markers=markers)

        result = reconcile_cycle_markers(segment, MARCH_2018)
        assert [m.cycle_number for m in result.cycle_markers] == [2, 3]

    def test_clamped_to_last_cycle(self):
        """Test a marker past the last listed cycle is clamped."""
        single = KnownInstance(7, "Single", date(2021, 10, 11), date(2021, 12, 27), [1])
        segment = _segment(date(2021, 10, 11), date(2021, 12, 1), markers=[CycleMarker(5, 2, None)])

        assert reconcile_cycle_markers(segment, single).cycle_markers[0].cycle_number == 1


class TestCorrelateInstances:
    """Tests for correlate_instances."""

    def test_assignment(self):
        """Test segments from several sheets land on their instances."""
        day1 = _segment(date(2018, 3, 19), date(2018, 5, 1), day=1)
        day2 = _segment(date(2018, 3, 20), date(2018, 5, 2), day=2)
        later = _segment(date(2019, 2, 19), date(2019, 3, 1), day=1)
        stray = _segment(date(2020, 5, 1), date(2020, 6, 1), day=1)

        result = correlate_instances([later, stray, day2, day1], KNOWN)

        assert [i.number for i in result.instances] == [3, 4, 12]
        march = result.instances[0]
        assert march.segments == [day1, day2]
        assert march.start_date == date(2018, 3, 19)
        assert march.end_date == date(2018, 5, 2)
        assert march.cycles == [1, 2, 3]
        assert result.instances[1].segments == [later]
        assert result.unmatched == [stray]

    def test_instance_without_segments(self):
        """Test an instance with no data falls back to its known start."""
        result = correlate_instances([], KNOWN)
        ongoing = result.instances[-1]

        assert ongoing.segments == []
        assert ongoing.is_ongoing is True
        assert ongoing.start_date == ongoing.end_date == date(2026, 1, 26)


class TestBuildWorkouts:
    """Tests for build_workouts."""

    def test_weeks_and_cycle_names(self):
        """Test week numbering across a cycle marker and cycle 2 names."""
        rows = [
            _row(date(2018, 3, 19)),
            _row(date(2018, 3, 26)),
            _cycle_row(2),
            _row(date(2018, 4, 16)),
            _row(date(2018, 4, 23)),
        ]
        segment = _segment(
            date(2018, 3, 19), date(2018, 4, 23), rows=rows,
            markers=[CycleMarker(2, 2, None)],
        )
        workouts = build_workouts(_instance([segment]))

        assert [w.week_number for w in workouts] == [1, 2, 5, 6]
        assert [w.cycle_number for w in workouts] == [1, 1, 2, 2]
        assert workouts[0].exercises[0].exercise_name == "Barbell Squat"
        assert workouts[2].exercises[0].exercise_name == "Wide Stance Squat"
        assert all(w.status == "completed" for w in workouts)

    def test_marker_numbers_take_precedence(self):
        """Test reconciled marker numbers drive the active cycle."""
        rows = [_row(date(2018, 3, 19)), _cycle_row(5), _row(date(2018, 4, 16))]
        segment = _segment(
            date(2018, 3, 19), date(2018, 4, 16), rows=rows,
            markers=[CycleMarker(1, 3, None)],
        )
        workouts = build_workouts(_instance([segment]))

        assert [w.cycle_number for w in workouts] == [1, 3]
        assert workouts[1].week_number == 9

    def test_split_workout_merged(self):
        """Test rows of one session split over two dates become one workout."""
        rows = [
            _row(date(2018, 3, 19), "Barbell Squat", split=True),
            _row(date(2018, 3, 20), "Leg Press", split=True),
            _row(date(2018, 3, 26), "Barbell Squat", "Leg Press"),
        ]
        segment = _segment(date(2018, 3, 19), date(2018, 3, 26), rows=rows)
        workouts = build_workouts(_instance([segment]))

        assert len(workouts) == 2
        split = workouts[0]
        assert split.week_number == 1
        assert split.is_split
        assert split.scheduled_date == date(2018, 3, 19)
        assert split.end_date == date(2018, 3, 20)
        assert [e.exercise_name for e in split.exercises] == ["Barbell Squat", "Leg Press"]
        assert [e.order for e in split.exercises] == [1, 2]
        assert [e.performed_date for e in split.exercises] == [date(2018, 3, 19), date(2018, 3, 20)]
        assert workouts[1].week_number == 2
        assert not workouts[1].is_split

    def test_repeated_split_exercise_opens_new_week(self):
        """Test a split row repeating an exercise starts the next microcycle."""
        rows = [
            _row(date(2018, 3, 19), "Barbell Squat", split=True),
            _row(date(2018, 3, 26), "Barbell Squat", split=True),
        ]
        segment = _segment(date(2018, 3, 19), date(2018, 3, 26), rows=rows)

        assert [w.week_number for w in build_workouts(_instance([segment]))] == [1, 2]

    def test_sorted_by_week_then_day(self):
        """Test workouts from several days interleave by week."""
        day1 = _segment(date(2018, 3, 19), date(2018, 3, 26), day=1)
        day2 = _segment(date(2018, 3, 20), date(2018, 3, 27), day=2)
        workouts = build_workouts(_instance([day2, day1]))

        assert [(w.week_number, w.day_number) for w in workouts] == [(1, 1), (1, 2), (2, 1), (2, 2)]
        assert workouts[0].working_set_count == 1
        assert workouts[0].warmup_set_count == 1

    def test_collect_names(self):
        """Test effective names include cycle 2 substitutes."""
        rows = [_row(date(2018, 3, 19)), _cycle_row(2), _row(date(2018, 4, 16))]
        segment = _segment(
            date(2018, 3, 19), date(2018, 4, 16), rows=rows,
            markers=[CycleMarker(1, 2, None)],
        )
        names = collect_all_exercise_names([_instance([segment])])

        assert names == {"Barbell Squat", "Wide Stance Squat"}
