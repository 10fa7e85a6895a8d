"""Tests for runner_telemetry/duration.py"""

import unittest
from datetime import datetime, timedelta, timezone

from runner_telemetry.duration import estimate_duration, pair_completions
from runner_telemetry.models import SENTINEL_DURATION, EventKind, JobEvent

T0 = datetime(2026, 10, 19, 10, 0, 0, tzinfo=timezone.utc)


def _event(kind, name="build", offset=0, source="Worker_a.log", inferred=False):
    return JobEvent(
        kind=kind,
        job_name=name,
        timestamp=T0 + timedelta(seconds=offset),
        source_file=source,
        timestamp_inferred=inferred,
    )


def _durations(events):
    return [estimate_duration(start, end) for end, start in pair_completions(events)]


class TestPairCompletions(unittest.TestCase):
    def test_start_paired_with_completion(self):
        start = _event(EventKind.STARTED, offset=0)
        end = _event(EventKind.SUCCEEDED, offset=245)
        self.assertEqual(list(pair_completions([start, end])), [(end, start)])

    def test_starts_are_not_yielded(self):
        start = _event(EventKind.STARTED, offset=0)
        self.assertEqual(list(pair_completions([start])), [])

    def test_start_for_other_job_is_ignored(self):
        start = _event(EventKind.STARTED, name="lint", offset=0)
        end = _event(EventKind.SUCCEEDED, offset=245)
        self.assertEqual(list(pair_completions([start, end])), [(end, None)])

    def test_start_in_other_file_is_not_paired(self):
        start = _event(EventKind.STARTED, offset=0, source="Worker_a.log")
        end = _event(EventKind.SUCCEEDED, offset=60, source="Worker_b.log")
        self.assertEqual(list(pair_completions([start, end])), [(end, None)])

    def test_start_after_completion_is_not_paired(self):
        end = _event(EventKind.SUCCEEDED, offset=60)
        start = _event(EventKind.STARTED, offset=100)
        self.assertEqual(list(pair_completions([end, start])), [(end, None)])

    def test_unnamed_completion_has_no_start(self):
        start = _event(EventKind.STARTED, name=None, offset=0)
        end = _event(EventKind.SUCCEEDED, name=None, offset=60)
        self.assertEqual(list(pair_completions([start, end])), [(end, None)])

    def test_first_start_of_the_run_is_used(self):
        retry = _event(EventKind.STARTED, offset=0)
        again = _event(EventKind.STARTED, offset=50)
        end = _event(EventKind.SUCCEEDED, offset=100)
        self.assertEqual(_durations([retry, again, end]), [100])

    def test_repeated_runs_pair_in_order(self):
        events = [
            _event(EventKind.STARTED, offset=0),
            _event(EventKind.SUCCEEDED, offset=100),
            _event(EventKind.STARTED, offset=1000),
            _event(EventKind.FAILED, offset=1040),
        ]
        self.assertEqual(_durations(events), [100, 40])

    def test_completion_closes_the_open_start(self):
        events = [
            _event(EventKind.STARTED, offset=0),
            _event(EventKind.SUCCEEDED, offset=100),
            _event(EventKind.FAILED, offset=200),
        ]
        self.assertEqual(_durations(events), [100, SENTINEL_DURATION])


class TestEstimateDuration(unittest.TestCase):
    def test_seconds_between_markers(self):
        start = _event(EventKind.STARTED, offset=0)
        end = _event(EventKind.SUCCEEDED, offset=245)
        self.assertEqual(estimate_duration(start, end), 245)

    def test_failed_completion_measured_too(self):
        start = _event(EventKind.STARTED, offset=0)
        end = _event(EventKind.FAILED, offset=30)
        self.assertEqual(estimate_duration(start, end), 30)

    def test_no_start_gives_sentinel(self):
        end = _event(EventKind.SUCCEEDED, offset=245)
        self.assertEqual(estimate_duration(None, end), SENTINEL_DURATION)

    def test_zero_duration_gives_sentinel(self):
        start = _event(EventKind.STARTED, offset=10)
        end = _event(EventKind.SUCCEEDED, offset=10)
        self.assertEqual(estimate_duration(start, end), SENTINEL_DURATION)

    def test_negative_duration_gives_sentinel(self):
        start = _event(EventKind.STARTED, offset=100)
        end = _event(EventKind.SUCCEEDED, offset=10)
        self.assertEqual(estimate_duration(start, end), SENTINEL_DURATION)

    def test_a_day_or_more_gives_sentinel(self):
        start = _event(EventKind.STARTED, offset=0)
        end = _event(EventKind.SUCCEEDED, offset=86400)
        self.assertEqual(estimate_duration(start, end), SENTINEL_DURATION)

    def test_just_under_a_day_is_kept(self):
        start = _event(EventKind.STARTED, offset=0)
        end = _event(EventKind.SUCCEEDED, offset=86399)
        self.assertEqual(estimate_duration(start, end), 86399)

    def test_inferred_timestamps_give_sentinel(self):
        start = _event(EventKind.STARTED, offset=0, inferred=True)
        end = _event(EventKind.SUCCEEDED, offset=60)
        self.assertEqual(estimate_duration(start, end), SENTINEL_DURATION)

        start = _event(EventKind.STARTED, offset=0)
        end = _event(EventKind.SUCCEEDED, offset=60, inferred=True)
        self.assertEqual(estimate_duration(start, end), SENTINEL_DURATION)

    def test_unnamed_completion_gives_sentinel(self):
        start = _event(EventKind.STARTED, name=None, offset=0)
        end = _event(EventKind.SUCCEEDED, name=None, offset=60)
        self.assertEqual(estimate_duration(start, end), SENTINEL_DURATION)


if __name__ == "__main__":
    unittest.main()
