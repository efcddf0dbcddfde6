from __future__ import annotations

import os
import time
import unittest
from datetime import datetime, timedelta, timezone

from whattodo.adapters.clock import LocalZone, SystemClock
from whattodo.domain.recurrence import RecurrenceRule, RepeatUnit, compute_due_time, to_epoch_ms
from whattodo.domain.task import Task


@unittest.skipUnless(hasattr(time, "tzset"), "needs time.tzset")
class LocalZoneTests(unittest.TestCase):
    def setUp(self) -> None:
        previous = os.environ.get("TZ")

        def restore() -> None:
            if previous is None:
                os.environ.pop("TZ", None)
            else:
                os.environ["TZ"] = previous
            time.tzset()

        self.addCleanup(restore)
        os.environ["TZ"] = "America/New_York"
        time.tzset()
        self.zone = LocalZone()
        if datetime(2026, 7, 1, tzinfo=self.zone).utcoffset() != timedelta(hours=-4):
            self.skipTest("tz database not available")

    def test_offset_follows_daylight_saving(self) -> None:
        self.assertEqual(datetime(2026, 7, 1, 12, 0, tzinfo=self.zone).utcoffset(), timedelta(hours=-4))
        self.assertEqual(datetime(2026, 1, 1, 12, 0, tzinfo=self.zone).utcoffset(), timedelta(hours=-5))
        self.assertEqual(datetime(2026, 7, 1, tzinfo=self.zone).dst(), timedelta(hours=1))
        self.assertEqual(datetime(2026, 1, 1, tzinfo=self.zone).dst(), timedelta(0))

    def test_repeated_hour_is_marked_as_second_occurrence(self) -> None:
        first = datetime(2026, 11, 1, 5, 30, tzinfo=timezone.utc).astimezone(self.zone)
        second = datetime(2026, 11, 1, 6, 30, tzinfo=timezone.utc).astimezone(self.zone)
        after = datetime(2026, 11, 1, 7, 30, tzinfo=timezone.utc).astimezone(self.zone)

        self.assertEqual((first.hour, first.minute, first.fold), (1, 30, 0))
        self.assertEqual((second.hour, second.minute, second.fold), (1, 30, 1))
        self.assertEqual((after.hour, after.fold), (2, 0))
        self.assertEqual(first.utcoffset(), timedelta(hours=-4))
        self.assertEqual(second.utcoffset(), timedelta(hours=-5))
        self.assertEqual(second.astimezone(timezone.utc), datetime(2026, 11, 1, 6, 30, tzinfo=timezone.utc))

    def test_skipped_hour_keeps_offset_from_before(self) -> None:
        self.assertEqual(datetime(2026, 3, 8, 2, 30, tzinfo=self.zone).utcoffset(), timedelta(hours=-5))

    def test_daily_task_done_before_clocks_go_back(self) -> None:
        task = Task(
            description="water plants",
            recurrence=RecurrenceRule(unit=RepeatUnit.DAILY, interval=1, minute=30),
            last_run=to_epoch_ms(datetime(2026, 11, 1, 4, 30, tzinfo=timezone.utc)),
        )
        now = datetime(2026, 11, 1, 8, 0, tzinfo=timezone.utc).astimezone(self.zone)

        due = compute_due_time(task, now)

        self.assertEqual((due.month, due.day, due.hour, due.minute), (11, 2, 0, 30))
        self.assertEqual(to_epoch_ms(due) - task.last_run, 25 * 60 * 60 * 1000)
        self.assertGreater(due, now)


class SystemClockTests(unittest.TestCase):
    def test_now_is_in_configured_zone(self) -> None:
        clock = SystemClock(timezone.utc)
        before = datetime.now(timezone.utc)

        now = clock.now()

        self.assertIs(now.tzinfo, timezone.utc)
        self.assertLessEqual(before, now)

    def test_defaults_to_host_zone(self) -> None:
        clock = SystemClock()

        self.assertIsInstance(clock.zone, LocalZone)
        self.assertIsInstance(clock.now().tzinfo, LocalZone)


if __name__ == "__main__":
    unittest.main()
