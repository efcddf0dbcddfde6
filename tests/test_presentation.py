from __future__ import annotations

import unittest

from whattodo.adapters.presentation import (
    day_of_month_label,
    format_time,
    parse_day_of_month,
    parse_month,
    parse_repeat_unit,
    parse_time,
    parse_weekday,
    task_summary,
)
from whattodo.domain.priority import Priority
from whattodo.domain.recurrence import LAST_DAY_OF_MONTH, Month, RecurrenceRule, RepeatUnit, Weekday
from whattodo.domain.task import Task


class FormattingTests(unittest.TestCase):
    def test_format_time(self) -> None:
        self.assertEqual(format_time(0), "12:00 AM")
        self.assertEqual(format_time(540), "09:00 AM")
        self.assertEqual(format_time(750), "12:30 PM")
        self.assertEqual(format_time(1439), "11:59 PM")
        self.assertEqual(format_time(None), "Any Time")

    def test_day_of_month_labels(self) -> None:
        self.assertEqual(day_of_month_label(1), "1st")
        self.assertEqual(day_of_month_label(11), "11th")
        self.assertEqual(day_of_month_label(22), "22nd")
        self.assertEqual(day_of_month_label(LAST_DAY_OF_MONTH), "Last Day")
        self.assertEqual(day_of_month_label(None), "Any Day")

    def test_weekly_summary(self) -> None:
        task = Task(
            description="Water plants",
            priority=Priority.HIGH,
            recurrence=RecurrenceRule(
                unit=RepeatUnit.WEEKLY,
                interval=2,
                day_of_week=Weekday.WEDNESDAY,
                minute=540,
            ),
        )
        self.assertEqual(
            task_summary(task),
            "Water plants\nPriority: High\nRepeat: Every 2 week(s)\nOn Wednesday\nAt 09:00 AM",
        )

    def test_hourly_summary_shows_window(self) -> None:
        task = Task(
            description="Drink water",
            recurrence=RecurrenceRule(
                unit=RepeatUnit.HOURLY,
                interval=1,
                min_minute=480,
                max_minute=1200,
            ),
        )
        self.assertEqual(
            task_summary(task),
            "Drink water\nPriority: Low\nRepeat: Every 1 hour(s)\nBetween 08:00 AM and 08:00 PM",
        )

    def test_yearly_summary(self) -> None:
        task = Task(
            description="Taxes",
            priority=Priority.URGENT,
            recurrence=RecurrenceRule(
                unit=RepeatUnit.YEARLY,
                interval=1,
                day_of_month=LAST_DAY_OF_MONTH,
                month=Month.APRIL,
            ),
        )
        self.assertEqual(
            task_summary(task),
            "Taxes\nPriority: Urgent\nRepeat: Every 1 year(s)\nOn the Last Day\nIn April",
        )

    def test_one_off_summary(self) -> None:
        self.assertEqual(task_summary(Task(description="Call mum")), "Call mum\nPriority: Low")


class ParsingTests(unittest.TestCase):
    def test_parse_time(self) -> None:
        self.assertEqual(parse_time("9:30pm"), 1290)
        self.assertEqual(parse_time("21:30"), 1290)
        self.assertEqual(parse_time("12:15 AM"), 15)
        self.assertIsNone(parse_time("Any Time"))
        self.assertIsNone(parse_time(""))
        for bad in ("25:00", "13:00 PM", "noon", "9"):
            with self.subTest(text=bad):
                with self.assertRaises(ValueError):
                    parse_time(bad)

    def test_parse_weekday(self) -> None:
        self.assertIs(parse_weekday("wed"), Weekday.WEDNESDAY)
        self.assertIs(parse_weekday("Sunday"), Weekday.SUNDAY)
        self.assertIsNone(parse_weekday("Any Day"))
        self.assertIsNone(parse_weekday(0))
        with self.assertRaises(ValueError):
            parse_weekday("someday")

    def test_parse_month(self) -> None:
        self.assertIs(parse_month("Mar"), Month.MARCH)
        self.assertIs(parse_month("12"), Month.DECEMBER)
        self.assertIsNone(parse_month("any month"))
        with self.assertRaises(ValueError):
            parse_month("Smarch")

    def test_parse_day_of_month(self) -> None:
        self.assertEqual(parse_day_of_month("last"), LAST_DAY_OF_MONTH)
        self.assertEqual(parse_day_of_month("3rd"), 3)
        self.assertEqual(parse_day_of_month(31), 31)
        self.assertIsNone(parse_day_of_month("0"))
        self.assertIsNone(parse_day_of_month("Any Day"))
        with self.assertRaises(ValueError):
            parse_day_of_month("40")

    def test_parse_repeat_unit(self) -> None:
        self.assertIs(parse_repeat_unit("Week(s)"), RepeatUnit.WEEKLY)
        self.assertIs(parse_repeat_unit("months"), RepeatUnit.MONTHLY)
        self.assertIs(parse_repeat_unit("daily"), RepeatUnit.DAILY)


if __name__ == "__main__":
    unittest.main()
