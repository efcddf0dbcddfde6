from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from whattodo.adapters.snapshot import (
    Snapshot,
    SnapshotError,
    SnapshotStore,
    decode_snapshot,
    encode_snapshot,
)
from whattodo.domain.priority import Priority
from whattodo.domain.recurrence import LAST_DAY_OF_MONTH, Month, RecurrenceRule, RepeatUnit, Weekday
from whattodo.domain.task import Task


class SnapshotCodecTests(unittest.TestCase):
    def test_round_trip_keeps_every_field(self) -> None:
        water = Task(
            description="Water plants",
            priority=Priority.HIGH,
            recurrence=RecurrenceRule(
                unit=RepeatUnit.WEEKLY,
                interval=2,
                day_of_week=Weekday.WEDNESDAY,
                minute=540,
            ),
            dependencies={"ghost", "seeds"},
            last_run=1_767_776_400_000,
            task_id="water",
        )
        seeds = Task(description="Buy seeds", done=True, task_id="seeds", last_run=5)
        snapshot = Snapshot(tasks={"water": water, "seeds": seeds}, current_task_id="water")

        decoded = decode_snapshot(encode_snapshot(snapshot))

        self.assertEqual(decoded.tasks, snapshot.tasks)
        self.assertEqual(decoded.current_task_id, "water")

    def test_wildcards_are_written_as_sentinels(self) -> None:
        task = Task(
            description="Rent",
            recurrence=RecurrenceRule(
                unit=RepeatUnit.YEARLY,
                interval=1,
                day_of_month=LAST_DAY_OF_MONTH,
                month=Month.MARCH,
            ),
            task_id="rent",
        )
        payload = json.loads(encode_snapshot(Snapshot(tasks={"rent": task})))
        record = payload["tasks"]["rent"]

        self.assertEqual(record["minute"], -1)
        self.assertEqual(record["day_of_week"], 0)
        self.assertEqual(record["day_of_month"], 32)
        self.assertEqual(record["month"], 3)
        self.assertEqual(record["repeat_unit"], "yearly")
        self.assertIsNone(payload["current_task_id"])

    def test_encoding_is_deterministic(self) -> None:
        snapshot = Snapshot(tasks={"a": Task(description="a", task_id="a", dependencies={"c", "b"})})
        self.assertEqual(encode_snapshot(snapshot), encode_snapshot(snapshot))

    def test_missing_tasks_field_is_an_error(self) -> None:
        with self.assertRaises(SnapshotError):
            decode_snapshot(b'{"current_task_id": null}')

    def test_invalid_json_is_an_error(self) -> None:
        with self.assertRaises(SnapshotError):
            decode_snapshot(b"\xff\xfe not json")
        with self.assertRaises(SnapshotError):
            decode_snapshot("[1, 2")

    def test_malformed_record_is_an_error(self) -> None:
        bad_records = [
            {"tasks": {"a": "not an object"}},
            {"tasks": {"a": {"description": "x", "done": "yes"}}},
            {"tasks": {"a": {"description": "x", "priority": 3}}},
            {"tasks": {"a": {"description": "x", "repeat_unit": "daily", "repeat_interval": 0}}},
            {"tasks": [{"description": "no id"}]},
        ]
        for payload in bad_records:
            with self.subTest(payload=payload):
                with self.assertRaises(SnapshotError):
                    decode_snapshot(json.dumps(payload))

    def test_unknown_current_task_is_dropped(self) -> None:
        snapshot = decode_snapshot('{"tasks": {}, "current_task_id": "gone"}')
        self.assertIsNone(snapshot.current_task_id)

    def test_legacy_backup_records(self) -> None:
        payload = {
            "tasks": [
                {
                    "id": "water",
                    "description": "Water plants",
                    "repeatType": 3,
                    "repeatInterval": 1,
                    "dayOfWeek": 4,
                    "minute": 540,
                    "lastRun": 123,
                    "weight": 4,
                    "dependencies": ["seeds", "water"],
                }
            ],
            "currentTaskId": "water",
        }
        snapshot = decode_snapshot(json.dumps(payload))
        task = snapshot.tasks["water"]

        self.assertEqual(task.recurrence.unit, RepeatUnit.WEEKLY)
        self.assertEqual(task.recurrence.day_of_week, Weekday.WEDNESDAY)
        self.assertEqual(task.priority, Priority.HIGH)
        self.assertEqual(task.dependencies, {"seeds"})
        self.assertEqual(task.last_run, 123)
        self.assertEqual(snapshot.current_task_id, "water")


class SnapshotStoreTests(unittest.TestCase):
    def test_missing_file_reads_as_none(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            self.assertIsNone(SnapshotStore(Path(tmp_dir) / "tasks.json").read_bytes())

    def test_write_replaces_file_and_leaves_no_temp(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "nested" / "tasks.json"
            store = SnapshotStore(path)
            store.write_bytes(b"first")
            store.write_bytes(b"second")

            self.assertEqual(store.read_bytes(), b"second")
            self.assertEqual([item.name for item in path.parent.iterdir()], ["tasks.json"])


if __name__ == "__main__":
    unittest.main()
