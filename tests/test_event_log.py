"""
SigLab Event Log Test Suite
"""

import logging
import threading
import unittest

from siglab import Actor, EventLog, Level, LogEntry


class TestEventLog(unittest.TestCase):

    def setUp(self):
        self.log = EventLog()

    def test_append_returns_entry(self):
        entry = self.log.append(Actor.A, "hello", Level.SUCCESS)
        self.assertIsInstance(entry, LogEntry)
        self.assertEqual(entry.actor, Actor.A)
        self.assertEqual(entry.text, "hello")
        self.assertEqual(entry.level, Level.SUCCESS)

    def test_default_level_is_info(self):
        self.assertEqual(self.log.append(Actor.SYSTEM, "x").level, Level.INFO)

    def test_order_and_ids_increase(self):
        entries = [self.log.append(Actor.SYSTEM, str(i)) for i in range(5)]
        self.assertEqual([e.text for e in self.log], ["0", "1", "2", "3", "4"])
        ids = [e.id for e in entries]
        self.assertEqual(ids, sorted(ids))
        self.assertEqual(len(set(ids)), 5)

    def test_timestamps_non_decreasing(self):
        for i in range(10):
            self.log.append(Actor.B, str(i))
        stamps = [e.timestamp for e in self.log]
        self.assertEqual(stamps, sorted(stamps))

    def test_accepts_plain_values(self):
        entry = self.log.append("Attacker", "boom", "error")
        self.assertEqual(entry.actor, Actor.ATTACKER)
        self.assertEqual(entry.level, Level.ERROR)

    def test_snapshot_is_immutable_copy(self):
        self.log.append(Actor.A, "one")
        snapshot = self.log.snapshot()
        self.log.append(Actor.A, "two")
        self.assertEqual(len(snapshot), 1)
        self.assertIsInstance(snapshot, tuple)

    def test_entries_are_frozen(self):
        entry = self.log.append(Actor.A, "one")
        with self.assertRaises(Exception):
            entry.text = "changed"

    def test_clear_empties(self):
        self.log.append(Actor.A, "one")
        self.log.clear()
        self.assertEqual(len(self.log), 0)

    def test_len_under_concurrent_appends(self):
        def writer(actor):
            for i in range(200):
                self.log.append(actor, str(i))

        threads = [threading.Thread(target=writer, args=(a,)) for a in Actor]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(len(self.log), 800)
        self.assertEqual(len(self.log), len(self.log.snapshot()))
        self.assertEqual(len({e.id for e in self.log}), 800)

    def test_ids_not_reused_after_clear(self):
        first = self.log.append(Actor.A, "one")
        self.log.clear()
        second = self.log.append(Actor.A, "two")
        self.assertGreater(second.id, first.id)

    def test_to_dict(self):
        d = self.log.append(Actor.SYSTEM, "done", Level.SUCCESS).to_dict()
        self.assertEqual(d["actor"], "System")
        self.assertEqual(d["level"], "success")
        self.assertEqual(d["text"], "done")
        self.assertTrue(d["timestamp"].endswith("Z"))

    def test_mirrored_to_stdlib_logging(self):
        with self.assertLogs("siglab.events", level="WARNING") as captured:
            self.log.append(Actor.SYSTEM, "careful", Level.WARNING)
        self.assertEqual(captured.records[0].levelno, logging.WARNING)
        self.assertIn("careful", captured.output[0])


if __name__ == "__main__":
    unittest.main()
