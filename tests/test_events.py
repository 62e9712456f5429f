import unittest
from datetime import datetime, timedelta, timezone

from events import EventFilter, EventKind, EventLog, PhoneEvent

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def _local_naive(moment: datetime) -> datetime:
    return moment.astimezone().replace(tzinfo=None)


def _event(kind: EventKind, number: str, minutes: int) -> PhoneEvent:
    return PhoneEvent(kind, number, T0 + timedelta(minutes=minutes))


class EventLogTests(unittest.TestCase):
    def setUp(self) -> None:
        self.log = EventLog()
        self.log.append(_event(EventKind.ADD, "+12345678900", 0))
        self.log.append(_event(EventKind.DIAL, "+12345678900", 1))
        self.log.append(_event(EventKind.ADD, "55501234567", 2))
        self.log.append(_event(EventKind.DIAL, "55501234567", 3))
        self.log.append(_event(EventKind.REMOVE, "+12345678900", 4))

    def test_default_capacity(self) -> None:
        self.assertEqual(self.log.max_size, 100)

    def test_query_without_filter_returns_all_in_order(self) -> None:
        events = self.log.query()
        self.assertEqual([e.timestamp for e in events], [T0 + timedelta(minutes=m) for m in range(5)])

    def test_query_returns_a_copy(self) -> None:
        events = self.log.query()
        events.clear()
        self.assertEqual(len(self.log), 5)

    def test_filter_by_type(self) -> None:
        events = self.log.query(EventFilter(event_type=EventKind.DIAL))
        self.assertEqual([e.phone_number for e in events], ["+12345678900", "55501234567"])
        self.assertTrue(all(e.type == EventKind.DIAL for e in events))

    def test_filter_by_plain_string_type(self) -> None:
        events = self.log.query(EventFilter(event_type="remove"))  # type: ignore[arg-type]
        self.assertEqual(len(events), 1)

    def test_date_bounds_are_inclusive(self) -> None:
        events = self.log.query(
            EventFilter(start_date=T0 + timedelta(minutes=1), end_date=T0 + timedelta(minutes=3))
        )
        self.assertEqual([e.type for e in events], [EventKind.DIAL, EventKind.ADD, EventKind.DIAL])

    def test_filters_combine(self) -> None:
        events = self.log.query(EventFilter(event_type=EventKind.DIAL, start_date=T0 + timedelta(minutes=2)))
        self.assertEqual([e.phone_number for e in events], ["55501234567"])

    def test_naive_start_date_taken_as_local_time(self) -> None:
        start = _local_naive(T0 + timedelta(minutes=3))
        events = self.log.query(EventFilter(start_date=start))
        self.assertEqual([e.type for e in events], [EventKind.DIAL, EventKind.REMOVE])

    def test_naive_end_date_taken_as_local_time(self) -> None:
        end = _local_naive(T0 + timedelta(minutes=1))
        events = self.log.query(EventFilter(end_date=end))
        self.assertEqual([e.type for e in events], [EventKind.ADD, EventKind.DIAL])

    def test_naive_bounds_are_stored_aware(self) -> None:
        event_filter = EventFilter(start_date=datetime.now(), end_date=datetime.now())
        self.assertIsNotNone(event_filter.start_date.tzinfo)
        self.assertIsNotNone(event_filter.end_date.tzinfo)

    def test_naive_event_timestamp_is_made_aware(self) -> None:
        event = PhoneEvent(EventKind.ADD, "5550001111", _local_naive(T0))
        self.assertEqual(event.timestamp, T0)
        self.assertTrue(EventFilter(start_date=T0, end_date=T0).matches(event))

    def test_capacity_evicts_oldest(self) -> None:
        log = EventLog(max_size=3)
        for minute in range(5):
            log.append(_event(EventKind.ADD, "5550001111", minute))
            self.assertLessEqual(len(log), 3)
        self.assertEqual([e.timestamp for e in log], [T0 + timedelta(minutes=m) for m in (2, 3, 4)])

    def test_invalid_capacity_rejected(self) -> None:
        for bad in (0, -1, 2.5, True):
            with self.subTest(bad=bad):
                with self.assertRaises(ValueError):
                    EventLog(max_size=bad)  # type: ignore[arg-type]

    def test_clear(self) -> None:
        self.log.clear()
        self.assertEqual(self.log.query(), [])

    def test_events_are_immutable(self) -> None:
        event = self.log.query()[0]
        with self.assertRaises(AttributeError):
            event.phone_number = "0000000000"  # type: ignore[misc]

    def test_default_timestamp_is_utc(self) -> None:
        event = PhoneEvent(EventKind.ADD, "5550001111")
        self.assertEqual(event.timestamp.tzinfo, timezone.utc)

    def test_event_kind_matches_strings(self) -> None:
        self.assertEqual(EventKind.OBSERVER_ADDED, "observerAdded")
        self.assertEqual(EventKind("observerRemoved"), EventKind.OBSERVER_REMOVED)


if __name__ == "__main__":
    unittest.main(verbosity=2)
