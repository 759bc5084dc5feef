#!/usr/bin/env python3
"""
Unit tests for the in-memory event bus
"""

import unittest
from unittest.mock import Mock

from parker.domain.models import ParkingLotCreatedEvent, VehicleLeftEvent, VehicleParkedEvent
from parker.infrastructure.messaging import (
    EventBus, EventHandler, EventType, LoggingEventHandler, RecordingEventHandler,
    event_type_of
)


class TestEventBus(unittest.TestCase):

    def setUp(self):
        self.bus = EventBus()
        self.recorder = RecordingEventHandler()

    def test_event_types(self):
        self.assertEqual(event_type_of(ParkingLotCreatedEvent(3)), EventType.PARKING_LOT_CREATED)
        self.assertEqual(event_type_of(VehicleParkedEvent("A", 1)), EventType.VEHICLE_PARKED)
        self.assertEqual(event_type_of(VehicleLeftEvent("A", 1, 10)), EventType.VEHICLE_LEFT)

    def test_publish_reaches_only_matching_subscribers(self):
        self.bus.subscribe(EventType.VEHICLE_PARKED, self.recorder)

        parked = VehicleParkedEvent("A", 1)
        self.bus.publish(parked)
        self.bus.publish(VehicleLeftEvent("A", 1))

        self.assertEqual(self.recorder.events, [parked])

    def test_subscribe_is_idempotent(self):
        self.bus.subscribe(EventType.VEHICLE_PARKED, self.recorder)
        self.bus.subscribe(EventType.VEHICLE_PARKED, self.recorder)
        self.bus.publish(VehicleParkedEvent("A", 1))
        self.assertEqual(len(self.recorder.events), 1)

    def test_unsubscribe(self):
        self.bus.subscribe_all(self.recorder)
        self.bus.unsubscribe(EventType.VEHICLE_LEFT, self.recorder)
        self.bus.publish_all([VehicleParkedEvent("A", 1), VehicleLeftEvent("A", 1)])
        self.assertEqual([type(e) for e in self.recorder.events], [VehicleParkedEvent])

    def test_clear_subscribers(self):
        self.bus.subscribe_all(self.recorder)
        self.bus.clear_subscribers()

        self.bus.publish_all([ParkingLotCreatedEvent(2), VehicleParkedEvent("A", 1)])
        self.assertEqual(self.recorder.events, [])

        self.bus.subscribe(EventType.VEHICLE_PARKED, self.recorder)
        self.bus.publish(VehicleParkedEvent("A", 1))
        self.assertEqual(len(self.recorder.events), 1)

    def test_failing_handler_does_not_stop_others(self):
        failing = Mock(spec=EventHandler)
        failing.can_handle.return_value = True
        failing.handle.side_effect = RuntimeError("boom")

        self.bus.subscribe(EventType.VEHICLE_PARKED, failing)
        self.bus.subscribe(EventType.VEHICLE_PARKED, self.recorder)

        with self.assertLogs("EventBus", level="ERROR"):
            self.bus.publish(VehicleParkedEvent("A", 1))

        failing.handle.assert_called_once()
        self.assertEqual(len(self.recorder.events), 1)

    def test_logging_handler(self):
        self.bus.subscribe_all(LoggingEventHandler())
        with self.assertLogs("LoggingEventHandler", level="INFO") as logs:
            self.bus.publish(VehicleLeftEvent("KA-01-HH-1234", 4, 30))
        self.assertIn("vehicle_left", logs.output[0])
        self.assertIn("KA-01-HH-1234", logs.output[0])

    def test_event_to_dict(self):
        data = VehicleLeftEvent("A", 2, 10).to_dict()
        self.assertEqual(data["event_type"], "vehicle_left")
        self.assertEqual(data["slot_id"], 2)
        self.assertEqual(data["charge"], 10)


if __name__ == "__main__":
    unittest.main()
