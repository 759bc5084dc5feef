#!/usr/bin/env python3
"""
Unit tests for the application DTOs
"""

import unittest

from pydantic import ValidationError as PydanticValidationError

from parker.application.dtos import (
    LotStatusDTO, ParkingAllocationDTO, ParkingChargeDTO, SlotStatusDTO
)
from parker.domain.models import ParkingCharge


class TestParkingChargeDTO(unittest.TestCase):

    def test_from_domain(self):
        dto = ParkingChargeDTO.from_domain(ParkingCharge("KA-01-HH-1234", 4, 30))
        self.assertEqual(dto.to_dict(), {
            "registration_number": "KA-01-HH-1234",
            "slot_number": 4,
            "charge": 30,
        })

    def test_json_round_trip(self):
        dto = ParkingChargeDTO.from_domain(ParkingCharge("KA-01-HH-1234", 4, 30))
        restored = ParkingChargeDTO.from_json(dto.to_json())

        self.assertIsInstance(restored, ParkingChargeDTO)
        self.assertEqual(restored, dto)

    def test_from_json_validates(self):
        with self.assertRaises(PydanticValidationError):
            ParkingChargeDTO.from_json('{"registration_number": "A", "slot_number": 0, "charge": 10}')

    def test_is_frozen(self):
        dto = ParkingChargeDTO(registration_number="A", slot_number=1, charge=10)
        with self.assertRaises(PydanticValidationError):
            dto.charge = 20


class TestParkingAllocationDTO(unittest.TestCase):

    def test_lot_full(self):
        self.assertTrue(ParkingAllocationDTO(registration_number="A").lot_full)
        self.assertFalse(ParkingAllocationDTO(registration_number="A", slot_number=2).lot_full)


class TestLotStatusDTO(unittest.TestCase):

    def _status(self, **overrides):
        data = {
            "lot_id": "lot-1",
            "capacity": 4,
            "occupied_slots": 1,
            "available_slots": 3,
            "slots": [SlotStatusDTO(slot_number=2, registration_number="B")],
        }
        data.update(overrides)
        return LotStatusDTO(**data)

    def test_occupancy_rate(self):
        self.assertAlmostEqual(self._status().occupancy_rate, 0.25)

    def test_counts_must_add_up(self):
        with self.assertRaises(PydanticValidationError):
            self._status(available_slots=2)
        with self.assertRaises(PydanticValidationError):
            self._status(slots=[])

    def test_json_round_trip_keeps_slots(self):
        status = self._status()
        restored = LotStatusDTO.from_json(status.to_json())
        self.assertEqual(restored, status)
        self.assertEqual(restored.slots[0].registration_number, "B")


if __name__ == "__main__":
    unittest.main()
