from __future__ import annotations

import unittest

from src.records import (
    MATERIAL_KEYS,
    CustomMaterial,
    custom_materials_json,
    parse_custom_materials,
    record_from_row,
    validate_record_form,
)


def _form(**overrides):
    values = {
        "name": " John ",
        "surname": "Doe",
        "mobile": "+995 555-12-34",
        "date": "2024-03-15",
        "money": "150.5",
        "keramika": "2",
        "custom_materials": [{"name": "Pin", "qty": "3"}],
        "notes": "Bring x-ray",
    }
    values.update(overrides)
    return values


class ValidateRecordFormTests(unittest.TestCase):
    def test_valid_form_builds_input(self) -> None:
        record_input, errors = validate_record_form(_form())
        self.assertEqual(errors, {})
        self.assertIsNotNone(record_input)
        self.assertEqual(record_input.name, "John")
        self.assertEqual(record_input.money, 150.5)
        self.assertEqual(record_input.materials["keramika"], 2)
        self.assertEqual(record_input.materials["tsirkoni"], 0)
        self.assertEqual(record_input.custom_materials, [CustomMaterial("Pin", 3)])
        self.assertEqual(set(record_input.materials), set(MATERIAL_KEYS))

    def test_required_fields(self) -> None:
        record_input, errors = validate_record_form(_form(name="  ", surname="", mobile=None, date=""))
        self.assertIsNone(record_input)
        self.assertEqual(errors["name"], "Name is required")
        self.assertEqual(errors["surname"], "Surname is required")
        self.assertEqual(errors["mobile"], "Mobile is required")
        self.assertEqual(errors["date"], "Date is required")

    def test_mobile_and_date_format(self) -> None:
        _record_input, errors = validate_record_form(_form(mobile="call me", date="2024-13-01"))
        self.assertEqual(errors["mobile"], "Only +, digits, spaces, and - are allowed")
        self.assertEqual(errors["date"], "Date must be YYYY-MM-DD")

    def test_numbers(self) -> None:
        _record_input, errors = validate_record_form(_form(money="-1", keramika="1.5", balka="x", shabloni="-2"))
        self.assertEqual(errors["money"], "Money must be 0 or more")
        self.assertEqual(errors["keramika"], "Must be a whole number")
        self.assertEqual(errors["balka"], "Must be a number")
        self.assertEqual(errors["shabloni"], "Must be 0 or more")

    def test_non_finite_numbers_are_rejected(self) -> None:
        for raw in ["inf", "1e999", "nan", "-inf"]:
            record_input, errors = validate_record_form(_form(money=raw, keramika=raw))
            self.assertIsNone(record_input)
            self.assertEqual(errors["money"], "Must be a number")
            self.assertEqual(errors["keramika"], "Must be a number")

    def test_blank_numbers_default_to_zero(self) -> None:
        record_input, errors = validate_record_form(_form(money="", keramika=None))
        self.assertEqual(errors, {})
        self.assertEqual(record_input.money, 0.0)
        self.assertEqual(record_input.materials["keramika"], 0)

    def test_custom_material_rows(self) -> None:
        _record_input, errors = validate_record_form(
            _form(custom_materials=[{"name": "Pin", "qty": 1}, {"name": " ", "qty": 1}, {"name": "Crown", "qty": -1}])
        )
        self.assertEqual(errors["custom_materials.1.name"], "Name is required")
        self.assertEqual(errors["custom_materials.2.qty"], "Must be 0 or more")
        self.assertNotIn("custom_materials.0.name", errors)


class RecordRowTests(unittest.TestCase):
    def test_row_normalizes_nulls(self) -> None:
        record = record_from_row(
            {
                "id": "r1",
                "name": "Ann",
                "surname": "Lee",
                "mobile": "555",
                "date": "2024-03-01",
                "money": None,
                "keramika": None,
                "custom_materials": None,
                "notes": None,
            }
        )
        self.assertEqual(record.money, 0.0)
        self.assertEqual(record.material("keramika"), 0)
        self.assertEqual(record.custom_materials, [])
        self.assertIsNone(record.notes)

    def test_row_with_non_finite_money_reads_as_zero(self) -> None:
        row = {"id": "r1", "name": "Ann", "surname": "Lee", "mobile": "555", "date": "2024-03-01"}
        self.assertEqual(record_from_row({**row, "money": float("inf")}).money, 0.0)
        self.assertEqual(record_from_row({**row, "money": float("nan")}).money, 0.0)
        self.assertEqual(record_from_row({**row, "keramika": float("inf")}).material("keramika"), 0)

    def test_custom_materials_json_round_trip(self) -> None:
        items = [CustomMaterial("ბალკა", 2)]
        self.assertEqual(parse_custom_materials(custom_materials_json(items)), items)
        self.assertEqual(parse_custom_materials("not json"), [])


if __name__ == "__main__":
    unittest.main()
