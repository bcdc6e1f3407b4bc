from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any

MATERIAL_FIELDS: list[tuple[str, str]] = [
    ("keramika", "material_keramika"),
    ("tsirkoni", "material_tsirkoni"),
    ("balka", "material_balka"),
    ("plastmassi", "material_plastmassi"),
    ("shabloni", "material_shabloni"),
    ("cisferi_plastmassi", "material_cisferi_plastmassi"),
]
MATERIAL_KEYS: list[str] = [key for key, _label_key in MATERIAL_FIELDS]
MATERIAL_LABEL_KEYS: dict[str, str] = dict(MATERIAL_FIELDS)

REQUIRED_TEXT_FIELDS = ["name", "surname", "mobile", "date"]
MOBILE_PATTERN = re.compile(r"^[+\d\s-]+$")


@dataclass
class CustomMaterial:
    name: str
    qty: int = 0


@dataclass
class ClinicRecordInput:
    name: str
    surname: str
    mobile: str
    date: str
    money: float = 0.0
    materials: dict[str, int] = field(default_factory=lambda: {key: 0 for key in MATERIAL_KEYS})
    custom_materials: list[CustomMaterial] = field(default_factory=list)
    notes: str | None = None


@dataclass
class ClinicRecord:
    id: str
    name: str
    surname: str
    mobile: str
    date: str
    money: float = 0.0
    materials: dict[str, int] = field(default_factory=lambda: {key: 0 for key in MATERIAL_KEYS})
    custom_materials: list[CustomMaterial] = field(default_factory=list)
    notes: str | None = None
    user_id: str = ""
    created_at: str = ""

    def material(self, key: str) -> int:
        return int(self.materials.get(key) or 0)

    def to_input(self) -> ClinicRecordInput:
        return ClinicRecordInput(
            name=self.name,
            surname=self.surname,
            mobile=self.mobile,
            date=self.date,
            money=self.money,
            materials=dict(self.materials),
            custom_materials=[CustomMaterial(item.name, item.qty) for item in self.custom_materials],
            notes=self.notes,
        )

    def with_input(self, values: ClinicRecordInput) -> ClinicRecord:
        return ClinicRecord(
            id=self.id,
            name=values.name,
            surname=values.surname,
            mobile=values.mobile,
            date=values.date,
            money=values.money,
            materials=dict(values.materials),
            custom_materials=list(values.custom_materials),
            notes=values.notes,
            user_id=self.user_id,
            created_at=self.created_at,
        )


def _safe_int(value: Any) -> int:
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError, OverflowError):
        return 0


def _safe_float(value: Any) -> float:
    try:
        number = float(value or 0)
    except (TypeError, ValueError):
        return 0.0
    return max(0.0, number) if math.isfinite(number) else 0.0


def parse_custom_materials(value: Any) -> list[CustomMaterial]:
    if value is None or value == "":
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return []
    if not isinstance(value, list):
        return []

    items: list[CustomMaterial] = []
    for entry in value:
        if isinstance(entry, CustomMaterial):
            items.append(CustomMaterial(entry.name, _safe_int(entry.qty)))
        elif isinstance(entry, dict):
            items.append(CustomMaterial(str(entry.get("name") or ""), _safe_int(entry.get("qty"))))
    return items


def custom_materials_json(items: list[CustomMaterial]) -> str:
    return json.dumps([{"name": item.name, "qty": int(item.qty)} for item in items], ensure_ascii=False)


def record_from_row(row: dict[str, Any]) -> ClinicRecord:
    """Build a record from a store row, normalizing null counters and notes."""
    notes = row.get("notes")
    return ClinicRecord(
        id=str(row.get("id") or ""),
        user_id=str(row.get("user_id") or ""),
        name=str(row.get("name") or ""),
        surname=str(row.get("surname") or ""),
        mobile=str(row.get("mobile") or ""),
        date=str(row.get("date") or ""),
        money=_safe_float(row.get("money")),
        materials={key: _safe_int(row.get(key)) for key in MATERIAL_KEYS},
        custom_materials=parse_custom_materials(row.get("custom_materials")),
        notes=None if notes is None else str(notes),
        created_at=str(row.get("created_at") or ""),
    )


def _number_error(raw: Any, *, integer: bool) -> tuple[float | int | None, str]:
    text = str(raw if raw is not None else "").strip()
    if not text:
        return 0, ""
    try:
        number = float(text.replace(",", "."))
    except ValueError:
        return None, "Must be a number"
    if not math.isfinite(number):
        return None, "Must be a number"
    if number < 0:
        return None, "Must be 0 or more"
    if integer:
        if not number.is_integer():
            return None, "Must be a whole number"
        return int(number), ""
    return number, ""


def validate_record_form(values: dict[str, Any]) -> tuple[ClinicRecordInput | None, dict[str, str]]:
    """
    Validate raw form values.

    Returns ``(input, {})`` on success or ``(None, errors)`` where ``errors``
    maps a field name (``custom_materials.<index>.name`` for list rows) to a
    message.
    """
    errors: dict[str, str] = {}
    text: dict[str, str] = {}
    for field_name in REQUIRED_TEXT_FIELDS:
        text[field_name] = str(values.get(field_name) or "").strip()
        if not text[field_name]:
            errors[field_name] = f"{field_name.title()} is required"

    if text["mobile"] and not MOBILE_PATTERN.match(text["mobile"]):
        errors["mobile"] = "Only +, digits, spaces, and - are allowed"

    if text["date"]:
        try:
            text["date"] = date.fromisoformat(text["date"]).isoformat()
        except ValueError:
            errors["date"] = "Date must be YYYY-MM-DD"

    money, money_error = _number_error(values.get("money"), integer=False)
    if money_error:
        errors["money"] = money_error if money_error != "Must be 0 or more" else "Money must be 0 or more"

    materials: dict[str, int] = {}
    for key in MATERIAL_KEYS:
        quantity, quantity_error = _number_error(values.get(key), integer=True)
        if quantity_error:
            errors[key] = quantity_error
        else:
            materials[key] = int(quantity or 0)

    custom_items: list[CustomMaterial] = []
    for index, entry in enumerate(values.get("custom_materials") or []):
        if isinstance(entry, CustomMaterial):
            entry = {"name": entry.name, "qty": entry.qty}
        if not isinstance(entry, dict):
            continue
        name = str(entry.get("name") or "").strip()
        if not name:
            errors[f"custom_materials.{index}.name"] = "Name is required"
        quantity, quantity_error = _number_error(entry.get("qty"), integer=True)
        if quantity_error:
            errors[f"custom_materials.{index}.qty"] = quantity_error
        if name and not quantity_error:
            custom_items.append(CustomMaterial(name=name, qty=int(quantity or 0)))

    if errors:
        return None, errors

    notes_raw = values.get("notes")
    notes = None if notes_raw is None else str(notes_raw)
    return (
        ClinicRecordInput(
            name=text["name"],
            surname=text["surname"],
            mobile=text["mobile"],
            date=text["date"],
            money=float(money or 0),
            materials=materials,
            custom_materials=custom_items,
            notes=notes,
        ),
        {},
    )
