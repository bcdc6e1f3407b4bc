from __future__ import annotations

import csv
import io
from datetime import date, datetime
from typing import Any, Sequence

from src.formatters import format_date, format_money, locale_for_language, to_iso_date
from src.i18n import translate
from src.records import MATERIAL_FIELDS, MATERIAL_KEYS, ClinicRecord, CustomMaterial

EXPORT_COLUMNS: list[str] = [
    "name",
    "surname",
    "mobile",
    "date",
    "money",
    *MATERIAL_KEYS,
    "custom_materials",
    "notes",
]
EXPORT_TARGETS = ("csv", "display")
CUSTOM_MATERIAL_SEPARATOR = "; "


def _raw_number(value: Any) -> str:
    text = str(value if value is not None else 0)
    return text[:-2] if text.endswith(".0") else text


def format_custom_materials(items: Sequence[CustomMaterial] | None, separator: str = CUSTOM_MATERIAL_SEPARATOR) -> str:
    if not items:
        return ""
    return separator.join(f"{item.name}: {item.qty}" for item in items if str(item.name or "").strip())


def column_labels(lang: str) -> list[str]:
    labels = {key: translate(lang, label_key) for key, label_key in MATERIAL_FIELDS}
    for column in ("name", "surname", "mobile", "date", "money", "custom_materials", "notes"):
        labels[column] = translate(lang, column)
    return [labels[column] for column in EXPORT_COLUMNS]


def project_record(record: ClinicRecord, target: str = "csv", locale: str = "en-US") -> list[str]:
    if target not in EXPORT_TARGETS:
        raise ValueError(f"Unknown export target: {target!r}")

    if target == "csv":
        date_cell = record.date
        money_cell = _raw_number(record.money)
    else:
        date_cell = format_date(record.date, locale)
        money_cell = format_money(record.money, locale)

    return [
        record.name,
        record.surname,
        record.mobile,
        date_cell,
        money_cell,
        *[str(record.material(key)) for key in MATERIAL_KEYS],
        format_custom_materials(record.custom_materials),
        record.notes or "",
    ]


def project_records(records: Sequence[ClinicRecord], target: str = "csv", locale: str = "en-US") -> list[list[str]]:
    return [project_record(record, target=target, locale=locale) for record in records]


def _csv_line(cells: Sequence[str]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(cells)
    return buffer.getvalue()[:-1]


def escape_csv_value(value: Any) -> str:
    text = "" if value is None else str(value)
    if not text:
        return ""
    return _csv_line([text])


def to_csv_text(records: Sequence[ClinicRecord]) -> str:
    lines = [_csv_line(EXPORT_COLUMNS)]
    lines.extend(_csv_line(row) for row in project_records(records, target="csv"))
    return "\n".join(lines)


def to_csv_bytes(records: Sequence[ClinicRecord]) -> bytes:
    return to_csv_text(records).encode("utf-8")


def csv_filename(today: date | datetime | None = None) -> str:
    use_date = today or datetime.now().date()
    return f"clinic_records_{to_iso_date(use_date)}.csv"


def share_text(record: ClinicRecord, lang: str) -> str:
    locale = locale_for_language(lang)
    items = ", ".join(
        f"{translate(lang, label_key)}: {record.material(key)}"
        for key, label_key in MATERIAL_FIELDS
        if record.material(key) > 0
    )
    lines = [
        translate(lang, "share_greeting", name=record.name, surname=record.surname),
        translate(lang, "share_details"),
        translate(lang, "share_date", date=record.date),
        translate(lang, "share_amount", amount=format_money(record.money, locale)),
        translate(lang, "share_materials", items=items) if items else "",
        translate(lang, "share_note", note=record.notes) if record.notes else "",
    ]
    return "\n".join(line for line in lines if line).strip()
