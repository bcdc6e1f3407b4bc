from __future__ import annotations

import logging
import sqlite3
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from src.presets import Preset, PresetInput
from src.records import (
    MATERIAL_KEYS,
    ClinicRecord,
    ClinicRecordInput,
    custom_materials_json,
    record_from_row,
)

LOGGER = logging.getLogger(__name__)

RECORD_COLUMNS = [
    "id",
    "user_id",
    "name",
    "surname",
    "mobile",
    "date",
    "money",
    *MATERIAL_KEYS,
    "custom_materials",
    "notes",
    "created_at",
]


class StoreError(Exception):
    """Raised when a store read or write fails or matches nothing."""


@dataclass
class UserSettings:
    show_summary: bool = True
    show_filters: bool = True
    show_table: bool = True


def _new_id() -> str:
    return uuid.uuid4().hex


def _normalized_email(value: Any) -> str:
    return str(value or "").strip().lower()


def _preset_from_row(row: sqlite3.Row) -> Preset:
    return Preset(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        name=str(row["name"] or ""),
        search=row["search"] or "",
        date_from=row["date_from"] or None,
        date_to=row["date_to"] or None,
        created_at=str(row["created_at"] or ""),
    )


def _settings_from_row(row: sqlite3.Row) -> UserSettings:
    return UserSettings(
        show_summary=bool(row["show_summary"]),
        show_filters=bool(row["show_filters"]),
        show_table=bool(row["show_table"]),
    )


def _record_values(values: ClinicRecordInput) -> tuple[Any, ...]:
    return (
        values.name,
        values.surname,
        values.mobile,
        values.date,
        float(values.money),
        *[int(values.materials.get(key) or 0) for key in MATERIAL_KEYS],
        custom_materials_json(values.custom_materials),
        values.notes,
    )


class ClinicStore:
    """
    Local stand-in for the hosted records backend.

    Every query is scoped by ``user_id``; a write that matches no row owned by
    the caller raises ``StoreError``.
    """

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(str(self.db_path))
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")
        return connection

    def ensure_schema(self) -> None:
        material_columns = "\n".join(
            f"                    {key} INTEGER NOT NULL DEFAULT 0 CHECK ({key} >= 0)," for key in MATERIAL_KEYS
        )
        with self._connect() as conn:
            conn.executescript(
                f"""
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                );

                CREATE TABLE IF NOT EXISTS clinic_records (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    surname TEXT NOT NULL,
                    mobile TEXT NOT NULL,
                    date TEXT NOT NULL,
                    money REAL NOT NULL DEFAULT 0 CHECK (money >= 0),
{material_columns}
                    custom_materials TEXT,
                    notes TEXT,
                    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                    FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
                );

                CREATE INDEX IF NOT EXISTS idx_clinic_records_user_date
                    ON clinic_records(user_id, date);

                CREATE TABLE IF NOT EXISTS presets (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    search TEXT NOT NULL DEFAULT '',
                    date_from TEXT,
                    date_to TEXT,
                    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                    FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
                );

                CREATE INDEX IF NOT EXISTS idx_presets_user
                    ON presets(user_id);

                CREATE TABLE IF NOT EXISTS user_settings (
                    user_id TEXT PRIMARY KEY,
                    show_summary INTEGER NOT NULL DEFAULT 1,
                    show_filters INTEGER NOT NULL DEFAULT 1,
                    show_table INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                    FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
                );
                """
            )

    def _execute_write(self, sql: str, params: tuple[Any, ...], *, action: str) -> int:
        try:
            with self._connect() as conn:
                cursor = conn.execute(sql, params)
                return cursor.rowcount
        except sqlite3.Error as exc:
            LOGGER.exception("Store %s failed", action)
            raise StoreError(f"Could not {action}: {exc}") from exc

    def _fetch(self, sql: str, params: tuple[Any, ...], *, action: str, one: bool = False) -> Any:
        try:
            with self._connect() as conn:
                cursor = conn.execute(sql, params)
                return cursor.fetchone() if one else cursor.fetchall()
        except sqlite3.Error as exc:
            LOGGER.exception("Store %s failed", action)
            raise StoreError(f"Could not {action}: {exc}") from exc

    # Users

    def create_user(self, email: str, password_hash: str) -> str:
        user_id = _new_id()
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO users(id, email, password_hash) VALUES (?, ?, ?)",
                    (user_id, _normalized_email(email), password_hash),
                )
        except sqlite3.IntegrityError as exc:
            raise StoreError("An account with this email already exists.") from exc
        except sqlite3.Error as exc:
            LOGGER.exception("Store create user failed")
            raise StoreError(f"Could not create user: {exc}") from exc
        return user_id

    def get_user_by_email(self, email: str) -> dict[str, Any] | None:
        row = self._fetch(
            "SELECT id, email, password_hash, created_at FROM users WHERE email = ?",
            (_normalized_email(email),),
            action="load user",
            one=True,
        )
        return dict(row) if row is not None else None

    # Records

    def list_records(self, user_id: str) -> list[ClinicRecord]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    f"""
                    SELECT {", ".join(RECORD_COLUMNS)}
                    FROM clinic_records
                    WHERE user_id = ?
                    ORDER BY date DESC, created_at DESC, rowid DESC
                    """,
                    (user_id,),
                ).fetchall()
        except sqlite3.Error as exc:
            LOGGER.exception("Loading records failed")
            raise StoreError(f"Could not load records: {exc}") from exc
        return [record_from_row(dict(row)) for row in rows]

    def get_record(self, user_id: str, record_id: str) -> ClinicRecord | None:
        row = self._fetch(
            f"SELECT {', '.join(RECORD_COLUMNS)} FROM clinic_records WHERE user_id = ? AND id = ?",
            (user_id, record_id),
            action="load record",
            one=True,
        )
        return record_from_row(dict(row)) if row is not None else None

    def create_record(self, user_id: str, values: ClinicRecordInput) -> ClinicRecord:
        record_id = _new_id()
        placeholders = ", ".join("?" for _ in RECORD_COLUMNS[:-1])
        self._execute_write(
            f"INSERT INTO clinic_records({', '.join(RECORD_COLUMNS[:-1])}) VALUES ({placeholders})",
            (record_id, user_id, *_record_values(values)),
            action="create record",
        )
        created = self.get_record(user_id, record_id)
        if created is None:
            raise StoreError("Record write failed.")
        return created

    def update_record(self, user_id: str, record: ClinicRecord) -> ClinicRecord:
        editable = RECORD_COLUMNS[2:-1]
        assignments = ", ".join(f"{column} = ?" for column in editable)
        updated_rows = self._execute_write(
            f"UPDATE clinic_records SET {assignments} WHERE id = ? AND user_id = ?",
            (*_record_values(record.to_input()), record.id, user_id),
            action="update record",
        )
        if not updated_rows:
            raise StoreError("Record not found.")
        updated = self.get_record(user_id, record.id)
        if updated is None:
            raise StoreError("Record not found.")
        return updated

    def delete_record(self, user_id: str, record_id: str) -> str:
        deleted_rows = self._execute_write(
            "DELETE FROM clinic_records WHERE id = ? AND user_id = ?",
            (record_id, user_id),
            action="delete record",
        )
        if not deleted_rows:
            raise StoreError("Record not found.")
        return record_id

    # Presets

    def list_presets(self, user_id: str) -> list[Preset]:
        rows = self._fetch(
            """
            SELECT id, user_id, name, search, date_from, date_to, created_at
            FROM presets
            WHERE user_id = ?
            ORDER BY created_at DESC, rowid DESC
            """,
            (user_id,),
            action="load presets",
        )
        return [_preset_from_row(row) for row in rows]

    def _get_preset(self, user_id: str, preset_id: str) -> Preset | None:
        row = self._fetch(
            """
            SELECT id, user_id, name, search, date_from, date_to, created_at
            FROM presets
            WHERE user_id = ? AND id = ?
            """,
            (user_id, preset_id),
            action="load preset",
            one=True,
        )
        return _preset_from_row(row) if row is not None else None

    def create_preset(self, user_id: str, values: PresetInput) -> Preset:
        preset_id = _new_id()
        self._execute_write(
            "INSERT INTO presets(id, user_id, name, search, date_from, date_to) VALUES (?, ?, ?, ?, ?, ?)",
            (preset_id, user_id, values.name, values.search or "", values.date_from, values.date_to),
            action="create preset",
        )
        created = self._get_preset(user_id, preset_id)
        if created is None:
            raise StoreError("Preset write failed.")
        return created

    def update_preset(self, user_id: str, preset: Preset) -> Preset:
        updated_rows = self._execute_write(
            """
            UPDATE presets
            SET name = ?, search = ?, date_from = ?, date_to = ?
            WHERE id = ? AND user_id = ?
            """,
            (preset.name, preset.search or "", preset.date_from, preset.date_to, preset.id, user_id),
            action="update preset",
        )
        if not updated_rows:
            raise StoreError("Preset not found.")
        updated = self._get_preset(user_id, preset.id)
        if updated is None:
            raise StoreError("Preset not found.")
        return updated

    def delete_preset(self, user_id: str, preset_id: str) -> str:
        deleted_rows = self._execute_write(
            "DELETE FROM presets WHERE id = ? AND user_id = ?",
            (preset_id, user_id),
            action="delete preset",
        )
        if not deleted_rows:
            raise StoreError("Preset not found.")
        return preset_id

    # Settings

    def get_settings(self, user_id: str) -> UserSettings | None:
        row = self._fetch(
            "SELECT show_summary, show_filters, show_table FROM user_settings WHERE user_id = ?",
            (user_id,),
            action="load settings",
            one=True,
        )
        return _settings_from_row(row) if row is not None else None

    def save_settings(self, user_id: str, settings: UserSettings) -> UserSettings:
        self._execute_write(
            """
            INSERT INTO user_settings(user_id, show_summary, show_filters, show_table, updated_at)
            VALUES (?, ?, ?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(user_id)
            DO UPDATE SET
                show_summary = excluded.show_summary,
                show_filters = excluded.show_filters,
                show_table = excluded.show_table,
                updated_at = CURRENT_TIMESTAMP
            """,
            (user_id, int(settings.show_summary), int(settings.show_filters), int(settings.show_table)),
            action="save settings",
        )
        return settings

    def ensure_settings(self, user_id: str, defaults: UserSettings | None = None) -> UserSettings:
        existing = self.get_settings(user_id)
        if existing is not None:
            return existing
        return self.save_settings(user_id, defaults or UserSettings())
