from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Sequence

from src.clinic_store import ClinicStore, StoreError, UserSettings
from src.config import DEFAULT_FONT_PATH
from src.export import csv_filename, to_csv_bytes
from src.filters import FilterState, apply_quick_range, filter_cache_key, filter_records, resolve_quick_range
from src.presets import Preset, find_preset, from_preset, renamed_preset, to_preset_payload
from src.receipts_pdf import generate_client_pdf, generate_records_pdf
from src.records import ClinicRecord, validate_record_form
from src.summary import SummaryTotals, summarize

LOGGER = logging.getLogger(__name__)

EXPORT_TARGETS = ("filtered", "selected")
PAGE_SIZE = 10


@dataclass(frozen=True)
class Notice:
    level: str
    message_key: str
    detail: str = ""


@dataclass(frozen=True)
class ExportFile:
    data: bytes
    filename: str
    mime: str


@dataclass(frozen=True)
class DashboardState:
    filters: FilterState = field(default_factory=FilterState)
    selected_ids: tuple[str, ...] = ()
    preset_name: str = ""
    selected_preset_id: str = ""
    clinic_name: str = ""
    manager_name: str = ""
    page: int = 0


def with_filters(state: DashboardState, filters: FilterState) -> DashboardState:
    return replace(state, filters=filters, page=0)


def page_count(total: int, page_size: int = PAGE_SIZE) -> int:
    return max(1, (total + page_size - 1) // page_size)


def paginate(records: Sequence[ClinicRecord], page: int, page_size: int = PAGE_SIZE) -> list[ClinicRecord]:
    last_page = page_count(len(records), page_size) - 1
    page = min(max(0, int(page)), last_page)
    start = page * page_size
    return list(records[start : start + page_size])


def _sort_newest_first(records: list[ClinicRecord]) -> list[ClinicRecord]:
    return sorted(records, key=lambda record: (record.date, record.created_at), reverse=True)


class RecordsController:
    """
    Commands behind the dashboard.

    The controller holds the last confirmed snapshot of the owner's records
    and presets. Each command takes the current ``DashboardState`` and returns
    the next one together with a ``Notice`` for the UI; local snapshots change
    only after the store confirms a write.
    """

    def __init__(
        self,
        store: ClinicStore,
        user_id: str,
        *,
        lang: str = "ka",
        font_path: Path = DEFAULT_FONT_PATH,
        records_pdf: Callable[..., tuple[bytes, str]] = generate_records_pdf,
        client_pdf: Callable[..., tuple[bytes, str]] = generate_client_pdf,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.user_id = user_id
        self.lang = lang
        self.font_path = Path(font_path)
        self._records_pdf = records_pdf
        self._client_pdf = client_pdf
        self._clock = clock
        self.records: list[ClinicRecord] = []
        self.presets: list[Preset] = []
        self.load_failed = False
        self._filter_memo: tuple[Any, list[ClinicRecord]] | None = None
        self._pending_exports: set[str] = set()

    # Reads

    def refresh(self) -> Notice | None:
        try:
            records = self.store.list_records(self.user_id)
            presets = self.store.list_presets(self.user_id)
        except StoreError as exc:
            self.load_failed = True
            return Notice("error", "failed_to_load", str(exc))
        self.records = records
        self.presets = presets
        self.load_failed = False
        self._filter_memo = None
        return None

    def filtered(self, state: DashboardState) -> list[ClinicRecord]:
        key = filter_cache_key(self.records, state.filters)
        if self._filter_memo is not None and self._filter_memo[0] == key:
            return self._filter_memo[1]
        result = filter_records(self.records, state.filters)
        self._filter_memo = (key, result)
        return result

    def summary(self, state: DashboardState) -> SummaryTotals:
        return summarize(self.filtered(state))

    def selected_records(self, state: DashboardState) -> list[ClinicRecord]:
        wanted = set(state.selected_ids)
        return [record for record in self.records if record.id in wanted]

    def target_records(self, state: DashboardState, target: str) -> list[ClinicRecord]:
        if target not in EXPORT_TARGETS:
            raise ValueError(f"Unknown export target: {target!r}")
        return self.filtered(state) if target == "filtered" else self.selected_records(state)

    def find_record(self, record_id: str) -> ClinicRecord | None:
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    # Filters and selection

    def quick_filter(self, state: DashboardState, kind: str) -> DashboardState:
        quick = resolve_quick_range(kind, self._clock())
        next_state = with_filters(state, apply_quick_range(state.filters, quick))
        if quick.clear_selection:
            next_state = replace(next_state, selected_ids=())
        return next_state

    def set_selection(self, state: DashboardState, record_ids: Sequence[str]) -> DashboardState:
        known = {record.id for record in self.records}
        return replace(state, selected_ids=tuple(record_id for record_id in record_ids if record_id in known))

    # Presets

    def load_preset(self, state: DashboardState, preset_id: str) -> tuple[DashboardState, Notice | None]:
        preset = find_preset(self.presets, preset_id)
        if preset is None:
            return replace(state, selected_preset_id=preset_id), None
        next_state = with_filters(state, from_preset(preset))
        return replace(next_state, selected_preset_id=preset.id), Notice("info", "preset_loaded", preset.name)

    def save_preset(self, state: DashboardState) -> tuple[DashboardState, Notice]:
        payload = to_preset_payload(state.preset_name, state.filters)
        if payload is None:
            return state, Notice("warning", "preset_name_required")
        try:
            created = self.store.create_preset(self.user_id, payload)
        except StoreError as exc:
            return state, Notice("error", "save_failed", str(exc))
        self.presets = [created, *self.presets]
        return replace(state, preset_name=""), Notice("success", "preset_saved", created.name)

    def rename_preset(self, state: DashboardState) -> tuple[DashboardState, Notice]:
        preset = find_preset(self.presets, state.selected_preset_id)
        if preset is None:
            return state, Notice("warning", "preset_not_selected")
        renamed = renamed_preset(preset, state.preset_name)
        if renamed is None:
            return state, Notice("warning", "preset_name_required")
        try:
            updated = self.store.update_preset(self.user_id, renamed)
        except StoreError as exc:
            return state, Notice("error", "save_failed", str(exc))
        self.presets = [updated if item.id == updated.id else item for item in self.presets]
        return replace(state, preset_name=""), Notice("success", "preset_renamed", updated.name)

    def delete_preset(self, state: DashboardState) -> tuple[DashboardState, Notice]:
        preset = find_preset(self.presets, state.selected_preset_id)
        if preset is None:
            return state, Notice("warning", "preset_not_selected")
        try:
            self.store.delete_preset(self.user_id, preset.id)
        except StoreError as exc:
            return state, Notice("error", "delete_failed", str(exc))
        self.presets = [item for item in self.presets if item.id != preset.id]
        return replace(state, selected_preset_id=""), Notice("success", "preset_deleted", preset.name)

    # Records

    def save_record(self, values: dict[str, Any], editing_id: str | None = None) -> tuple[Notice, dict[str, str]]:
        record_input, errors = validate_record_form(values)
        if record_input is None:
            return Notice("warning", "validation_errors"), errors

        try:
            if editing_id:
                existing = self.find_record(editing_id)
                if existing is None:
                    raise StoreError("Record not found.")
                saved = self.store.update_record(self.user_id, existing.with_input(record_input))
            else:
                saved = self.store.create_record(self.user_id, record_input)
        except StoreError as exc:
            return Notice("error", "save_failed", str(exc)), {}

        others = [record for record in self.records if record.id != saved.id]
        self.records = _sort_newest_first([saved, *others])
        self._filter_memo = None
        return Notice("success", "record_updated" if editing_id else "record_created"), {}

    def _forget_record(self, state: DashboardState, record_id: str) -> DashboardState:
        self.records = [record for record in self.records if record.id != record_id]
        self._filter_memo = None
        return replace(state, selected_ids=tuple(item for item in state.selected_ids if item != record_id))

    def delete_record(self, state: DashboardState, record_id: str) -> tuple[DashboardState, Notice]:
        try:
            self.store.delete_record(self.user_id, record_id)
        except StoreError as exc:
            return state, Notice("error", "delete_failed", str(exc))
        return self._forget_record(state, record_id), Notice("success", "record_deleted")

    def delete_selected(self, state: DashboardState) -> tuple[DashboardState, Notice]:
        for record_id in list(state.selected_ids):
            try:
                self.store.delete_record(self.user_id, record_id)
            except StoreError as exc:
                return state, Notice("error", "delete_failed", str(exc))
            state = self._forget_record(state, record_id)
        return replace(state, selected_ids=()), Notice("success", "record_deleted")

    # Settings

    def load_settings(self, defaults: UserSettings | None = None) -> tuple[UserSettings, Notice | None]:
        fallback = defaults or UserSettings()
        try:
            return self.store.ensure_settings(self.user_id, fallback), None
        except StoreError as exc:
            return fallback, Notice("error", "failed_to_load", str(exc))

    def save_settings(self, settings: UserSettings) -> Notice | None:
        try:
            self.store.save_settings(self.user_id, settings)
        except StoreError as exc:
            return Notice("error", "save_failed", str(exc))
        return None

    # Exports

    def is_export_pending(self, kind: str, target: str) -> bool:
        return f"{kind}:{target}" in self._pending_exports

    def export_csv(self, state: DashboardState, target: str) -> tuple[ExportFile | None, Notice | None]:
        records = self.target_records(state, target)
        if not records:
            return None, Notice("info", "nothing_to_export")
        return ExportFile(to_csv_bytes(records), csv_filename(self._clock()), "text/csv"), None

    def _run_pdf_export(self, pending_key: str, render: Callable[[], tuple[bytes, str]]) -> tuple[ExportFile | None, Notice | None]:
        if pending_key in self._pending_exports:
            return None, Notice("warning", "export_in_progress")
        self._pending_exports.add(pending_key)
        try:
            data, filename = render()
        except Exception as exc:
            LOGGER.exception("PDF export %s failed", pending_key)
            return None, Notice("export_error", "export_failed", str(exc))
        finally:
            self._pending_exports.discard(pending_key)
        return ExportFile(data, filename, "application/pdf"), None

    def export_pdf(self, state: DashboardState, target: str) -> tuple[ExportFile | None, Notice | None]:
        records = self.target_records(state, target)
        if not records:
            return None, Notice("info", "nothing_to_export")
        return self._run_pdf_export(
            f"pdf:{target}",
            lambda: self._records_pdf(
                records,
                self.lang,
                state.clinic_name,
                state.manager_name,
                today=self._clock(),
                font_path=self.font_path,
            ),
        )

    def client_pdf(self, state: DashboardState, record_id: str) -> tuple[ExportFile | None, Notice | None]:
        record = self.find_record(record_id)
        if record is None:
            return None, Notice("warning", "nothing_to_export")
        return self._run_pdf_export(
            f"pdf:record:{record_id}",
            lambda: self._client_pdf(
                record,
                self.lang,
                state.clinic_name,
                state.manager_name,
                font_path=self.font_path,
            ),
        )
