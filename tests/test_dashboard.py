from __future__ import annotations

import sqlite3
import tempfile
import unittest
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from unittest import mock

from src.clinic_store import ClinicStore, StoreError, UserSettings
from src.dashboard import DashboardState, Notice, RecordsController, page_count, paginate
from src.filters import FilterState
from src.records import ClinicRecord, ClinicRecordInput

NOW = datetime(2024, 3, 13, 10, 30)


def _form(name: str, record_date: str, money: str = "100", **extra):
    values = {"name": name, "surname": "Doe", "mobile": "555-100", "date": record_date, "money": money}
    values.update(extra)
    return values


class RecordsControllerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.store = ClinicStore(Path(self._tmpdir.name) / "clinic.db")
        self.user_id = self.store.create_user("owner@example.com", "hash")
        self.rendered: list[tuple] = []
        self.controller = RecordsController(
            self.store,
            self.user_id,
            lang="en",
            records_pdf=self._fake_records_pdf,
            client_pdf=self._fake_client_pdf,
            clock=lambda: NOW,
        )

    def tearDown(self) -> None:
        self._tmpdir.cleanup()

    def _fake_records_pdf(self, records, lang, clinic_name, manager_name, **kwargs):
        self.rendered.append(("report", [record.id for record in records], lang, clinic_name, manager_name))
        return b"%PDF-report", "Clinic_Report_2024-03-13.pdf"

    def _fake_client_pdf(self, record, lang, clinic_name, manager_name, **kwargs):
        self.rendered.append(("client", record.id, lang, clinic_name, manager_name))
        return b"%PDF-client", "John_Doe_2024-03-13.pdf"

    def _seed(self) -> list[ClinicRecord]:
        for name, record_date in [("John", "2024-03-13"), ("Ann", "2024-03-01"), ("Nino", "2024-02-10")]:
            notice, errors = self.controller.save_record(_form(name, record_date))
            self.assertEqual(errors, {})
            self.assertEqual(notice, Notice("success", "record_created"))
        return list(self.controller.records)

    def test_refresh_loads_owner_records(self) -> None:
        other_id = self.store.create_user("other@example.com", "hash")
        self.store.create_record(self.user_id, ClinicRecordInput("John", "Doe", "555", "2024-03-13"))
        self.store.create_record(other_id, ClinicRecordInput("Eve", "Roe", "556", "2024-03-13"))
        self.assertIsNone(self.controller.refresh())
        self.assertEqual(len(self.controller.records), 1)
        self.assertFalse(self.controller.load_failed)

    def test_refresh_failure_keeps_previous_snapshot(self) -> None:
        self._seed()
        with mock.patch.object(self.store, "list_records", side_effect=StoreError("disk is gone")):
            notice = self.controller.refresh()
        self.assertEqual(notice, Notice("error", "failed_to_load", "disk is gone"))
        self.assertTrue(self.controller.load_failed)
        self.assertEqual(len(self.controller.records), 3)

    def test_refresh_reports_a_failed_presets_read(self) -> None:
        self._seed()
        with sqlite3.connect(str(self.store.db_path)) as conn:
            conn.execute("DROP TABLE presets")
        notice = self.controller.refresh()
        self.assertEqual(notice.level, "error")
        self.assertEqual(notice.message_key, "failed_to_load")
        self.assertIn("no such table: presets", notice.detail)
        self.assertTrue(self.controller.load_failed)
        self.assertEqual(len(self.controller.records), 3)

    def test_save_record_keeps_newest_first(self) -> None:
        records = self._seed()
        self.assertEqual([record.name for record in records], ["John", "Ann", "Nino"])

    def test_save_record_reports_validation_errors(self) -> None:
        notice, errors = self.controller.save_record(_form("", "2024-03-13", money="-5"))
        self.assertEqual(notice, Notice("warning", "validation_errors"))
        self.assertIn("name", errors)
        self.assertIn("money", errors)
        self.assertEqual(self.controller.records, [])

    def test_save_record_rejects_infinite_money(self) -> None:
        for raw in ["inf", "1e999", "nan"]:
            notice, errors = self.controller.save_record(_form("John", "2024-03-13", money=raw))
            self.assertEqual(notice, Notice("warning", "validation_errors"))
            self.assertEqual(errors["money"], "Must be a number")
        self.assertEqual(self.controller.records, [])
        self.assertEqual(self.store.list_records(self.user_id), [])

    def test_edit_record(self) -> None:
        john = self._seed()[0]
        notice, errors = self.controller.save_record(_form("Johnny", "2024-01-01", money="80"), john.id)
        self.assertEqual((notice.message_key, errors), ("record_updated", {}))
        edited = self.controller.find_record(john.id)
        self.assertEqual(edited.name, "Johnny")
        self.assertEqual(self.controller.records[-1].id, john.id)
        self.assertEqual(self.store.get_record(self.user_id, john.id).money, 80.0)

    def test_edit_unknown_record_is_a_store_error(self) -> None:
        notice, _errors = self.controller.save_record(_form("Ghost", "2024-03-01"), "missing-id")
        self.assertEqual(notice, Notice("error", "save_failed", "Record not found."))

    def test_quick_filters(self) -> None:
        state = DashboardState(filters=FilterState(search="doe"), selected_ids=("a",), page=3)
        week = self.controller.quick_filter(state, "week")
        self.assertEqual(week.filters, FilterState(search="doe", date_from="2024-03-10", date_to="2024-03-16"))
        self.assertEqual(week.page, 0)
        self.assertEqual(week.selected_ids, ("a",))

        cleared = self.controller.quick_filter(week, "clear")
        self.assertEqual(cleared.filters, FilterState(search="doe"))
        self.assertEqual(cleared.selected_ids, ())

    def test_filtered_summary_and_selection(self) -> None:
        john, ann, nino = self._seed()
        state = self.controller.quick_filter(DashboardState(), "month")
        self.assertEqual([record.id for record in self.controller.filtered(state)], [john.id, ann.id])
        self.assertEqual(self.controller.summary(state).count, 2)

        state = self.controller.set_selection(state, [nino.id, "unknown", john.id])
        self.assertEqual(set(state.selected_ids), {nino.id, john.id})
        self.assertEqual([record.id for record in self.controller.selected_records(state)], [john.id, nino.id])

    def test_delete_record_drops_it_from_selection(self) -> None:
        john, ann, _nino = self._seed()
        state = DashboardState(selected_ids=(john.id, ann.id))
        state, notice = self.controller.delete_record(state, john.id)
        self.assertEqual(notice, Notice("success", "record_deleted"))
        self.assertEqual(state.selected_ids, (ann.id,))
        self.assertIsNone(self.controller.find_record(john.id))

    def test_failed_delete_leaves_state_unchanged(self) -> None:
        self._seed()
        state = DashboardState(selected_ids=("missing",))
        next_state, notice = self.controller.delete_record(state, "missing")
        self.assertIs(next_state, state)
        self.assertEqual(notice.level, "error")
        self.assertEqual(len(self.controller.records), 3)

    def test_delete_selected(self) -> None:
        john, ann, nino = self._seed()
        state, notice = self.controller.delete_selected(DashboardState(selected_ids=(john.id, nino.id)))
        self.assertEqual(notice.message_key, "record_deleted")
        self.assertEqual(state.selected_ids, ())
        self.assertEqual([record.id for record in self.controller.records], [ann.id])
        self.assertEqual([record.id for record in self.store.list_records(self.user_id)], [ann.id])

    def test_preset_commands(self) -> None:
        state = DashboardState(filters=FilterState(search="doe", date_from="2024-03-01"), preset_name="  ")
        unchanged, notice = self.controller.save_preset(state)
        self.assertIs(unchanged, state)
        self.assertEqual(notice, Notice("warning", "preset_name_required"))

        state, notice = self.controller.save_preset(replace(state, preset_name=" March "))
        self.assertEqual(notice, Notice("success", "preset_saved", "March"))
        self.assertEqual(state.preset_name, "")
        preset = self.controller.presets[0]

        state, notice = self.controller.load_preset(DashboardState(page=2), preset.id)
        self.assertEqual(state.filters, FilterState(search="doe", date_from="2024-03-01"))
        self.assertEqual((state.selected_preset_id, state.page), (preset.id, 0))
        self.assertEqual(notice.message_key, "preset_loaded")

        state, notice = self.controller.rename_preset(replace(state, preset_name="Spring"))
        self.assertEqual(notice, Notice("success", "preset_renamed", "Spring"))
        self.assertEqual(self.store.list_presets(self.user_id)[0].name, "Spring")

        state, notice = self.controller.delete_preset(state)
        self.assertEqual(notice.message_key, "preset_deleted")
        self.assertEqual(state.selected_preset_id, "")
        self.assertEqual(self.controller.presets, [])

    def test_preset_commands_need_a_selection(self) -> None:
        _state, notice = self.controller.rename_preset(DashboardState(preset_name="New"))
        self.assertEqual(notice, Notice("warning", "preset_not_selected"))
        _state, notice = self.controller.delete_preset(DashboardState())
        self.assertEqual(notice, Notice("warning", "preset_not_selected"))

    def test_csv_export_targets(self) -> None:
        john, _ann, _nino = self._seed()
        file, notice = self.controller.export_csv(DashboardState(), "filtered")
        self.assertIsNone(notice)
        self.assertEqual(file.filename, "clinic_records_2024-03-13.csv")
        self.assertEqual(file.mime, "text/csv")
        self.assertEqual(len(file.data.decode("utf-8").splitlines()), 4)

        file, notice = self.controller.export_csv(DashboardState(), "selected")
        self.assertIsNone(file)
        self.assertEqual(notice, Notice("info", "nothing_to_export"))

        file, _notice = self.controller.export_csv(DashboardState(selected_ids=(john.id,)), "selected")
        self.assertEqual(len(file.data.decode("utf-8").splitlines()), 2)

        with self.assertRaises(ValueError):
            self.controller.export_csv(DashboardState(), "everything")

    def test_pdf_export_passes_clinic_details(self) -> None:
        john, _ann, _nino = self._seed()
        state = DashboardState(selected_ids=(john.id,), clinic_name="Smile", manager_name="Nino")
        file, notice = self.controller.export_pdf(state, "selected")
        self.assertIsNone(notice)
        self.assertEqual(file.data, b"%PDF-report")
        self.assertEqual(file.mime, "application/pdf")
        self.assertEqual(self.rendered, [("report", [john.id], "en", "Smile", "Nino")])

        file, notice = self.controller.client_pdf(state, john.id)
        self.assertEqual(file.filename, "John_Doe_2024-03-13.pdf")
        self.assertEqual(self.rendered[-1], ("client", john.id, "en", "Smile", "Nino"))

    def test_duplicate_pdf_export_is_rejected_while_pending(self) -> None:
        self._seed()
        nested: list = []

        def reentrant(records, lang, clinic_name, manager_name, **kwargs):
            nested.append(self.controller.export_pdf(DashboardState(), "filtered"))
            self.assertTrue(self.controller.is_export_pending("pdf", "filtered"))
            return b"%PDF", "report.pdf"

        self.controller._records_pdf = reentrant
        file, notice = self.controller.export_pdf(DashboardState(), "filtered")
        self.assertIsNotNone(file)
        self.assertIsNone(notice)
        self.assertEqual(nested, [(None, Notice("warning", "export_in_progress"))])
        self.assertFalse(self.controller.is_export_pending("pdf", "filtered"))

    def test_pdf_failure_becomes_export_error(self) -> None:
        self._seed()

        def broken(*args, **kwargs):
            raise RuntimeError("font missing")

        self.controller._records_pdf = broken
        file, notice = self.controller.export_pdf(DashboardState(), "filtered")
        self.assertIsNone(file)
        self.assertEqual(notice, Notice("export_error", "export_failed", "font missing"))
        self.assertFalse(self.controller.is_export_pending("pdf", "filtered"))

    def test_settings(self) -> None:
        settings, notice = self.controller.load_settings()
        self.assertIsNone(notice)
        self.assertEqual(settings, UserSettings())
        self.assertIsNone(self.controller.save_settings(UserSettings(show_table=False)))
        self.assertFalse(self.controller.load_settings()[0].show_table)

    def test_settings_read_failure_keeps_defaults(self) -> None:
        with sqlite3.connect(str(self.store.db_path)) as conn:
            conn.execute("DROP TABLE user_settings")
        settings, notice = self.controller.load_settings(UserSettings(show_filters=False))
        self.assertEqual(settings, UserSettings(show_filters=False))
        self.assertEqual(notice.level, "error")
        self.assertEqual(notice.message_key, "failed_to_load")


class PaginationTests(unittest.TestCase):
    def test_page_count(self) -> None:
        self.assertEqual(page_count(0), 1)
        self.assertEqual(page_count(10), 1)
        self.assertEqual(page_count(11), 2)

    def test_paginate_clamps_page(self) -> None:
        items = list(range(23))
        self.assertEqual(paginate(items, 0), list(range(10)))
        self.assertEqual(paginate(items, 2), [20, 21, 22])
        self.assertEqual(paginate(items, 9), [20, 21, 22])
        self.assertEqual(paginate(items, -1), list(range(10)))


if __name__ == "__main__":
    unittest.main()
