from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from html import escape
from typing import Any, Callable

import pandas as pd
import streamlit as st

from src.auth import AuthError, AuthService, AuthSession
from src.clinic_store import ClinicStore, UserSettings
from src.config import configure_logging, read_app_config
from src.dashboard import (
    DashboardState,
    ExportFile,
    Notice,
    RecordsController,
    page_count,
    paginate,
    with_filters,
)
from src.export import column_labels, project_record, share_text
from src.filters import FilterState
from src.formatters import format_money, locale_for_language, parse_iso_date, to_iso_date
from src.i18n import LANGUAGES, translator
from src.records import MATERIAL_FIELDS, ClinicRecord

CONFIG = read_app_config()
configure_logging(CONFIG.log_level)
LOGGER = logging.getLogger("clinic_app")

LANGUAGE_NAMES = {"ka": "ქართული", "en": "English"}
DELETE_SELECTED = "__selected__"
SESSION_KEYS = [
    "auth_session",
    "controller",
    "dashboard_state",
    "settings",
    "record_form",
    "pending_delete",
    "filter_search",
    "filter_from",
    "filter_to",
    "preset_name",
    "preset_select",
    "table_page",
    "show_summary",
    "show_filters",
    "show_table",
]


def _inject_dashboard_theme() -> None:
    st.markdown(
        """
        <style>
        :root {
            --clinic-ink: #0f172a;
            --clinic-muted: #64748b;
            --clinic-line: #dbe3ec;
            --clinic-accent: #1e4f5c;
        }

        .clinic-metric-grid {
            display: grid;
            grid-template-columns: repeat(4, minmax(140px, 1fr));
            gap: 10px;
            margin: 6px 0 14px 0;
        }

        .clinic-metric-card {
            background: #ffffff;
            border: 1px solid var(--clinic-line);
            border-radius: 12px;
            padding: 10px 12px;
        }

        .clinic-metric-label {
            font-size: 12px;
            color: var(--clinic-muted);
            text-transform: uppercase;
            letter-spacing: 0.04em;
        }

        .clinic-metric-value {
            font-size: 22px;
            font-weight: 700;
            color: var(--clinic-ink);
        }

        .clinic-metric-hint {
            font-size: 11px;
            color: var(--clinic-muted);
        }

        .clinic-materials {
            display: flex;
            flex-wrap: wrap;
            gap: 6px;
        }

        .clinic-pill {
            display: inline-block;
            padding: 3px 9px;
            border-radius: 999px;
            background: #e6f0f2;
            color: var(--clinic-accent);
            font-size: 12px;
            font-weight: 600;
        }

        @media (max-width: 900px) {
            .clinic-metric-grid {
                grid-template-columns: repeat(2, minmax(120px, 1fr));
            }
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def _store() -> ClinicStore:
    if "clinic_store" not in st.session_state:
        st.session_state.clinic_store = ClinicStore(CONFIG.db_path)
    return st.session_state.clinic_store


def _lang() -> str:
    return str(st.session_state.get("lang", CONFIG.default_language))


def _t() -> Callable[..., str]:
    return translator(_lang())


def _flash(notice: Notice | None) -> None:
    if notice is not None:
        st.session_state.setdefault("flash", []).append(notice)


def _notice_text(notice: Notice, t: Callable[..., str]) -> str:
    message = t(notice.message_key)
    return f"{message}: {notice.detail}" if notice.detail else message


def _show_notice(notice: Notice, t: Callable[..., str]) -> None:
    text = _notice_text(notice, t)
    if notice.level == "success":
        st.success(text)
    elif notice.level == "info":
        st.info(text)
    elif notice.level == "warning":
        st.warning(text)
    else:
        st.error(text)


def _render_flash(t: Callable[..., str]) -> None:
    for notice in st.session_state.pop("flash", []):
        _show_notice(notice, t)


def _iso_or_empty(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return to_iso_date(value)
    return str(value or "")


# Session and state


def _controller() -> RecordsController:
    session: AuthSession = st.session_state.auth_session
    controller = st.session_state.get("controller")
    if controller is None or controller.user_id != session.user_id:
        controller = RecordsController(_store(), session.user_id, lang=_lang(), font_path=CONFIG.font_path)
        _flash(controller.refresh())
        st.session_state.controller = controller
    controller.lang = _lang()
    return controller


def _state() -> DashboardState:
    state = st.session_state.get("dashboard_state")
    if state is None:
        state = DashboardState(clinic_name=CONFIG.clinic_name, manager_name=CONFIG.manager_name)
        st.session_state.dashboard_state = state
    return state


def _set_state(state: DashboardState, *, sync_widgets: bool = False) -> None:
    previous = st.session_state.get("dashboard_state")
    st.session_state.dashboard_state = state
    if previous is not None and previous.selected_ids != state.selected_ids:
        st.session_state.selection_version = int(st.session_state.get("selection_version", 0)) + 1
    if sync_widgets:
        st.session_state.filter_search = state.filters.search
        st.session_state.filter_from = parse_iso_date(state.filters.date_from)
        st.session_state.filter_to = parse_iso_date(state.filters.date_to)
        st.session_state.preset_name = state.preset_name
        st.session_state.preset_select = state.selected_preset_id
        st.session_state.table_page = state.page + 1


def _state_with_preset_widgets() -> DashboardState:
    return replace(
        _state(),
        preset_name=str(st.session_state.get("preset_name", "")),
        selected_preset_id=str(st.session_state.get("preset_select", "")),
    )


def _sign_out() -> None:
    for key in SESSION_KEYS:
        st.session_state.pop(key, None)
    for key in list(st.session_state.keys()):
        if str(key).startswith("export_file:"):
            st.session_state.pop(key, None)


# Callbacks


def _on_filters_changed() -> None:
    filters = FilterState(
        search=str(st.session_state.get("filter_search", "")),
        date_from=_iso_or_empty(st.session_state.get("filter_from")),
        date_to=_iso_or_empty(st.session_state.get("filter_to")),
    )
    _set_state(with_filters(_state(), filters))
    st.session_state.table_page = 1


def _on_quick_filter(kind: str) -> None:
    _set_state(_controller().quick_filter(_state_with_preset_widgets(), kind), sync_widgets=True)


def _on_preset_selected() -> None:
    preset_id = str(st.session_state.get("preset_select", ""))
    state, notice = _controller().load_preset(_state_with_preset_widgets(), preset_id)
    _set_state(state, sync_widgets=True)
    _flash(notice)


def _on_preset_command(command: str) -> None:
    controller = _controller()
    handler = {
        "save": controller.save_preset,
        "rename": controller.rename_preset,
        "delete": controller.delete_preset,
    }[command]
    state, notice = handler(_state_with_preset_widgets())
    _set_state(state, sync_widgets=True)
    _flash(notice)


def _on_settings_changed() -> None:
    settings = UserSettings(
        show_summary=bool(st.session_state.get("show_summary", True)),
        show_filters=bool(st.session_state.get("show_filters", True)),
        show_table=bool(st.session_state.get("show_table", True)),
    )
    st.session_state.settings = settings
    _flash(_controller().save_settings(settings))


def _on_refresh() -> None:
    controller = _controller()
    notice = controller.refresh()
    _flash(notice)
    if notice is None:
        _set_state(controller.set_selection(_state(), _state().selected_ids))


def _on_export_pdf(target: str) -> None:
    file, notice = _controller().export_pdf(_state(), target)
    _flash(notice)
    if file is not None:
        st.session_state[f"export_file:pdf:{target}"] = file


def _on_client_pdf(record_id: str) -> None:
    file, notice = _controller().client_pdf(_state(), record_id)
    _flash(notice)
    if file is not None:
        st.session_state[f"export_file:client:{record_id}"] = file


def _on_clear_selection() -> None:
    _set_state(replace(_state(), selected_ids=()))


def _on_confirm_delete() -> None:
    pending = st.session_state.pop("pending_delete", None)
    controller = _controller()
    if pending == DELETE_SELECTED:
        state, notice = controller.delete_selected(_state())
    elif pending:
        state, notice = controller.delete_record(_state(), pending)
    else:
        return
    _set_state(state)
    _flash(notice)


def _open_record_form(record: ClinicRecord | None = None) -> None:
    today = datetime.now().date()
    st.session_state.record_form = {"editing_id": record.id if record else None}
    st.session_state.form_version = int(st.session_state.get("form_version", 0)) + 1
    st.session_state.form_name = record.name if record else ""
    st.session_state.form_surname = record.surname if record else ""
    st.session_state.form_mobile = record.mobile if record else ""
    st.session_state.form_date = (parse_iso_date(record.date) if record else None) or today
    st.session_state.form_money = float(record.money) if record else 0.0
    st.session_state.form_notes = (record.notes or "") if record else ""
    for key, _label_key in MATERIAL_FIELDS:
        st.session_state[f"form_{key}"] = record.material(key) if record else 0
    st.session_state.form_custom_rows = [
        {"name": item.name, "qty": item.qty} for item in (record.custom_materials if record else [])
    ]


def _close_record_form() -> None:
    st.session_state.pop("record_form", None)


# Rendering


def _render_auth_page(t: Callable[..., str]) -> None:
    st.title(t("app_title"))
    st.caption(t("welcome_back"))
    st.selectbox(
        t("language"),
        options=list(LANGUAGES),
        format_func=lambda code: LANGUAGE_NAMES.get(code, code),
        key="lang",
    )
    auth = AuthService(_store(), allow_signup=CONFIG.allow_signup)

    sign_in_tab, sign_up_tab = st.tabs([t("sign_in"), t("sign_up")])
    with sign_in_tab:
        with st.form("sign_in_form"):
            email = st.text_input(t("email"), key="sign_in_email")
            password = st.text_input(t("password"), type="password", key="sign_in_password")
            submitted = st.form_submit_button(t("sign_in"), use_container_width=True)
        if submitted:
            try:
                st.session_state.auth_session = auth.sign_in(email, password)
            except AuthError as error:
                st.error(f"{t('auth_failed')}: {error}")
            else:
                st.rerun()

    with sign_up_tab:
        if not CONFIG.allow_signup:
            st.info(t("signup_disabled"))
            return
        with st.form("sign_up_form"):
            email = st.text_input(t("email"), key="sign_up_email")
            password = st.text_input(t("password"), type="password", key="sign_up_password")
            submitted = st.form_submit_button(t("sign_up"), use_container_width=True)
        if submitted:
            try:
                auth.sign_up(email, password)
            except AuthError as error:
                st.error(f"{t('auth_failed')}: {error}")
            else:
                st.success(t("account_created"))


def _render_export_download(key: str, t: Callable[..., str]) -> None:
    file: ExportFile | None = st.session_state.get(key)
    if file is None:
        return
    st.download_button(
        t("download_file", filename=file.filename),
        data=file.data,
        file_name=file.filename,
        mime=file.mime,
        use_container_width=True,
        key=f"download_{key}",
    )


def _render_csv_download(controller: RecordsController, state: DashboardState, target: str, label: str) -> None:
    file, _notice = controller.export_csv(state, target)
    if file is None:
        st.button(label, disabled=True, use_container_width=True, key=f"csv_disabled_{target}")
        return
    st.download_button(
        label,
        data=file.data,
        file_name=file.filename,
        mime=file.mime,
        use_container_width=True,
        key=f"csv_{target}",
    )


def _render_pdf_export(controller: RecordsController, target: str, label: str, t: Callable[..., str]) -> None:
    pending = controller.is_export_pending("pdf", target)
    st.button(
        t("generating_pdf") if pending else label,
        disabled=pending,
        use_container_width=True,
        key=f"pdf_{target}",
        on_click=_on_export_pdf,
        args=(target,),
    )
    _render_export_download(f"export_file:pdf:{target}", t)


def _render_sidebar(controller: RecordsController, settings: UserSettings, t: Callable[..., str]) -> None:
    session: AuthSession = st.session_state.auth_session
    sidebar = st.sidebar
    sidebar.selectbox(
        t("language"),
        options=list(LANGUAGES),
        format_func=lambda code: LANGUAGE_NAMES.get(code, code),
        key="lang",
    )
    sidebar.caption(t("signed_in_as", email=session.email))
    sidebar.button(t("sign_out"), use_container_width=True, on_click=_sign_out)

    sidebar.header(t("panels"))
    for key in ["show_summary", "show_filters", "show_table"]:
        st.session_state.setdefault(key, getattr(settings, key))
        sidebar.toggle(t(key), key=key, on_change=_on_settings_changed)

    sidebar.header(t("clinic"))
    st.session_state.setdefault("clinic_name_input", CONFIG.clinic_name)
    st.session_state.setdefault("manager_name_input", CONFIG.manager_name)
    sidebar.text_input(t("clinic_name"), key="clinic_name_input")
    sidebar.text_input(t("manager_name"), key="manager_name_input")

    sidebar.header(t("actions"))
    sidebar.button(t("refresh"), use_container_width=True, on_click=_on_refresh)
    sidebar.button(t("add_record"), use_container_width=True, on_click=_open_record_form)
    with sidebar:
        _render_csv_download(controller, _state(), "filtered", t("export_csv_filtered"))
        _render_pdf_export(controller, "filtered", t("export_pdf_filtered"), t)


def _render_summary_tiles(controller: RecordsController, state: DashboardState, t: Callable[..., str]) -> None:
    totals = controller.summary(state)
    locale = locale_for_language(_lang())
    metric_cards = [
        (t("total_money"), format_money(totals.total_money, locale), t("money_total_hint")),
        (t("records_count"), str(totals.count), t("records_count_hint")),
    ]
    cards_html = "".join(
        (
            "<div class='clinic-metric-card'>"
            f"<div class='clinic-metric-label'>{escape(label)}</div>"
            f"<div class='clinic-metric-value'>{escape(value)}</div>"
            f"<div class='clinic-metric-hint'>{escape(hint)}</div>"
            "</div>"
        )
        for label, value, hint in metric_cards
    )
    st.markdown(f"<div class='clinic-metric-grid'>{cards_html}</div>", unsafe_allow_html=True)

    pills = "".join(
        f"<span class='clinic-pill'>{escape(t(label_key))}: {totals.material_totals.get(key, 0)}</span>"
        for key, label_key in MATERIAL_FIELDS
    )
    st.markdown(f"**{escape(t('materials_totals'))}**")
    st.markdown(f"<div class='clinic-materials'>{pills}</div>", unsafe_allow_html=True)


def _render_filters(controller: RecordsController, state: DashboardState, t: Callable[..., str]) -> None:
    st.session_state.setdefault("filter_search", state.filters.search)
    st.session_state.setdefault("filter_from", parse_iso_date(state.filters.date_from))
    st.session_state.setdefault("filter_to", parse_iso_date(state.filters.date_to))

    search_col, from_col, to_col = st.columns([2, 1, 1])
    with search_col:
        st.text_input(t("search"), placeholder=t("search_placeholder"), key="filter_search", on_change=_on_filters_changed)
    with from_col:
        st.date_input(t("from"), value=None, key="filter_from", on_change=_on_filters_changed)
    with to_col:
        st.date_input(t("to"), value=None, key="filter_to", on_change=_on_filters_changed)

    quick_columns = st.columns(4)
    for column, (kind, label_key) in zip(
        quick_columns,
        [("today", "today"), ("week", "this_week"), ("month", "this_month"), ("clear", "clear")],
    ):
        column.button(t(label_key), use_container_width=True, key=f"quick_{kind}", on_click=_on_quick_filter, args=(kind,))

    st.markdown(f"**{t('presets')}**")
    st.caption(t("preset_help"))
    preset_options = ["", *[preset.id for preset in controller.presets]]
    preset_names = {preset.id: preset.name for preset in controller.presets}
    if st.session_state.get("preset_select", "") not in preset_options:
        st.session_state.preset_select = ""
    select_col, name_col = st.columns(2)
    with select_col:
        st.selectbox(
            t("load_preset"),
            options=preset_options,
            format_func=lambda preset_id: preset_names.get(preset_id, t("no_presets") if not preset_names else "-"),
            key="preset_select",
            on_change=_on_preset_selected,
        )
    with name_col:
        st.text_input(t("preset_name"), key="preset_name")
    save_col, rename_col, delete_col = st.columns(3)
    save_col.button(t("save_preset"), use_container_width=True, on_click=_on_preset_command, args=("save",))
    rename_col.button(t("rename_preset"), use_container_width=True, on_click=_on_preset_command, args=("rename",))
    delete_col.button(t("delete_preset"), use_container_width=True, on_click=_on_preset_command, args=("delete",))


def _render_record_form(controller: RecordsController, t: Callable[..., str]) -> None:
    form_state = st.session_state.get("record_form")
    if form_state is None:
        return
    editing_id = form_state.get("editing_id")
    st.subheader(t("edit_record_title") if editing_id else t("add_record_title"))

    with st.form(f"record_form_{st.session_state.get('form_version', 0)}"):
        name_col, surname_col, mobile_col = st.columns(3)
        name_col.text_input(t("name"), key="form_name")
        surname_col.text_input(t("surname"), key="form_surname")
        mobile_col.text_input(t("mobile"), key="form_mobile")
        date_col, money_col = st.columns(2)
        date_col.date_input(t("date"), key="form_date")
        money_col.number_input(t("money"), min_value=0.0, step=1.0, format="%.2f", key="form_money")

        st.markdown(f"**{t('materials_procedures')}**")
        material_columns = st.columns(3)
        for index, (key, label_key) in enumerate(MATERIAL_FIELDS):
            material_columns[index % 3].number_input(t(label_key), min_value=0, step=1, key=f"form_{key}")

        st.markdown(f"**{t('custom_materials')}**")
        st.caption(t("custom_materials_hint"))
        custom_frame = pd.DataFrame(st.session_state.get("form_custom_rows", []), columns=["name", "qty"])
        edited_custom = st.data_editor(
            custom_frame,
            num_rows="dynamic",
            use_container_width=True,
            hide_index=True,
            key=f"form_custom_editor_{st.session_state.get('form_version', 0)}",
            column_config={
                "name": st.column_config.TextColumn(t("custom_material_name")),
                "qty": st.column_config.NumberColumn(t("custom_material_qty"), min_value=0, step=1),
            },
        )
        st.text_area(t("notes"), key="form_notes")

        submit_col, cancel_col = st.columns(2)
        submitted = submit_col.form_submit_button(
            t("save_changes") if editing_id else t("create_record"), use_container_width=True
        )
        cancelled = cancel_col.form_submit_button(t("cancel"), use_container_width=True)

    if cancelled:
        _close_record_form()
        st.rerun()
    if not submitted:
        return

    values: dict[str, Any] = {
        "name": st.session_state.get("form_name"),
        "surname": st.session_state.get("form_surname"),
        "mobile": st.session_state.get("form_mobile"),
        "date": _iso_or_empty(st.session_state.get("form_date")),
        "money": st.session_state.get("form_money"),
        "notes": st.session_state.get("form_notes") or None,
        "custom_materials": [
            {"name": row.get("name"), "qty": row.get("qty")}
            for row in edited_custom.to_dict("records")
            if not (pd.isna(row.get("name")) and pd.isna(row.get("qty")))
        ],
    }
    for key, _label_key in MATERIAL_FIELDS:
        values[key] = st.session_state.get(f"form_{key}")
    for row in values["custom_materials"]:
        if pd.isna(row["name"]):
            row["name"] = ""
        if pd.isna(row["qty"]):
            row["qty"] = 0

    notice, errors = controller.save_record(values, editing_id)
    if errors:
        _show_notice(notice, t)
        for field_name, message in errors.items():
            st.caption(f"{field_name}: {message}")
        return
    if notice.level != "success":
        _show_notice(notice, t)
        return
    _flash(notice)
    _close_record_form()
    st.rerun()


def _render_delete_confirmation(t: Callable[..., str]) -> None:
    pending = st.session_state.get("pending_delete")
    if not pending:
        return
    with st.container(border=True):
        st.markdown(f"**{t('delete_record_title')}**")
        st.caption(t("delete_record_hint"))
        confirmed = st.checkbox(t("confirm_delete"), key=f"confirm_delete_{pending}")
        delete_col, cancel_col = st.columns(2)
        delete_col.button(
            t("delete"),
            type="primary",
            disabled=not confirmed,
            use_container_width=True,
            on_click=_on_confirm_delete,
            key="confirm_delete_button",
        )
        if cancel_col.button(t("cancel"), use_container_width=True, key="cancel_delete"):
            st.session_state.pop("pending_delete", None)
            st.rerun()


def _render_table(controller: RecordsController, state: DashboardState, t: Callable[..., str]) -> None:
    if controller.load_failed:
        st.error(t("failed_to_load"))
        return
    filtered = controller.filtered(state)
    if not filtered:
        st.info(t("no_records"))
        return

    total_pages = page_count(len(filtered))
    st.session_state.setdefault("table_page", state.page + 1)
    if int(st.session_state.table_page) > total_pages:
        st.session_state.table_page = total_pages
    page_number = st.number_input(t("page"), min_value=1, max_value=total_pages, step=1, key="table_page")
    state = replace(state, page=int(page_number) - 1)
    page_records = paginate(filtered, state.page)
    st.caption(t("showing_records", shown=len(page_records), total=len(filtered)))

    locale = locale_for_language(_lang())
    labels = column_labels(_lang())
    selected = set(state.selected_ids)
    rows = [
        {"id": record.id, "select": record.id in selected, **dict(zip(labels, project_record(record, "display", locale)))}
        for record in page_records
    ]
    frame = pd.DataFrame(rows, columns=["id", "select", *labels])
    edited = st.data_editor(
        frame,
        hide_index=True,
        use_container_width=True,
        disabled=labels,
        key=f"records_editor_{st.session_state.get('selection_version', 0)}_{state.page}",
        column_config={
            "id": None,
            "select": st.column_config.CheckboxColumn(t("select"), default=False),
        },
    )
    page_ids = {record.id for record in page_records}
    checked = [str(record_id) for record_id in edited.loc[edited["select"].astype(bool), "id"]]
    next_selection = [record_id for record_id in state.selected_ids if record_id not in page_ids] + checked
    if set(next_selection) != selected:
        st.session_state.dashboard_state = controller.set_selection(state, next_selection)
    else:
        st.session_state.dashboard_state = state

    _render_record_actions(controller, page_records, t)


def _render_record_actions(controller: RecordsController, page_records: list[ClinicRecord], t: Callable[..., str]) -> None:
    st.markdown(f"**{t('record_actions')}**")
    by_id = {record.id: record for record in page_records}
    record_id = st.selectbox(
        t("select"),
        options=list(by_id),
        format_func=lambda item: f"{by_id[item].name} {by_id[item].surname} ({by_id[item].date})",
        key="action_record",
        label_visibility="collapsed",
    )
    record = by_id.get(record_id)
    if record is None:
        return
    edit_col, delete_col, pdf_col, share_col = st.columns(4)
    edit_col.button(t("edit"), use_container_width=True, on_click=_open_record_form, args=(record,))
    if delete_col.button(t("delete"), use_container_width=True, key="delete_one"):
        st.session_state.pending_delete = record.id
        st.rerun()
    pdf_col.button(t("client_pdf"), use_container_width=True, on_click=_on_client_pdf, args=(record.id,))
    show_share = share_col.toggle(t("share_text"), key="show_share")
    _render_export_download(f"export_file:client:{record.id}", t)
    if show_share:
        st.code(share_text(record, _lang()), language=None)


def _render_selection_bar(controller: RecordsController, state: DashboardState, t: Callable[..., str]) -> None:
    if not state.selected_ids:
        return
    with st.container(border=True):
        st.markdown(f"**{t('selected_count', count=len(state.selected_ids))}**")
        clear_col, csv_col, pdf_col, delete_col = st.columns(4)
        clear_col.button(t("clear_selection"), use_container_width=True, on_click=_on_clear_selection)
        with csv_col:
            _render_csv_download(controller, state, "selected", t("export_csv_selected"))
        with pdf_col:
            _render_pdf_export(controller, "selected", t("export_pdf_selected"), t)
        if delete_col.button(t("delete_selected"), use_container_width=True, key="delete_selected"):
            st.session_state.pending_delete = DELETE_SELECTED
            st.rerun()


def _render_hidden(t: Callable[..., str], key: str) -> None:
    st.caption(f"{t(key)} {t('hidden_hint')}")


st.set_page_config(page_title="Clinic Records", layout="wide")
_inject_dashboard_theme()
st.session_state.setdefault("lang", CONFIG.default_language)
t = _t()

if "auth_session" not in st.session_state:
    _render_auth_page(t)
    st.stop()

controller = _controller()
if "settings" not in st.session_state:
    settings, settings_notice = controller.load_settings()
    st.session_state.settings = settings
    _flash(settings_notice)
settings: UserSettings = st.session_state.settings

_render_sidebar(controller, settings, t)
_set_state(
    replace(
        _state(),
        clinic_name=str(st.session_state.get("clinic_name_input", "")),
        manager_name=str(st.session_state.get("manager_name_input", "")),
    )
)

st.title(t("app_title"))
st.caption(t("clinic_dashboard"))
_render_flash(t)
_render_record_form(controller, t)
_render_delete_confirmation(t)

if st.session_state.get("show_summary", True):
    st.subheader(t("summary"))
    _render_summary_tiles(controller, _state(), t)
else:
    _render_hidden(t, "hidden_summary")

if st.session_state.get("show_filters", True):
    st.subheader(t("overview"))
    _render_filters(controller, _state(), t)
else:
    _render_hidden(t, "hidden_filters")

if st.session_state.get("show_table", True):
    _render_table(controller, _state(), t)
    _render_selection_bar(controller, _state(), t)
else:
    _render_hidden(t, "hidden_table")

LOGGER.debug("Rendered dashboard with %d records", len(controller.records))
