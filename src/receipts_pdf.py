from __future__ import annotations

import logging
import re
from datetime import date, datetime
from html import escape
from io import BytesIO
from pathlib import Path
from typing import Any, Iterable, Sequence

from src.config import DEFAULT_FONT_PATH
from src.export import EXPORT_COLUMNS, column_labels, project_records
from src.formatters import format_date, format_money, locale_for_language, to_iso_date
from src.i18n import translate
from src.records import MATERIAL_FIELDS, ClinicRecord
from src.summary import summarize

try:
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4, landscape
    from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
    from reportlab.lib.units import mm
    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.ttfonts import TTFont
    from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
except Exception:
    colors = None
    A4 = None
    landscape = None
    ParagraphStyle = None
    getSampleStyleSheet = None
    mm = None
    pdfmetrics = None
    TTFont = None
    Paragraph = None
    SimpleDocTemplate = None
    Spacer = None
    Table = None
    TableStyle = None

LOGGER = logging.getLogger(__name__)

FONT_NAME = "NotoSansGeorgian"
FALLBACK_FONT = "Helvetica"
HEADER_FILL = "#1e4f5c"
STRIPE_FILL = "#f1f5f9"
GRID_COLOR = "#cbd5e1"

# Relative widths for the report table, aligned with EXPORT_COLUMNS.
REPORT_COLUMN_WEIGHTS = {
    "name": 1.1,
    "surname": 1.2,
    "mobile": 1.2,
    "date": 1.1,
    "money": 1.0,
    "custom_materials": 1.6,
    "notes": 2.0,
}

_registered_fonts: dict[str, str] = {}


class PdfExportError(Exception):
    """Raised when a PDF cannot be rendered (missing library or font)."""


def _require_reportlab() -> None:
    if SimpleDocTemplate is None:
        raise PdfExportError("PDF export requires `reportlab`. Install with: pip install reportlab")


def _needs_unicode_font(texts: Iterable[str]) -> bool:
    for text in texts:
        try:
            str(text or "").encode("latin-1")
        except UnicodeEncodeError:
            return True
    return False


def _register_font(font_path: Path) -> str | None:
    key = str(font_path)
    if key in _registered_fonts:
        return _registered_fonts[key]
    if not font_path.is_file():
        return None
    try:
        pdfmetrics.registerFont(TTFont(FONT_NAME, key))
    except Exception as exc:
        raise PdfExportError(f"Could not load PDF font `{font_path}`: {exc}") from exc
    _registered_fonts[key] = FONT_NAME
    return FONT_NAME


def _resolve_font(font_path: Path, texts: Iterable[str]) -> str:
    registered = _register_font(font_path)
    if registered:
        return registered
    if _needs_unicode_font(texts):
        raise PdfExportError(
            f"PDF font not found at `{font_path}`. Set CLINIC_PDF_FONT to a TTF that covers Georgian."
        )
    LOGGER.warning("PDF font %s missing; using %s for Latin-only text", font_path, FALLBACK_FONT)
    return FALLBACK_FONT


def _safe_filename(text: str) -> str:
    return re.sub(r"[\\/:*?\"<>|\s]+", "_", text).strip("_") or "record"


def _markup(text: Any) -> str:
    return escape(str(text or "")).replace("\n", "<br/>")


def _styles(font_name: str) -> dict[str, Any]:
    style_sheet = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "title",
            parent=style_sheet["Heading1"],
            fontName=font_name,
            fontSize=18,
            leading=22,
            spaceAfter=2,
        ),
        "report_title": ParagraphStyle(
            "report_title",
            parent=style_sheet["Heading1"],
            fontName=font_name,
            fontSize=16,
            leading=19,
            spaceAfter=2,
        ),
        "meta": ParagraphStyle(
            "meta",
            parent=style_sheet["Normal"],
            fontName=font_name,
            fontSize=11,
            leading=14,
            textColor=colors.HexColor("#334155"),
            spaceAfter=6,
        ),
        "line": ParagraphStyle(
            "line",
            parent=style_sheet["Normal"],
            fontName=font_name,
            fontSize=12,
            leading=16,
        ),
        "cell": ParagraphStyle(
            "cell",
            parent=style_sheet["Normal"],
            fontName=font_name,
            fontSize=8,
            leading=9.6,
        ),
        "head_cell": ParagraphStyle(
            "head_cell",
            parent=style_sheet["Normal"],
            fontName=font_name,
            fontSize=8,
            leading=9.6,
            textColor=colors.white,
        ),
        "table_cell": ParagraphStyle(
            "table_cell",
            parent=style_sheet["Normal"],
            fontName=font_name,
            fontSize=11,
            leading=13,
        ),
    }


def _striped_table_style(font_name: str, row_count: int) -> TableStyle:
    commands: list[tuple[Any, ...]] = [
        ("FONTNAME", (0, 0), (-1, -1), font_name),
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(HEADER_FILL)),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("GRID", (0, 0), (-1, -1), 0.4, colors.HexColor(GRID_COLOR)),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]
    for index in range(2, row_count + 1, 2):
        commands.append(("BACKGROUND", (0, index), (-1, index), colors.HexColor(STRIPE_FILL)))
    return TableStyle(commands)


def _client_material_rows(record: ClinicRecord, lang: str) -> list[list[str]]:
    rows = [
        [translate(lang, label_key), str(record.material(key))]
        for key, label_key in MATERIAL_FIELDS
        if record.material(key) > 0
    ]
    rows.extend([item.name, str(item.qty)] for item in record.custom_materials if str(item.name or "").strip())
    return rows


def client_pdf_filename(record: ClinicRecord) -> str:
    return f"{_safe_filename(f'{record.name}_{record.surname}_{record.date}')}.pdf"


def generate_client_pdf(
    record: ClinicRecord,
    lang: str,
    clinic_name: str = "",
    manager_name: str = "",
    *,
    font_path: Path = DEFAULT_FONT_PATH,
) -> tuple[bytes, str]:
    _require_reportlab()
    locale = locale_for_language(lang)

    title = clinic_name.strip() or translate(lang, "clinic")
    manager_line = translate(lang, "manager_line", name=manager_name.strip()) if manager_name.strip() else ""
    detail_lines = [
        f"{translate(lang, 'client')}: {record.name} {record.surname}",
        f"{translate(lang, 'mobile')}: {record.mobile}",
        f"{translate(lang, 'date')}: {format_date(record.date, locale)}",
        f"{translate(lang, 'total')}: {format_money(record.money, locale)}",
    ]
    material_rows = _client_material_rows(record, lang)
    head = [translate(lang, "material_procedure"), translate(lang, "count")]
    notes_label = f"{translate(lang, 'notes')}:"

    texts = [title, manager_line, *detail_lines, *head, notes_label, record.notes or ""]
    texts.extend(cell for row in material_rows for cell in row)
    font_name = _resolve_font(Path(font_path), texts)

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        topMargin=14 * mm,
        bottomMargin=14 * mm,
        title=title,
    )
    styles = _styles(font_name)

    story: list[Any] = [Paragraph(_markup(title), styles["title"])]
    if manager_line:
        story.append(Paragraph(_markup(manager_line), styles["meta"]))
    story.append(Spacer(1, 3 * mm))
    for line in detail_lines:
        story.append(Paragraph(_markup(line), styles["line"]))

    if material_rows:
        story.append(Spacer(1, 5 * mm))
        data = [head] + [[Paragraph(_markup(cell), styles["table_cell"]) for cell in row] for row in material_rows]
        table = Table(data, colWidths=[doc.width * 0.7, doc.width * 0.3], repeatRows=1)
        table.setStyle(_striped_table_style(font_name, len(material_rows)))
        story.append(table)

    if record.notes:
        story.append(Spacer(1, 6 * mm))
        story.append(Paragraph(_markup(notes_label), styles["line"]))
        story.append(Paragraph(_markup(record.notes), styles["table_cell"]))

    doc.build(story)
    return buffer.getvalue(), client_pdf_filename(record)


def records_pdf_filename(today: date | datetime | None = None) -> str:
    use_date = today or datetime.now().date()
    return f"Clinic_Report_{to_iso_date(use_date)}.pdf"


def _report_column_widths(total_width: float) -> list[float]:
    weights = [REPORT_COLUMN_WEIGHTS.get(column, 0.75) for column in EXPORT_COLUMNS]
    scale = total_width / sum(weights)
    return [weight * scale for weight in weights]


def generate_records_pdf(
    records: Sequence[ClinicRecord],
    lang: str,
    clinic_name: str = "",
    manager_name: str = "",
    *,
    today: date | datetime | None = None,
    font_path: Path = DEFAULT_FONT_PATH,
) -> tuple[bytes, str]:
    _require_reportlab()
    locale = locale_for_language(lang)

    if clinic_name.strip():
        title = translate(lang, "report_title", title=clinic_name.strip())
    else:
        title = translate(lang, "clinic_report")
    manager_line = translate(lang, "manager_line", name=manager_name.strip()) if manager_name.strip() else ""
    totals = summarize(records)
    totals_line = translate(
        lang,
        "report_totals",
        count=totals.count,
        total=format_money(totals.total_money, locale),
    )
    headers = column_labels(lang)
    body = project_records(records, target="display", locale=locale)

    texts = [title, manager_line, totals_line, *headers]
    texts.extend(cell for row in body for cell in row)
    font_name = _resolve_font(Path(font_path), texts)

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        leftMargin=10 * mm,
        rightMargin=10 * mm,
        topMargin=10 * mm,
        bottomMargin=10 * mm,
        title=title,
    )
    styles = _styles(font_name)

    story: list[Any] = [Paragraph(_markup(title), styles["report_title"])]
    if manager_line:
        story.append(Paragraph(_markup(manager_line), styles["meta"]))
    story.append(Paragraph(_markup(totals_line), styles["meta"]))

    data: list[list[Any]] = [[Paragraph(_markup(label), styles["head_cell"]) for label in headers]]
    data.extend([Paragraph(_markup(cell), styles["cell"]) for cell in row] for row in body)
    table = Table(data, colWidths=_report_column_widths(doc.width), repeatRows=1)
    table.setStyle(_striped_table_style(font_name, len(body)))
    story.append(table)

    doc.build(story)
    return buffer.getvalue(), records_pdf_filename(today)
