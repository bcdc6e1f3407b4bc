from __future__ import annotations

from typing import Any

DEFAULT_LANGUAGE = "ka"
LANGUAGES = ("ka", "en")

LABELS: dict[str, dict[str, str]] = {
    "en": {
        "app_title": "Clinic Records",
        "language": "Language",
        "email": "Email",
        "password": "Password",
        "sign_in": "Sign in",
        "sign_up": "Create account",
        "sign_out": "Sign out",
        "signed_in_as": "Signed in: {email}",
        "welcome_back": "Welcome back",
        "account_created": "Account created. You can sign in now.",
        "auth_failed": "Authentication failed",
        "signup_disabled": "New accounts are disabled on this deployment.",
        "overview": "Overview",
        "clinic_dashboard": "Clinic dashboard",
        "summary": "Totals follow the active filters",
        "total_money": "Total money",
        "money_total_hint": "Sum of fees in the filtered records",
        "records_count": "Records",
        "records_count_hint": "Visits matching the filters",
        "materials_totals": "Materials totals",
        "hidden_summary": "Summary is hidden",
        "hidden_filters": "Filters are hidden",
        "hidden_table": "Table is hidden",
        "hidden_hint": "Use the sidebar to show it again.",
        "panels": "Panels",
        "show_summary": "Show summary",
        "show_filters": "Show filters",
        "show_table": "Show table",
        "actions": "Actions",
        "refresh": "Refresh",
        "add_record": "Add record",
        "export_csv_filtered": "Export CSV (filtered)",
        "export_pdf_filtered": "Export PDF (filtered)",
        "export_csv_selected": "Export CSV (selected)",
        "export_pdf_selected": "Export PDF (selected)",
        "download_file": "Download {filename}",
        "generating_pdf": "Generating PDF...",
        "export_in_progress": "An export for this target is already running.",
        "export_failed": "Export failed",
        "nothing_to_export": "There are no records to export.",
        "search": "Search",
        "search_placeholder": "Name, surname or mobile",
        "from": "From",
        "to": "To",
        "today": "Today",
        "this_week": "This week",
        "this_month": "This month",
        "clear": "Clear",
        "presets": "Presets",
        "preset_name": "Preset name",
        "preset_help": "Presets store the current search and date range.",
        "save_preset": "Save preset",
        "load_preset": "Load preset",
        "rename_preset": "Rename preset",
        "delete_preset": "Delete preset",
        "no_presets": "No presets yet",
        "preset_saved": "Preset saved",
        "preset_renamed": "Preset renamed",
        "preset_deleted": "Preset deleted",
        "preset_loaded": "Preset loaded",
        "preset_name_required": "Enter a preset name first.",
        "preset_not_selected": "Select a preset first.",
        "name": "Name",
        "surname": "Surname",
        "mobile": "Mobile",
        "date": "Date",
        "money": "Money",
        "notes": "Notes",
        "materials_procedures": "Materials / procedures",
        "custom_materials": "Custom materials",
        "custom_materials_hint": "Add one row per extra material or procedure.",
        "custom_material_name": "Material name",
        "custom_material_qty": "Quantity",
        "material_keramika": "Keramika",
        "material_tsirkoni": "Tsirkoni",
        "material_balka": "Balka",
        "material_plastmassi": "Plastmassi",
        "material_shabloni": "Shabloni",
        "material_cisferi_plastmassi": "Cisferi plastmassi",
        "add_record_title": "Add record",
        "edit_record_title": "Edit record",
        "create_record": "Create record",
        "save_changes": "Save changes",
        "cancel": "Cancel",
        "edit": "Edit",
        "delete": "Delete",
        "select": "Select",
        "record_created": "Record created",
        "record_updated": "Record updated",
        "record_deleted": "Record deleted",
        "save_failed": "Could not save the record",
        "delete_failed": "Could not delete the record",
        "failed_to_load": "Failed to load records",
        "no_records": "No records match the current filters.",
        "showing_records": "Showing {shown} of {total} records",
        "page": "Page",
        "selected_count": "{count} selected",
        "clear_selection": "Clear selection",
        "delete_selected": "Delete selected",
        "delete_record_title": "Delete records?",
        "delete_record_hint": "This action cannot be undone.",
        "confirm_delete": "I understand, delete",
        "record_actions": "Record actions",
        "client_pdf": "PDF receipt",
        "share_text": "Share text",
        "clinic_name": "Clinic name",
        "manager_name": "Manager name",
        "validation_errors": "Fix the highlighted fields.",
        "client": "Client",
        "total": "Total",
        "material_procedure": "Material / Procedure",
        "count": "Count",
        "manager_line": "Manager: {name}",
        "clinic": "Clinic",
        "clinic_report": "Clinic report",
        "report_title": "{title} report",
        "report_totals": "Records: {count} | Total: {total}",
        "share_greeting": "Hello {name} {surname},",
        "share_details": "Your visit details:",
        "share_date": "Date: {date}",
        "share_amount": "Amount: {amount}",
        "share_materials": "Materials: {items}",
        "share_note": "Note: {note}",
    },
    "ka": {
        "app_title": "კლინიკის ჩანაწერები",
        "language": "ენა",
        "email": "ელფოსტა",
        "password": "პაროლი",
        "sign_in": "შესვლა",
        "sign_up": "ანგარიშის შექმნა",
        "sign_out": "გასვლა",
        "signed_in_as": "შესული ხართ: {email}",
        "welcome_back": "კეთილი იყოს თქვენი დაბრუნება",
        "account_created": "ანგარიში შეიქმნა. ახლა შეგიძლიათ შესვლა.",
        "auth_failed": "ავტორიზაცია ვერ მოხერხდა",
        "signup_disabled": "ახალი ანგარიშების შექმნა გამორთულია.",
        "overview": "მიმოხილვა",
        "clinic_dashboard": "კლინიკის დაფა",
        "summary": "ჯამები აქტიური ფილტრების მიხედვით",
        "total_money": "ჯამური თანხა",
        "money_total_hint": "გაფილტრული ჩანაწერების თანხების ჯამი",
        "records_count": "ჩანაწერები",
        "records_count_hint": "ფილტრს შესაბამისი ვიზიტები",
        "materials_totals": "მასალების ჯამები",
        "hidden_summary": "შეჯამება დამალულია",
        "hidden_filters": "ფილტრები დამალულია",
        "hidden_table": "ცხრილი დამალულია",
        "hidden_hint": "გვერდითა პანელიდან კვლავ გამოჩნდება.",
        "panels": "პანელები",
        "show_summary": "შეჯამების ჩვენება",
        "show_filters": "ფილტრების ჩვენება",
        "show_table": "ცხრილის ჩვენება",
        "actions": "მოქმედებები",
        "refresh": "განახლება",
        "add_record": "ჩანაწერის დამატება",
        "export_csv_filtered": "CSV ექსპორტი (გაფილტრული)",
        "export_pdf_filtered": "PDF ექსპორტი (გაფილტრული)",
        "export_csv_selected": "CSV ექსპორტი (მონიშნული)",
        "export_pdf_selected": "PDF ექსპორტი (მონიშნული)",
        "download_file": "ჩამოტვირთვა: {filename}",
        "generating_pdf": "PDF მზადდება...",
        "export_in_progress": "ამ ექსპორტის მომზადება უკვე მიმდინარეობს.",
        "export_failed": "ექსპორტი ვერ მოხერხდა",
        "nothing_to_export": "საექსპორტო ჩანაწერები არ არის.",
        "search": "ძებნა",
        "search_placeholder": "სახელი, გვარი ან მობილური",
        "from": "დან",
        "to": "მდე",
        "today": "დღეს",
        "this_week": "ეს კვირა",
        "this_month": "ეს თვე",
        "clear": "გასუფთავება",
        "presets": "შაბლონები",
        "preset_name": "შაბლონის სახელი",
        "preset_help": "შაბლონი ინახავს მიმდინარე ძებნას და თარიღებს.",
        "save_preset": "შაბლონის შენახვა",
        "load_preset": "შაბლონის ჩატვირთვა",
        "rename_preset": "შაბლონის გადარქმევა",
        "delete_preset": "შაბლონის წაშლა",
        "no_presets": "შაბლონები ჯერ არ არის",
        "preset_saved": "შაბლონი შენახულია",
        "preset_renamed": "შაბლონს სახელი შეეცვალა",
        "preset_deleted": "შაბლონი წაიშალა",
        "preset_loaded": "შაბლონი ჩაიტვირთა",
        "preset_name_required": "ჯერ შეიყვანეთ შაბლონის სახელი.",
        "preset_not_selected": "ჯერ აირჩიეთ შაბლონი.",
        "name": "სახელი",
        "surname": "გვარი",
        "mobile": "მობილური",
        "date": "თარიღი",
        "money": "თანხა",
        "notes": "შენიშვნები",
        "materials_procedures": "მასალები / პროცედურები",
        "custom_materials": "დამატებითი მასალები",
        "custom_materials_hint": "თითო ხაზზე ერთი დამატებითი მასალა ან პროცედურა.",
        "custom_material_name": "მასალის სახელი",
        "custom_material_qty": "რაოდენობა",
        "material_keramika": "კერამიკა",
        "material_tsirkoni": "ცირკონი",
        "material_balka": "ბალკა",
        "material_plastmassi": "პლასტმასი",
        "material_shabloni": "შაბლონი",
        "material_cisferi_plastmassi": "ცისფერი პლასტმასი",
        "add_record_title": "ჩანაწერის დამატება",
        "edit_record_title": "ჩანაწერის რედაქტირება",
        "create_record": "ჩანაწერის შექმნა",
        "save_changes": "ცვლილებების შენახვა",
        "cancel": "გაუქმება",
        "edit": "რედაქტირება",
        "delete": "წაშლა",
        "select": "მონიშვნა",
        "record_created": "ჩანაწერი შეიქმნა",
        "record_updated": "ჩანაწერი განახლდა",
        "record_deleted": "ჩანაწერი წაიშალა",
        "save_failed": "ჩანაწერის შენახვა ვერ მოხერხდა",
        "delete_failed": "ჩანაწერის წაშლა ვერ მოხერხდა",
        "failed_to_load": "ჩანაწერების ჩატვირთვა ვერ მოხერხდა",
        "no_records": "ფილტრს შესაბამისი ჩანაწერები არ მოიძებნა.",
        "showing_records": "ნაჩვენებია {shown} / {total} ჩანაწერი",
        "page": "გვერდი",
        "selected_count": "მონიშნულია {count}",
        "clear_selection": "მონიშვნის მოხსნა",
        "delete_selected": "მონიშნულის წაშლა",
        "delete_record_title": "წავშალოთ ჩანაწერები?",
        "delete_record_hint": "ამ მოქმედების გაუქმება შეუძლებელია.",
        "confirm_delete": "ვადასტურებ წაშლას",
        "record_actions": "ჩანაწერის მოქმედებები",
        "client_pdf": "PDF ქვითარი",
        "share_text": "გასაზიარებელი ტექსტი",
        "clinic_name": "კლინიკის სახელი",
        "manager_name": "მენეჯერის სახელი",
        "validation_errors": "შეასწორეთ მონიშნული ველები.",
        "client": "კლიენტი",
        "total": "ჯამი",
        "material_procedure": "მასალები / პროცედურები",
        "count": "რაოდენობა",
        "manager_line": "მენეჯერი: {name}",
        "clinic": "Clinic",
        "clinic_report": "კლინიკის ანგარიში",
        "report_title": "{title} ანგარიში",
        "report_totals": "ჩანაწერები: {count} | ჯამი: {total}",
        "share_greeting": "გამარჯობა {name} {surname},",
        "share_details": "თქვენი ვიზიტის დეტალები:",
        "share_date": "თარიღი: {date}",
        "share_amount": "თანხა: {amount}",
        "share_materials": "მასალები: {items}",
        "share_note": "შენიშვნა: {note}",
    },
}


def normalize_language(lang: Any) -> str:
    value = str(lang or "").strip().lower()
    return value if value in LABELS else DEFAULT_LANGUAGE


def translate(lang: Any, key: str, **params: Any) -> str:
    """
    Look up a label for the language; an unknown key is returned as-is.

    Placeholders are filled from ``params``; a template whose placeholders are
    not all supplied is returned unformatted.
    """
    table = LABELS[normalize_language(lang)]
    template = table.get(key, key)
    if not params:
        return template
    try:
        return template.format(**params)
    except (KeyError, IndexError):
        return template


def translator(lang: Any):
    language = normalize_language(lang)

    def _t(key: str, **params: Any) -> str:
        return translate(language, key, **params)

    return _t
