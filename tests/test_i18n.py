from __future__ import annotations

import unittest

from src.i18n import DEFAULT_LANGUAGE, LABELS, normalize_language, translate, translator


class TranslateTests(unittest.TestCase):
    def test_languages_share_the_same_keys(self) -> None:
        self.assertEqual(set(LABELS["en"]), set(LABELS["ka"]))

    def test_missing_key_returns_key(self) -> None:
        self.assertEqual(translate("en", "no_such_label"), "no_such_label")

    def test_unknown_language_falls_back_to_default(self) -> None:
        self.assertEqual(normalize_language("fr"), DEFAULT_LANGUAGE)
        self.assertEqual(normalize_language(" EN "), "en")
        self.assertEqual(translate("fr", "name"), LABELS[DEFAULT_LANGUAGE]["name"])

    def test_placeholders(self) -> None:
        self.assertEqual(translate("en", "manager_line", name="Nino"), "Manager: Nino")
        self.assertEqual(translate("en", "manager_line"), "Manager: {name}")
        self.assertEqual(translate("en", "report_totals", count=2), "Records: {count} | Total: {total}")

    def test_translator_binds_language(self) -> None:
        t = translator("en")
        self.assertEqual(t("today"), "Today")
        self.assertEqual(t("share_date", date="2024-03-15"), "Date: 2024-03-15")


if __name__ == "__main__":
    unittest.main()
