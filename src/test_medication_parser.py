"""Tests for the order-string parser (name extraction and the composed result)."""
import unittest

from medorder.models.medication import ParsedMedication
from medorder.services.medication_parser import extract_name, parse_medication_string


# ---------------------------------------------------------------------------
# parse_medication_string
# ---------------------------------------------------------------------------

class ParseMedicationStringTests(unittest.TestCase):
    def _assert_parsed(self, text, name, dosage, frequency, route):
        self.assertEqual(
            parse_medication_string(text),
            ParsedMedication(name=name, dosage=dosage, frequency=frequency, route=route),
        )

    def test_basic_oral_order(self):
        self._assert_parsed("Metformin 500mg PO BID", "Metformin", "500mg", "BID", "PO")

    def test_prn_order(self):
        self._assert_parsed("Ibuprofen 400mg q6h PRN", "Ibuprofen", "400mg", "Q6H PRN", "PO")

    def test_no_cues_uses_whole_input_as_name(self):
        self._assert_parsed("Vitamin D supplement", "Vitamin D supplement", "", "", "PO")

    def test_insulin_order(self):
        self._assert_parsed(
            "Insulin glargine 10 units SC at bedtime", "Insulin glargine", "10 units", "QHS", "SC"
        )

    def test_combination_dose_per_tablet(self):
        self._assert_parsed("Sevelamer 500mg/tab BID", "Sevelamer", "500mg/tab", "BID", "PO")

    def test_frequency_only(self):
        self._assert_parsed("Caltrate Plus OD", "Caltrate Plus", "", "OD", "PO")

    def test_inhaled_order(self):
        self._assert_parsed("Salbutamol nebulizer 2.5mg q4h PRN", "Salbutamol", "2.5mg", "Q4H PRN", "INH")

    def test_combination_product(self):
        self._assert_parsed(
            "Tramadol/APAP 37.5 mg/325 1 tab PO q6h PRN", "Tramadol/APAP", "37.5 mg/325", "Q6H PRN", "PO"
        )

    def test_dose_series(self):
        self._assert_parsed(
            "Hepatitis B vaccine 3 doses at 0, 1, 6 months",
            "Hepatitis B vaccine",
            "3 doses",
            "3 doses at 0, 1, 6 months",
            "PO",
        )

    def test_empty_input(self):
        self.assertEqual(parse_medication_string(""), ParsedMedication())
        self.assertEqual(parse_medication_string("   ").route, "PO")

    def test_deterministic(self):
        text = "Amoxicillin 250mg/5mL susp PO TID"
        self.assertEqual(parse_medication_string(text), parse_medication_string(text))

    def test_always_returns_strings(self):
        for text in ("###", "???", "12345", "mg mg mg", "q h d"):
            parsed = parse_medication_string(text)
            for value in parsed.model_dump().values():
                self.assertIsInstance(value, str)


# ---------------------------------------------------------------------------
# extract_name
# ---------------------------------------------------------------------------

class ExtractNameTests(unittest.TestCase):
    def test_name_ends_at_earliest_cue(self):
        self.assertEqual(extract_name("Metformin 500mg PO BID"), "Metformin")
        self.assertEqual(extract_name("Morphine IV 2mg q4h"), "Morphine")

    def test_trailing_separators_are_stripped(self):
        self.assertEqual(extract_name("Aspirin - 81mg daily"), "Aspirin")
        self.assertEqual(extract_name("Lasix:   40mg"), "Lasix")

    def test_whitespace_is_collapsed(self):
        self.assertEqual(extract_name("  Vitamin   D   supplement  "), "Vitamin D supplement")
        self.assertEqual(extract_name("Insulin   glargine  10 units"), "Insulin glargine")

    def test_cue_at_start_falls_back_to_whole_input(self):
        self.assertEqual(extract_name("500mg Tylenol"), "500mg Tylenol")


if __name__ == "__main__":
    unittest.main()
