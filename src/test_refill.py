import unittest
from datetime import date

from medorder.models.medication import MedicationStatus
from medorder.services.refill import build_medication_draft, derive_status, extract_quantity, refill_date


class QuantityAndStatusTests(unittest.TestCase):
    def test_extract_quantity(self):
        self.assertEqual(extract_quantity("Amoxicillin 500mg PO TID #30"), 30)
        self.assertEqual(extract_quantity("Oxycodone 5mg q4h PRN # 5"), 5)
        self.assertIsNone(extract_quantity("Metformin 500mg PO BID"))
        self.assertIsNone(extract_quantity("Metformin 500mg PO BID #0"))
        self.assertIsNone(extract_quantity(""))

    def test_derive_status(self):
        self.assertEqual(derive_status("Q6H PRN"), MedicationStatus.PRN)
        self.assertEqual(derive_status("PRN"), MedicationStatus.PRN)
        self.assertEqual(derive_status("BID"), MedicationStatus.ACTIVE)
        self.assertEqual(derive_status(""), MedicationStatus.ACTIVE)


class RefillDateTests(unittest.TestCase):
    START = date(2026, 1, 1)

    def test_whole_days(self):
        self.assertEqual(refill_date(self.START, 30, "BID", rounding="floor"), date(2026, 1, 16))
        self.assertEqual(refill_date(self.START, 10, "Q2D", rounding="ceil"), date(2026, 1, 21))

    def test_fractional_supply_rounding_modes(self):
        # 30 x Q5H = 6.25 days
        self.assertEqual(refill_date(self.START, 30, "Q5H", rounding="floor"), date(2026, 1, 7))
        self.assertEqual(refill_date(self.START, 30, "Q5H", rounding="ceil"), date(2026, 1, 8))
        self.assertEqual(refill_date(self.START, 30, "Q5H", rounding="round"), date(2026, 1, 7))

    def test_round_mode_rounds_half_up(self):
        # 15 x Q4H = 2.5 days, 21 x Q4H = 3.5 days
        self.assertEqual(refill_date(self.START, 15, "Q4H", rounding="round"), date(2026, 1, 4))
        self.assertEqual(refill_date(self.START, 21, "Q4H", rounding="round"), date(2026, 1, 5))
        self.assertEqual(refill_date(self.START, 15, "Q4H", rounding="floor"), date(2026, 1, 3))

    def test_unknown_supply_leaves_date_unset(self):
        self.assertIsNone(refill_date(self.START, 5, "0,1,6 months", rounding="floor"))
        self.assertIsNone(refill_date(self.START, 10, "PRN", rounding="floor"))

    def test_missing_inputs_leave_date_unset(self):
        self.assertIsNone(refill_date(self.START, None, "BID", rounding="floor"))
        self.assertIsNone(refill_date(self.START, 30, "", rounding="floor"))

    def test_unsupported_rounding_mode(self):
        with self.assertRaises(ValueError):
            refill_date(self.START, 30, "BID", rounding="truncate")


class MedicationDraftTests(unittest.TestCase):
    def test_draft_with_quantity(self):
        draft = build_medication_draft("Amoxicillin 500mg PO TID #30", start_date=date(2026, 3, 1))

        self.assertEqual(draft.name, "Amoxicillin")
        self.assertEqual(draft.dosage, "500mg")
        self.assertEqual(draft.frequency, "TID")
        self.assertEqual(draft.route, "PO")
        self.assertEqual(draft.status, MedicationStatus.ACTIVE)
        self.assertEqual(draft.quantity, 30)
        self.assertEqual(draft.days_supply, 10)
        self.assertEqual(draft.refill_date, date(2026, 3, 11))

    def test_prn_draft(self):
        draft = build_medication_draft("Oxycodone 5mg PO q4h PRN #20", start_date=date(2026, 3, 1))

        self.assertEqual(draft.status, MedicationStatus.PRN)
        self.assertEqual(draft.frequency, "Q4H PRN")
        self.assertAlmostEqual(draft.days_supply, 20 * 4 / 24)
        self.assertIsNotNone(draft.refill_date)

    def test_unknown_supply_draft(self):
        draft = build_medication_draft(
            "Hepatitis B vaccine 3 doses at 0, 1, 6 months #3", start_date=date(2026, 3, 1)
        )

        self.assertEqual(draft.quantity, 3)
        self.assertEqual(draft.frequency, "3 doses at 0, 1, 6 months")
        self.assertIsNone(draft.days_supply)
        self.assertIsNone(draft.refill_date)

    def test_draft_without_quantity(self):
        draft = build_medication_draft("Metformin 500mg PO BID", start_date=date(2026, 3, 1))

        self.assertIsNone(draft.quantity)
        self.assertIsNone(draft.days_supply)
        self.assertIsNone(draft.refill_date)

    def test_start_date_defaults_to_today(self):
        draft = build_medication_draft("Metformin 500mg PO BID")
        self.assertEqual(draft.start_date, date.today())


if __name__ == "__main__":
    unittest.main()
