import unittest

from medorder.services.route_classifier import DEFAULT_ROUTE, ROUTE_RULES, classify_route, match_route


class RouteClassifierTests(unittest.TestCase):
    def test_no_route_cue_defaults_to_oral(self):
        self.assertEqual(classify_route("Acetaminophen 500mg"), "PO")
        self.assertEqual(classify_route(""), DEFAULT_ROUTE)

    def test_intravenous(self):
        self.assertEqual(classify_route("Vancomycin 1g IV q12h"), "IV")
        self.assertEqual(classify_route("Ceftriaxone 1g intravenous daily"), "IV")

    def test_intramuscular(self):
        self.assertEqual(classify_route("Vitamin B12 1000mcg IM monthly"), "IM")
        self.assertEqual(classify_route("Haloperidol 5mg i.m. stat"), "IM")

    def test_subcutaneous(self):
        self.assertEqual(classify_route("Enoxaparin 40mg subcutaneously daily"), "SC")
        self.assertEqual(classify_route("Insulin 10 units s.c."), "SC")

    def test_sublingual(self):
        self.assertEqual(classify_route("Nitroglycerin 0.4mg SL PRN"), "SL")

    def test_rectal(self):
        self.assertEqual(classify_route("Acetaminophen 650mg PR q6h"), "PR")
        self.assertEqual(classify_route("Bisacodyl 10mg per rectum"), "PR")

    def test_explicit_oral(self):
        self.assertEqual(classify_route("Metformin 500mg by mouth BID"), "PO")

    def test_topical(self):
        self.assertEqual(classify_route("Hydrocortisone cream apply BID"), "TOP")

    def test_inhaled_and_nasal(self):
        self.assertEqual(classify_route("Salbutamol 2.5mg neb q4h"), "INH")
        self.assertEqual(classify_route("Fluticasone intranasal daily"), "INH")
        self.assertEqual(classify_route("Oxygen 2L nasal cannula"), "INH")

    def test_short_abbreviations_match_whole_words_only(self):
        self.assertEqual(classify_route("Nebivolol 5mg OD"), "PO")
        self.assertEqual(classify_route("Prednisone 5mg OD"), "PO")

    def test_first_rule_in_table_wins(self):
        self.assertEqual(classify_route("Morphine 2mg IV or PO q4h"), "IV")

    def test_match_route_reports_offset(self):
        match = match_route("Vancomycin 1g IV q12h")
        self.assertIsNotNone(match)
        self.assertEqual(match.value, "IV")
        self.assertEqual(match.start, 14)
        self.assertIsNone(match_route("Vitamin D supplement"))

    def test_rule_table_order(self):
        self.assertEqual(
            [rule.code for rule in ROUTE_RULES],
            ["IV", "IM", "SC", "SL", "PR", "PO", "TOP", "INH", "INH"],
        )


if __name__ == "__main__":
    unittest.main()
