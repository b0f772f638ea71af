"""Unit tests for weighted duplicate similarity scoring."""

import unittest

from crm_dedupe.duplicates.kinds import COMPANY_WEIGHTS, CONTACT_WEIGHTS
from crm_dedupe.duplicates.similarity import (
    KindWeights,
    email_field,
    extract_domain,
    name_field,
    normalize_name,
    score,
    snapshot_attributes,
)


class NormalizationTests(unittest.TestCase):
    def test_name_normalization_drops_punctuation_and_case(self) -> None:
        self.assertEqual(normalize_name("ACME, Inc."), "acme inc")
        self.assertEqual(normalize_name("  Acme   Inc "), "acme inc")

    def test_domain_extraction_strips_protocol_www_and_path(self) -> None:
        self.assertEqual(extract_domain("https://www.Acme.com/about/team"), "acme.com")
        self.assertEqual(extract_domain("www.acme.com"), "acme.com")
        self.assertEqual(extract_domain("acme.com"), "acme.com")
        self.assertEqual(extract_domain("http://acme.com"), "acme.com")

    def test_snapshot_is_read_only(self) -> None:
        source = {"name": "John Smith"}
        snapshot = snapshot_attributes(source)
        source["name"] = "Changed"
        self.assertEqual(snapshot["name"], "John Smith")
        with self.assertRaises(TypeError):
            snapshot["name"] = "x"  # type: ignore[index]


class ScoreTests(unittest.TestCase):
    def test_both_sides_empty_scores_zero(self) -> None:
        self.assertEqual(score(CONTACT_WEIGHTS, {}, {}), 0)
        self.assertEqual(score(CONTACT_WEIGHTS, {"name": "  ", "email": None}, {"name": "", "email": ""}), 0)
        self.assertEqual(score(COMPANY_WEIGHTS, {"name": None, "domain": None}, {"name": None, "domain": None}), 0)

    def test_one_side_empty_scores_zero(self) -> None:
        self.assertEqual(score(CONTACT_WEIGHTS, {"name": "John Smith"}, {}), 0)

    def test_identical_attributes_score_hundred(self) -> None:
        contact = {"name": "John Smith", "email": "john@example.com"}
        company = {"name": "Globex Corporation", "domain": "globex.com"}
        self.assertEqual(score(CONTACT_WEIGHTS, contact, dict(contact)), 100)
        self.assertEqual(score(COMPANY_WEIGHTS, company, dict(company)), 100)

    def test_score_is_symmetric(self) -> None:
        pairs = [
            ({"name": "John Smith", "email": "john@acme.com"}, {"name": "Jon Smyth", "email": "jon@acme.com"}),
            ({"name": "Jane Doe", "email": None}, {"name": "Doe Janet", "email": "jd@example.com"}),
            ({"name": "Ann", "email": "ann@a.io"}, {"name": "Bob", "email": "bob@b.io"}),
        ]
        for left, right in pairs:
            self.assertEqual(score(CONTACT_WEIGHTS, left, right), score(CONTACT_WEIGHTS, right, left))

    def test_name_comparison_ignores_token_order(self) -> None:
        swapped = score(CONTACT_WEIGHTS, {"name": "John Smith"}, {"name": "Smith John"})
        same_order = score(CONTACT_WEIGHTS, {"name": "John Smith"}, {"name": "John Smith"})
        self.assertEqual(swapped, same_order)
        self.assertEqual(swapped, 100)

    def test_missing_field_gives_its_weight_to_the_rest(self) -> None:
        # Email absent on one side: the name alone decides.
        self.assertEqual(
            score(CONTACT_WEIGHTS, {"name": "John Smith", "email": "john@acme.com"}, {"name": "John Smith"}),
            100,
        )

    def test_email_is_compared_case_insensitively(self) -> None:
        self.assertEqual(
            score(
                CONTACT_WEIGHTS,
                {"name": "John Smith", "email": " John.Smith@Example.COM "},
                {"name": "John Smith", "email": "john.smith@example.com"},
            ),
            100,
        )

    def test_near_identical_contact_scores_high_but_below_hundred(self) -> None:
        result = score(
            CONTACT_WEIGHTS,
            {"name": "John Smith", "email": "john@acme.com"},
            {"name": "Jon Smith", "email": "john@acme.com"},
        )
        self.assertIsInstance(result, int)
        self.assertGreater(result, 90)
        self.assertLess(result, 100)

    def test_unrelated_records_score_low(self) -> None:
        result = score(
            COMPANY_WEIGHTS,
            {"name": "Acme Inc", "domain": "acme.com"},
            {"name": "Globex Corporation", "domain": "globex.net"},
        )
        self.assertLess(result, 50)

    def test_acme_variants_score_hundred(self) -> None:
        result = score(
            COMPANY_WEIGHTS,
            {"name": "Acme Inc", "domain": "acme.com"},
            {"name": "ACME, Inc.", "domain": "www.acme.com"},
        )
        self.assertEqual(result, 100)


class KindWeightsTests(unittest.TestCase):
    def test_weights_must_sum_to_one(self) -> None:
        with self.assertRaises(ValueError):
            KindWeights((name_field(0.5), email_field(0.4)))

    def test_weights_must_be_positive_and_unique(self) -> None:
        with self.assertRaises(ValueError):
            KindWeights((name_field(1.0), email_field(0.0)))
        with self.assertRaises(ValueError):
            KindWeights((name_field(0.5), name_field(0.5)))
        with self.assertRaises(ValueError):
            KindWeights(())

    def test_restriction_rescales_remaining_weights(self) -> None:
        email_only = CONTACT_WEIGHTS.restricted_to(["email"])
        self.assertEqual(email_only.field_names, ("email",))
        self.assertAlmostEqual(email_only.fields[0].weight, 1.0)
        self.assertEqual(
            score(
                email_only,
                {"name": "John Smith", "email": "js@acme.com"},
                {"name": "Totally Different", "email": "js@acme.com"},
            ),
            100,
        )

    def test_empty_or_unknown_restriction_keeps_every_field(self) -> None:
        self.assertIs(CONTACT_WEIGHTS.restricted_to(None), CONTACT_WEIGHTS)
        self.assertIs(CONTACT_WEIGHTS.restricted_to([]), CONTACT_WEIGHTS)
        self.assertIs(CONTACT_WEIGHTS.restricted_to(["phone"]), CONTACT_WEIGHTS)
        self.assertIs(CONTACT_WEIGHTS.restricted_to(["name", "email"]), CONTACT_WEIGHTS)

    def test_comparable_values_detection(self) -> None:
        self.assertFalse(COMPANY_WEIGHTS.has_comparable_values({"name": " ", "domain": None}))
        self.assertTrue(COMPANY_WEIGHTS.has_comparable_values({"name": None, "domain": "acme.com"}))


if __name__ == "__main__":
    unittest.main()
