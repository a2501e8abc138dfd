"""Tests for boolean query synthesis and the catalog validation pass."""

import unittest

from main import extract_segments, synthesize_query, validate_query
from audience.query import fragment_is_well_formed, split_clauses
from audience.state import AudienceSegment


def _segment(field_name: str, logic: str, segment_id: str = "seg") -> AudienceSegment:
    return AudienceSegment(
        id=segment_id,
        field=field_name,
        category="demographic",
        label=field_name,
        criteria=f"{field_name}: test",
        boolean_logic=logic,
    )


class SynthesisTests(unittest.TestCase):
    def test_empty_audience_gives_empty_query(self) -> None:
        self.assertEqual(synthesize_query([]), "")

    def test_single_segment_is_its_own_clause(self) -> None:
        self.assertEqual(synthesize_query([_segment("gender", "gender == 'Male'")]), "gender == 'Male'")

    def test_reference_scenario_query(self) -> None:
        segments = extract_segments("Professional males 30-45, managers in technology, active LinkedIn users")
        self.assertEqual(
            synthesize_query(segments),
            "gender == 'Male' AND age >= 30 AND age <= 45 AND job_level == 'Manager' "
            "AND industry == 'Technology' AND linkedin_usage == 'Active'",
        )

    def test_duplicates_are_kept(self) -> None:
        segments = [_segment("age", "age >= 30 AND age <= 45"), _segment("age", "age >= 18 AND age <= 25")]
        self.assertEqual(
            synthesize_query(segments),
            "age >= 30 AND age <= 45 AND age >= 18 AND age <= 25",
        )


class FragmentShapeTests(unittest.TestCase):
    def test_accepted_shapes(self) -> None:
        self.assertEqual(split_clauses("gender == 'Male'"), ["gender == 'Male'"])
        self.assertEqual(split_clauses("age >= 25 AND age <= 40"), ["age >= 25", "age <= 40"])
        self.assertEqual(
            split_clauses("(gender == 'Male' OR gender == 'Female')"),
            ["gender == 'Male'", "gender == 'Female'"],
        )

    def test_rejected_shapes(self) -> None:
        for fragment in ("", "gender", "gender = 'Male'", "(age >= 25 AND (age <= 40))", "age >= 25)", "Age == 3"):
            with self.subTest(fragment=fragment):
                self.assertFalse(fragment_is_well_formed(fragment))


class ValidationTests(unittest.TestCase):
    def test_detector_output_is_valid(self) -> None:
        text = "Professional males 30-45, managers in technology, active LinkedIn users who buy organic in the usa"
        self.assertEqual(validate_query(extract_segments(text)), [])

    def test_professional_level_uses_ordinal_operator(self) -> None:
        self.assertEqual(validate_query(extract_segments("professionals")), [])

    def test_unknown_field_is_reported(self) -> None:
        issues = validate_query([_segment("fitness_level", "fitness_level == 'High'")])
        self.assertEqual(len(issues), 1)
        self.assertIn("unknown field", issues[0].message)

    def test_disallowed_operator_and_value(self) -> None:
        issues = validate_query([_segment("gender", "gender >= 'Robot'")])
        messages = [issue.message for issue in issues]
        self.assertEqual(len(messages), 2)
        self.assertTrue(any("operator" in message for message in messages))
        self.assertTrue(any("value 'Robot'" in message for message in messages))

    def test_numeric_flag_value_is_checked(self) -> None:
        issues = validate_query([_segment("interest_environment", "interest_environment == 2")])
        self.assertEqual(len(issues), 1)

    def test_malformed_fragment_is_reported(self) -> None:
        issues = validate_query([_segment("gender", "gender is male")])
        self.assertIn("malformed", issues[0].message)

    def test_repeated_field_is_reported_once(self) -> None:
        segments = [
            _segment("age", "age >= 30 AND age <= 45", "a"),
            _segment("age", "age >= 18 AND age <= 25", "b"),
        ]
        issues = validate_query(segments)
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].segment_id, "a")

    def test_validation_does_not_change_synthesis(self) -> None:
        segments = [_segment("fitness_level", "fitness_level == 'High'")]
        validate_query(segments)
        self.assertEqual(synthesize_query(segments), "fitness_level == 'High'")


if __name__ == "__main__":
    unittest.main()
