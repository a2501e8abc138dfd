"""Tests for AudienceAssistant: a full conversation, catalog questions, action buttons and input checks."""

import unittest

from main import AudienceAssistant
from reference.loader import ReferenceContext

REFERENCE_TEXT = (
    "education_level (demographic)\n"
    "Highest education: High School, Some College, Bachelor's, Master's, PhD.\n"
)

SCENARIO = "Professional males 30-45, managers in technology, active LinkedIn users"


def _fields(assistant):
    return [segment.field for segment in assistant.state.segments]


class ConversationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.assistant = AudienceAssistant()

    def test_define_audience_scenario(self) -> None:
        response = self.assistant.process_message(SCENARIO)
        self.assertEqual(_fields(self.assistant), ["gender", "age", "job_level", "industry", "linkedin_usage"])
        self.assertIn("Audience Analysis Complete", response.content)
        state = self.assistant.state.get_state()
        self.assertEqual(state.context.last_user_intent, "define_audience")
        self.assertEqual(state.context.pending_actions, ["Generate boolean query"])
        self.assertEqual(len(state.conversation_history), 1)
        self.assertEqual(state.conversation_history[0].user_input, SCENARIO)

    def test_add_appends_one_segment(self) -> None:
        self.assistant.process_message(SCENARIO)
        before = len(self.assistant.state.segments)
        response = self.assistant.process_message("Add organic buyers")
        self.assertEqual(len(self.assistant.state.segments), before + 1)
        self.assertEqual(_fields(self.assistant)[-1], "product_purchase_organic")
        self.assertIn("Criteria Added", response.content)

    def test_define_replaces_existing_audience(self) -> None:
        self.assistant.process_message(SCENARIO)
        self.assistant.process_message("Target millennial women")
        self.assertEqual(_fields(self.assistant), ["gender", "age"])

    def test_define_without_signal_keeps_audience(self) -> None:
        self.assistant.process_message(SCENARIO)
        response = self.assistant.process_message("Describe a great group of people")
        self.assertEqual(len(self.assistant.state.segments), 5)
        self.assertEqual(response.suggestions, ["Generate boolean query"])

    def test_kept_audience_hints_only_missing_fields(self) -> None:
        self.assistant.process_message("Target millennial women")
        response = self.assistant.process_message("Describe someone great")
        self.assertEqual(response.suggestions, ["Add job level", "Add industry focus", "Generate boolean query"])

    def test_remove_by_field(self) -> None:
        self.assistant.process_message(SCENARIO)
        response = self.assistant.process_message("Remove age")
        self.assertNotIn("age", _fields(self.assistant))
        self.assertIn("linkedin_usage", _fields(self.assistant))
        self.assertIn("**Active Segments**: 4", response.content)

    def test_remove_manager_does_not_drop_age(self) -> None:
        self.assistant.process_message(SCENARIO)
        self.assistant.process_message("Remove the manager criteria")
        self.assertEqual(_fields(self.assistant), ["gender", "age", "industry", "linkedin_usage"])

    def test_inflected_removal_keeps_the_rest_of_the_audience(self) -> None:
        self.assistant.process_message(SCENARIO)
        self.assistant.process_message("Excluding managers")
        self.assertEqual(_fields(self.assistant), ["gender", "age", "industry", "linkedin_usage"])

    def test_inflected_addition_appends(self) -> None:
        self.assistant.process_message(SCENARIO)
        self.assistant.process_message("Adding organic buyers")
        self.assertEqual(len(self.assistant.state.segments), 6)

    def test_remove_without_known_field_changes_nothing(self) -> None:
        self.assistant.process_message(SCENARIO)
        self.assistant.process_message("Remove whatever")
        self.assertEqual(len(self.assistant.state.segments), 5)

    def test_generate_sets_current_query(self) -> None:
        self.assistant.process_message(SCENARIO)
        response = self.assistant.process_message("Generate boolean query")
        expected = self.assistant.state.generate_combined_query()
        self.assertEqual(response.boolean_output, expected)
        self.assertEqual(self.assistant.state.get_state().context.current_query, expected)

    def test_refine_appends_segments(self) -> None:
        self.assistant.process_message("Target millennial women")
        response = self.assistant.process_message("Refine to students")
        self.assertEqual(_fields(self.assistant), ["gender", "age", "education_status"])
        self.assertIn("Medium", response.content)

    def test_interpret_does_not_touch_state(self) -> None:
        result = self.assistant.interpret(SCENARIO)
        self.assertEqual(result.intent, "define_audience")
        self.assertEqual(len(result.extracted), 5)
        self.assertEqual(self.assistant.state.segments, [])
        self.assertEqual(self.assistant.interpret("Remove gender").removal_fields, {"gender"})

    def test_remove_segment_by_id(self) -> None:
        self.assistant.process_message(SCENARIO)
        first = self.assistant.state.segments[0]
        self.assistant.remove_segment(first.id)
        self.assistant.remove_segment("nonexistent-id")
        self.assertEqual(len(self.assistant.state.segments), 4)

    def test_snapshot(self) -> None:
        self.assistant.process_message("Target millennial women")
        snapshot = self.assistant.snapshot()
        self.assertEqual(snapshot["segment_count"], 2)
        self.assertEqual(snapshot["audience"], "Female professionals, Millennial generation")
        self.assertEqual(snapshot["history_length"], 1)


class InputValidationTests(unittest.TestCase):
    def test_empty_input_is_rejected(self) -> None:
        assistant = AudienceAssistant()
        for text in ("", "   "):
            with self.subTest(text=text):
                with self.assertRaises(ValueError):
                    assistant.process_message(text)
        self.assertEqual(assistant.state.get_state().conversation_history, [])

    def test_oversized_input_is_rejected(self) -> None:
        assistant = AudienceAssistant(max_input_length=10)
        with self.assertRaises(ValueError):
            assistant.process_message("male managers in tech")


class CatalogQuestionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.assistant = AudienceAssistant()
        self.assistant.process_message(SCENARIO)

    def test_field_listing_leaves_audience_alone(self) -> None:
        response = self.assistant.process_message("What fields are available?")
        self.assertIn("Available fields", response.content)
        self.assertIn("country_residence", response.content)
        self.assertEqual(len(self.assistant.state.segments), 5)
        self.assertEqual(len(self.assistant.state.get_state().conversation_history), 2)

    def test_category_listing(self) -> None:
        response = self.assistant.process_message("Show me demographic options")
        self.assertIn("Available demographic fields", response.content)
        self.assertNotIn("linkedin_usage", response.content)

    def test_field_validation(self) -> None:
        response = self.assistant.process_message("Verify fitness_level, age")
        self.assertIn("- age: available", response.content)
        self.assertIn("- fitness_level: not in the catalog", response.content)
        self.assertEqual(len(self.assistant.state.segments), 5)


class ActionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.assistant = AudienceAssistant()
        self.assistant.process_message(SCENARIO)

    def test_generate_action(self) -> None:
        response = self.assistant.perform_action("generate_query")
        self.assertEqual(response.boolean_output, self.assistant.state.generate_combined_query())
        state = self.assistant.state.get_state()
        self.assertEqual(state.context.current_query, response.boolean_output)
        self.assertEqual(len(state.conversation_history), 1)

    def test_clear_action(self) -> None:
        self.assistant.perform_action("generate_query")
        response = self.assistant.perform_action("clear_audience")
        state = self.assistant.state.get_state()
        self.assertEqual(state.current_audience, [])
        self.assertEqual(state.context.current_query, "")
        self.assertEqual(len(state.conversation_history), 1)
        self.assertEqual(response.action_buttons[0].label, "Define New Audience")

    def test_prompt_actions(self) -> None:
        for action in ("add_criteria", "refine_audience"):
            with self.subTest(action=action):
                response = self.assistant.perform_action(action)
                self.assertTrue(response.content)
                self.assertEqual(len(self.assistant.state.segments), 5)

    def test_unknown_action(self) -> None:
        with self.assertRaises(ValueError):
            self.assistant.perform_action("export")


class ReferenceTests(unittest.TestCase):
    def test_unrecognised_define_falls_back_to_reference(self) -> None:
        assistant = AudienceAssistant(reference=ReferenceContext(documents={"core": REFERENCE_TEXT}))
        response = assistant.process_message("education_level")
        self.assertIn("From the field reference", response.content)
        self.assertIn("Highest education", response.content)
        self.assertEqual(assistant.state.segments, [])

    def test_no_reference_match_uses_normal_reply(self) -> None:
        assistant = AudienceAssistant(reference=ReferenceContext(documents={"core": REFERENCE_TEXT}))
        response = assistant.process_message("hello there")
        self.assertIn("Describe your audience", response.content)

    def test_lookup_without_reference(self) -> None:
        response = AudienceAssistant().lookup_reference("age")
        self.assertIn("unavailable", response.content)

    def test_lookup_with_reference(self) -> None:
        assistant = AudienceAssistant(reference=ReferenceContext(documents={"core": REFERENCE_TEXT}))
        response = assistant.lookup_reference("education_level")
        self.assertIn("education_level (demographic)", response.content)


if __name__ == "__main__":
    unittest.main()
