"""Tests for AudienceStateManager: mutations, removal by field, turn history and change notification."""

import unittest

from main import AudienceStateManager, extract_segments


class AudienceMutationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.manager = AudienceStateManager()
        self.segments = extract_segments("Professional males 30-45, managers in technology, active LinkedIn users")
        self.manager.replace_audience(self.segments)

    def test_replace_audience_keeps_order(self) -> None:
        self.assertEqual([s.id for s in self.manager.segments], [s.id for s in self.segments])

    def test_append_then_remove_restores_audience(self) -> None:
        before = self.manager.segments
        [extra] = extract_segments("organic")
        self.manager.add_segment(extra)
        self.assertEqual(len(self.manager.segments), len(before) + 1)
        self.manager.remove_segment(extra.id)
        self.assertEqual(self.manager.segments, before)

    def test_append_segments_then_remove_each_restores_audience(self) -> None:
        before = self.manager.segments
        extras = extract_segments("sustainable organic buyers in the usa who care about the environment")
        self.assertEqual(len(extras), 4)
        self.manager.append_segments(extras)
        self.assertEqual(self.manager.segments, before + extras)
        for segment in extras:
            self.manager.remove_segment(segment.id)
        self.assertEqual(self.manager.segments, before)

    def test_remove_unknown_id_is_a_no_op(self) -> None:
        before = self.manager.segments
        self.manager.remove_segment("missing")
        self.assertEqual(self.manager.segments, before)

    def test_remove_by_field_returns_removed_segments(self) -> None:
        removed = self.manager.remove_by_criteria_keyword({"age"})
        self.assertEqual([s.field for s in removed], ["age"])
        self.assertNotIn("age", [s.field for s in self.manager.segments])

    def test_age_removal_leaves_linkedin_usage(self) -> None:
        self.manager.remove_by_criteria_keyword({"age"})
        self.assertIn("linkedin_usage", [s.field for s in self.manager.segments])

    def test_remove_with_no_match_keeps_everything(self) -> None:
        removed = self.manager.remove_by_criteria_keyword({"country_residence"})
        self.assertEqual(removed, [])
        self.assertEqual(len(self.manager.segments), 5)

    def test_clear_audience_keeps_history(self) -> None:
        self.manager.record_turn("hello", "hi", [])
        self.manager.clear_audience()
        state = self.manager.get_state()
        self.assertEqual(state.current_audience, [])
        self.assertEqual(len(state.conversation_history), 1)

    def test_combined_query_and_description(self) -> None:
        self.assertEqual(
            self.manager.generate_combined_query(),
            " AND ".join(s.boolean_logic for s in self.segments),
        )
        self.assertEqual(
            self.manager.get_audience_description(),
            "Male professionals, Ages 30-45, Management level, Technology industry, Active LinkedIn users",
        )
        self.manager.clear_audience()
        self.assertEqual(self.manager.generate_combined_query(), "")
        self.assertEqual(self.manager.get_audience_description(), "No audience defined")

    def test_get_state_returns_independent_copy(self) -> None:
        state = self.manager.get_state()
        state.current_audience.clear()
        state.context.pending_actions.append("tampered")
        self.assertEqual(len(self.manager.segments), 5)
        self.assertEqual(self.manager.get_state().context.pending_actions, [])

    def test_update_context_and_query(self) -> None:
        self.manager.update_context("generate_query", ["Refine query"])
        self.manager.set_current_query("age >= 30")
        context = self.manager.get_state().context
        self.assertEqual(context.last_user_intent, "generate_query")
        self.assertEqual(context.pending_actions, ["Refine query"])
        self.assertEqual(context.current_query, "age >= 30")


class HistoryTests(unittest.TestCase):
    def test_turn_ids_are_sequential(self) -> None:
        manager = AudienceStateManager()
        first = manager.record_turn("one", "reply", [])
        second = manager.record_turn("two", "reply", [])
        self.assertTrue(first.id.startswith("1-"))
        self.assertTrue(second.id.startswith("2-"))

    def test_turn_snapshots_segments(self) -> None:
        manager = AudienceStateManager()
        segments = extract_segments("male managers")
        turn = manager.record_turn("male managers", "ok", segments)
        self.assertEqual(turn.audience_changes, tuple(segments))

    def test_history_is_unbounded_by_default(self) -> None:
        manager = AudienceStateManager()
        for index in range(30):
            manager.record_turn(f"turn {index}", "reply", [])
        self.assertEqual(len(manager.get_state().conversation_history), 30)

    def test_history_truncates_to_limit(self) -> None:
        manager = AudienceStateManager(max_history_turns=3)
        for index in range(5):
            manager.record_turn(f"turn {index}", "reply", [])
        history = manager.get_state().conversation_history
        self.assertEqual([turn.user_input for turn in history], ["turn 2", "turn 3", "turn 4"])


class NotificationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.manager = AudienceStateManager()

    def test_listeners_run_in_registration_order(self) -> None:
        calls = []
        self.manager.subscribe(lambda state: calls.append("first"))
        self.manager.subscribe(lambda state: calls.append("second"))
        self.manager.clear_audience()
        self.assertEqual(calls, ["first", "second"])

    def test_every_mutation_notifies(self) -> None:
        seen = []
        self.manager.subscribe(lambda state: seen.append(len(state.current_audience)))
        segments = extract_segments("male managers")
        self.manager.replace_audience(segments)
        self.manager.remove_segment(segments[0].id)
        self.manager.update_context("add_criteria")
        self.manager.record_turn("x", "y", [])
        self.assertEqual(seen, [2, 1, 1, 1])

    def test_unsubscribe_stops_notifications_and_is_idempotent(self) -> None:
        calls = []
        unsubscribe = self.manager.subscribe(lambda state: calls.append(state))
        self.manager.clear_audience()
        unsubscribe()
        unsubscribe()
        self.manager.clear_audience()
        self.assertEqual(len(calls), 1)

    def test_same_listener_registered_twice_has_two_handles(self) -> None:
        calls = []

        def listener(state) -> None:
            calls.append(state)

        first = self.manager.subscribe(listener)
        self.manager.subscribe(listener)
        first()
        self.manager.clear_audience()
        self.assertEqual(len(calls), 1)

    def test_listener_receives_snapshot(self) -> None:
        captured = []
        self.manager.subscribe(captured.append)
        self.manager.replace_audience(extract_segments("organic"))
        captured[0].current_audience.clear()
        self.assertEqual(len(self.manager.segments), 1)

    def test_listener_exception_propagates(self) -> None:
        def broken(state) -> None:
            raise RuntimeError("listener failed")

        self.manager.subscribe(broken)
        with self.assertRaises(RuntimeError):
            self.manager.clear_audience()


if __name__ == "__main__":
    unittest.main()
