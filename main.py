"""CLI entry point for the audience translation assistant."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from audience import AudienceAssistant, run_reference_sanity_check
from audience.catalog import get_all_fields, get_field_info
from audience.detection.detectors import extract_segments
from audience.inference import classify_intent
from audience.manager import AudienceStateManager
from audience.query import synthesize_query, validate_query
from reference.config import load_config
from reference.loader import ReferenceLoadError, load_reference_context
from responses.formatter import FormattedResponse, welcome_message

__all__ = [
    "AudienceAssistant",
    "AudienceStateManager",
    "build_assistant",
    "classify_intent",
    "extract_segments",
    "get_all_fields",
    "get_field_info",
    "main",
    "render",
    "synthesize_query",
    "validate_query",
]


def build_assistant() -> AudienceAssistant:
    load_dotenv()
    config = load_config()
    reference = None

    try:
        reference = load_reference_context(config)
        run_reference_sanity_check(reference)
    except ReferenceLoadError as exc:
        print(f"[Warning] Field reference unavailable: {exc}. Continuing without reference lookups.")

    return AudienceAssistant(
        reference=reference,
        max_input_length=config.max_input_length,
        max_history_turns=config.max_history_turns,
        reference_max_lines=config.reference_max_lines,
    )


def render(response: FormattedResponse) -> str:
    parts = [response.content]
    if response.boolean_output:
        parts.append(f"Query: {response.boolean_output}")
    if response.suggestions:
        parts.append("Try: " + " | ".join(response.suggestions))
    if response.action_buttons:
        parts.append("Actions: " + ", ".join(f"/{button.action}" for button in response.action_buttons))
    return "\n\n".join(parts)


def main() -> None:
    logging.basicConfig(level=logging.WARNING)
    assistant = build_assistant()
    print(render(welcome_message()))
    print("(Type 'exit' or 'quit' to stop, or /clear_audience, /generate_query to use an action.)")
    while True:
        try:
            user_text = input("You: ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\nGoodbye!")
            break

        if not user_text:
            continue

        if user_text.lower() in {"exit", "quit"}:
            print("Goodbye!")
            break

        try:
            if user_text.startswith("/"):
                response = assistant.perform_action(user_text[1:].strip())
            else:
                response = assistant.process_message(user_text)
        except ValueError as exc:
            print(f"[{exc}]")
            continue

        print(f"Assistant: {render(response)}\n")


if __name__ == "__main__":
    main()
