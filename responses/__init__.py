"""Response templates for the audience assistant."""

from .formatter import ActionButton, FormattedResponse, format_response, welcome_message

__all__ = ["ActionButton", "FormattedResponse", "format_response", "welcome_message"]
