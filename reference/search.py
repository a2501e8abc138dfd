"""Line search over the loaded field reference."""

from __future__ import annotations

from typing import List

from reference.loader import ReferenceContext


def search_reference(context: ReferenceContext, term: str, max_lines: int = 5) -> List[str]:
    """Return lines mentioning the term, plus the line right after each mention.

    Documents are scanned in configured order and matching is case-insensitive.
    """
    needle = term.lower().strip()
    if not needle or max_lines <= 0:
        return []

    matches: List[str] = []
    for text in context.documents.values():
        if needle not in text.lower():
            continue
        previous_matched = False
        for line in text.splitlines():
            matched = needle in line.lower()
            if (matched or previous_matched) and line.strip():
                matches.append(line.strip())
                if len(matches) >= max_lines:
                    return matches
            previous_matched = matched
    return matches
