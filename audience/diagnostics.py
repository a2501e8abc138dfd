"""Diagnostic utilities for the audience module."""

from reference.loader import ReferenceContext
from reference.search import search_reference

from .catalog import FIELD_CATALOG


def run_reference_sanity_check(reference: ReferenceContext) -> None:
    """Search the reference once for a catalog field to confirm it loaded usefully."""

    loaded = ", ".join(reference.documents) or "none"
    print(f"[Reference check] Loaded documents: {loaded} ({len(reference.lines())} lines)")
    if reference.missing:
        print(f"[Reference check] Missing documents: {', '.join(reference.missing)}")

    probe = FIELD_CATALOG[0].name
    lines = search_reference(reference, probe, max_lines=1)
    if not lines:
        print(f"[Reference check] No reference line mentions '{probe}'.")
        return

    print(f"[Reference check] First line for '{probe}': {lines[0]}")
