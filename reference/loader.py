"""Loads the plain-text field reference documents once at startup."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from reference.config import AssistantConfig

logger = logging.getLogger(__name__)


class ReferenceLoadError(Exception):
    """Raised when none of the configured reference documents can be read."""


@dataclass
class ReferenceContext:
    """Reference documents keyed by name, in configured order."""

    documents: Dict[str, str] = field(default_factory=dict)
    missing: List[str] = field(default_factory=list)

    @property
    def available(self) -> bool:
        return bool(self.documents)

    def lines(self) -> List[str]:
        collected: List[str] = []
        for text in self.documents.values():
            collected.extend(text.splitlines())
        return collected


def load_reference_context(config: AssistantConfig) -> ReferenceContext:
    """Read every configured document; fail only when nothing could be loaded."""

    context = ReferenceContext()
    for name, path in config.reference_files.items():
        if not path.exists():
            logger.warning("Reference document %s not found at %s", name, path)
            context.missing.append(name)
            continue
        context.documents[name] = path.read_text(encoding="utf-8")
        logger.info("Loaded reference document %s from %s", name, path)

    if not context.available:
        raise ReferenceLoadError(
            f"No reference documents could be loaded from {config.reference_dir} "
            f"(missing: {', '.join(context.missing) or 'none configured'})"
        )
    return context
