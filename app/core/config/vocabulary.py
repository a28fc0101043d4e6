from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from app.core.config.scoring import get_scoring_value


@dataclass(frozen=True)
class AtsVocabulary:
    stop_words: frozenset[str]
    priority_keywords: tuple[str, ...]
    soft_skills: frozenset[str]
    section_hints: dict[str, tuple[str, ...]]

    @property
    def technical_skills(self) -> frozenset[str]:
        return frozenset(term for term in self.priority_keywords if term not in self.soft_skills)


def _term_list(value: Any, name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise RuntimeError(f"Scoring config '{name}' must be a list of strings.")
    seen: dict[str, None] = {}
    for item in value:
        term = str(item or "").strip().lower()
        if term:
            seen.setdefault(term, None)
    return tuple(seen)


@lru_cache(maxsize=1)
def load_vocabulary() -> AtsVocabulary:
    raw_hints = get_scoring_value("ats.section_hints", {}) or {}
    if not isinstance(raw_hints, dict):
        raise RuntimeError("Scoring config 'ats.section_hints' must be a mapping of lists.")

    section_hints = {
        str(group): _term_list(phrases, f"ats.section_hints.{group}")
        for group, phrases in raw_hints.items()
    }
    return AtsVocabulary(
        stop_words=frozenset(_term_list(get_scoring_value("ats.stop_words"), "ats.stop_words")),
        priority_keywords=_term_list(get_scoring_value("ats.priority_keywords"), "ats.priority_keywords"),
        soft_skills=frozenset(_term_list(get_scoring_value("ats.soft_skills"), "ats.soft_skills")),
        section_hints=section_hints,
    )
