from __future__ import annotations

import math
import re

from app.core.config.scoring import get_scoring_value
from app.core.config.vocabulary import load_vocabulary
from app.normalize.text import tokenize

_NUMERIC_SIGNAL_RE = re.compile(r"\b\d+(?:[.,]\d+)?%?\b")

DENSITY_SPARSE_PCT = 1.0
DENSITY_STUFFED_PCT = 12.0
DENSITY_SPARSE_SCORE = 35.0
DENSITY_STUFFED_SCORE = 55.0
SECTION_COVERAGE_WEIGHT = 0.7
IMPACT_POINTS_PER_SIGNAL = 4
IMPACT_MAX_POINTS = 30


def clamp(value: float, min_value: float = 0.0, max_value: float = 100.0) -> float:
    return max(min_value, min(max_value, value))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_coverage_score(matched_weight: float, total_weight: float) -> float:
    if not total_weight or total_weight <= 0:
        return 0.0
    return clamp(matched_weight / total_weight * 100)


def keyword_density_percentage(resume_text: str, matched_keywords: list[str]) -> float:
    tokens = tokenize(resume_text)
    if not tokens or not matched_keywords:
        return 0.0

    # Space padding gives whole-token matches; counts are non-overlapping.
    resume_string = f" {' '.join(tokens)} "
    total_mentions = sum(resume_string.count(f" {keyword} ") for keyword in matched_keywords)
    return total_mentions / len(tokens) * 100


def density_score_from_percentage(percentage: float) -> float:
    if percentage < DENSITY_SPARSE_PCT:
        return DENSITY_SPARSE_SCORE
    if percentage > DENSITY_STUFFED_PCT:
        return DENSITY_STUFFED_SCORE
    return clamp(40 + percentage * 5)


def calculate_keyword_density_score(resume_text: str, matched_keywords: list[str]) -> float:
    """Reward moderate keyword density.

    Both sparse (<1%) and stuffed (>12%) resumes land on flat scores, so
    repeating keywords past the upper bound never pays off. Resumes with no
    tokens or no matched keywords score 0.
    """
    if not tokenize(resume_text) or not matched_keywords:
        return 0.0
    return density_score_from_percentage(keyword_density_percentage(resume_text, matched_keywords))


def count_numeric_signals(text: str) -> int:
    return len(_NUMERIC_SIGNAL_RE.findall(text or ""))


def calculate_section_quality_score(resume_text: str) -> float:
    section_hints = load_vocabulary().section_hints
    if not section_hints:
        section_coverage = 0.0
    else:
        lowered = (resume_text or "").lower()
        hits = sum(1 for phrases in section_hints.values() if any(phrase in lowered for phrase in phrases))
        section_coverage = hits / len(section_hints) * 100

    impact_score = clamp(count_numeric_signals(resume_text) * IMPACT_POINTS_PER_SIGNAL, 0, IMPACT_MAX_POINTS)
    return clamp(section_coverage * SECTION_COVERAGE_WEIGHT + impact_score)


def calculate_overall_score(coverage_score: float, density_score: float, section_score: float) -> float:
    coverage_weight = float(get_scoring_value("ats.weights.coverage", 0.55))
    density_weight = float(get_scoring_value("ats.weights.density", 0.2))
    section_weight = float(get_scoring_value("ats.weights.section", 0.25))
    return clamp(
        coverage_score * coverage_weight
        + density_score * density_weight
        + section_score * section_weight
    )
