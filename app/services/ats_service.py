from __future__ import annotations

import logging
import re
from typing import Any, Mapping

from pydantic import ValidationError

from app.ai.types import AIClient
from app.core.config.vocabulary import load_vocabulary
from app.features.keyword_extract import ATS_MAX_KEYWORDS, extract_keyword_terms
from app.features.score_calculator import (
    calculate_coverage_score,
    calculate_keyword_density_score,
    calculate_overall_score,
    calculate_section_quality_score,
    round_half_up,
)
from app.features.targets import (
    MAX_DERIVED_SKILLS,
    MAX_TARGET_KEYWORDS,
    TargetSet,
    dedupe_keywords,
    normalize_skill_list,
    resolve_targets,
)
from app.normalize.text import normalize_for_match
from app.schemas.ats import ScoreMeta, ScoreResult
from app.schemas.resume import ResumeData

logger = logging.getLogger(__name__)

MAX_SCORING_TARGETS = 45
MAX_REPORTED_KEYWORDS = 25
MAX_REPORTED_SKILLS = 20
MAX_LISTED_IN_RECOMMENDATION = 6

PRIORITY_WEIGHT = 2.2
PHRASE_WEIGHT = 1.6
WORD_WEIGHT = 1.1

INFO_RECOMMENDATION = "ATS score is calculated from your uploaded resume content (no dummy placeholder data)."
EMPTY_RESUME_RECOMMENDATION = "Upload a resume or provide resume content to start ATS analysis."


def _coerce_resume_data(resume_data: ResumeData | Mapping[str, Any] | None) -> ResumeData | None:
    if resume_data is None or isinstance(resume_data, ResumeData):
        return resume_data
    try:
        return ResumeData.model_validate(resume_data)
    except ValidationError as exc:
        logger.warning("ats_resume_data_ignored errors=%s", exc.error_count())
        return None


def _join_parts(*parts: str | None) -> str:
    return " ".join(part for part in parts if part)


def build_critical_section_text(resume_data: ResumeData | None, fallback_text: str = "") -> str:
    """Summary, experience, projects and internships: where keyword presence counts most."""
    if resume_data is None:
        return normalize_for_match(fallback_text)

    experience = "\n".join(
        _join_parts(entry.role, entry.company, entry.description) for entry in resume_data.work_experience
    )
    projects = "\n".join(
        _join_parts(entry.name, entry.tech_stack, entry.description) for entry in resume_data.projects
    )
    internships = "\n".join(
        _join_parts(entry.role, entry.company, entry.description) for entry in resume_data.internships
    )
    summary = resume_data.personal_details.summary or ""

    critical_text = "\n".join(part for part in (summary, experience, projects, internships) if part)
    return normalize_for_match(critical_text or fallback_text)


def build_skills_text(resume_data: ResumeData | None, fallback_text: str = "") -> str:
    skills_text = ", ".join(resume_data.skills) if resume_data is not None else ""
    return normalize_for_match(skills_text or fallback_text)


def resume_data_to_text(resume_data: ResumeData | None) -> str:
    """Flatten structured resume data into plain resume text with section headings."""
    if resume_data is None:
        return ""

    details = resume_data.personal_details
    lines: list[str] = [
        part
        for part in (details.full_name, details.title, details.email, details.phone, details.location)
        if part
    ]

    def add_section(heading: str, entries: list[str]) -> None:
        entries = [entry for entry in entries if entry.strip()]
        if entries:
            lines.append("")
            lines.append(heading)
            lines.extend(entries)

    add_section("Summary", [details.summary or ""])
    add_section(
        "Experience",
        [
            "\n".join(part for part in (_join_parts(e.role, e.company), e.description) if part)
            for e in resume_data.work_experience
        ],
    )
    add_section(
        "Internships",
        [
            "\n".join(part for part in (_join_parts(e.role, e.company), e.description) if part)
            for e in resume_data.internships
        ],
    )
    add_section(
        "Projects",
        [
            "\n".join(part for part in (_join_parts(p.name, p.tech_stack), p.description) if part)
            for p in resume_data.projects
        ],
    )
    add_section(
        "Education",
        [_join_parts(e.degree, e.institution, e.description) for e in resume_data.education],
    )
    add_section("Skills", [", ".join(resume_data.skills)])
    add_section("Certifications", list(resume_data.certifications))
    add_section("Achievements", list(resume_data.achievements))
    add_section("Hobbies", [", ".join(resume_data.hobbies)])
    return "\n".join(lines).strip()


def contains_term(text: str, term: str) -> bool:
    normalized_text = normalize_for_match(text)
    normalized_term = normalize_for_match(term)
    if not normalized_text or not normalized_term:
        return False

    # Phrases use plain substring matching; word boundaries inside phrases are unreliable.
    if " " in normalized_term:
        return normalized_term in normalized_text
    return re.search(rf"\b{re.escape(normalized_term)}\b", normalized_text, re.IGNORECASE) is not None


def keyword_weight(keyword: str) -> float:
    if keyword in load_vocabulary().priority_keywords:
        return PRIORITY_WEIGHT
    if len(keyword.split(" ")) > 1:
        return PHRASE_WEIGHT
    return WORD_WEIGHT


def partition_targets(scoring_targets: list[str], critical_text: str) -> tuple[list[str], list[str], float, float]:
    """Split targets into (matched, missing, matched_weight, total_weight)."""
    matched: list[str] = []
    missing: list[str] = []
    matched_weight = 0.0
    total_weight = 0.0
    for keyword in scoring_targets:
        weight = keyword_weight(keyword)
        total_weight += weight
        if contains_term(critical_text, keyword):
            matched.append(keyword)
            matched_weight += weight
        else:
            missing.append(keyword)
    return matched, missing, matched_weight, total_weight


def find_missing_skills(target_skills: list[str], skills_text: str, missing_keywords: list[str]) -> list[str]:
    missing: dict[str, None] = {skill: None for skill in target_skills if not contains_term(skills_text, skill)}

    # Back-fill scans the joined keyword string, so a hit can straddle two adjacent keywords.
    vocabulary = load_vocabulary()
    missing_keyword_text = " ".join(missing_keywords)
    for keyword in vocabulary.priority_keywords:
        if len(missing) >= MAX_REPORTED_SKILLS:
            break
        skill = normalize_for_match(keyword)
        if not skill or skill in missing:
            continue
        if skill not in vocabulary.technical_skills or contains_term(skills_text, skill):
            continue
        if contains_term(missing_keyword_text, skill):
            missing[skill] = None

    return normalize_skill_list(list(missing), MAX_REPORTED_SKILLS)


def build_recommendations(
    missing_keywords: list[str],
    missing_skills: list[str],
    section_score: float,
    density_score: float,
) -> list[str]:
    recommendations = [INFO_RECOMMENDATION]
    if missing_keywords:
        listed = ", ".join(missing_keywords[:MAX_LISTED_IN_RECOMMENDATION])
        recommendations.append(f"Add missing words in summary/experience/projects/internships: {listed}.")
    if missing_skills:
        listed = ", ".join(missing_skills[:MAX_LISTED_IN_RECOMMENDATION])
        recommendations.append(f"Strengthen your skills section with: {listed}.")
    if section_score < 60:
        recommendations.append(
            "Improve section clarity using clear headings for Summary, Experience, Skills, and Education."
        )
    if density_score < 55:
        recommendations.append(
            "Increase relevant keyword usage in project and experience bullets without keyword stuffing."
        )
    return recommendations


def empty_score_result() -> ScoreResult:
    return ScoreResult(
        score=0,
        recommendations=[EMPTY_RESUME_RECOMMENDATION],
        meta=ScoreMeta(coverage_score=0, density_score=0, section_score=0, ai_assisted=False, inferred_profile="general"),
    )


def score_against_targets(
    normalized_resume: str,
    critical_text: str,
    skills_text: str,
    targets: TargetSet,
) -> ScoreResult:
    target_keywords = dedupe_keywords(targets.target_keywords, MAX_TARGET_KEYWORDS)
    target_skills = normalize_skill_list(targets.target_skills, MAX_DERIVED_SKILLS)
    scoring_targets = dedupe_keywords([*target_keywords, *target_skills], MAX_SCORING_TARGETS)

    matched, missing, matched_weight, total_weight = partition_targets(scoring_targets, critical_text)
    missing_skills = find_missing_skills(target_skills, skills_text, missing)

    if total_weight <= 0:
        total_weight = 1.0

    coverage_score = calculate_coverage_score(matched_weight, total_weight)
    density_score = calculate_keyword_density_score(normalized_resume, matched)
    section_score = calculate_section_quality_score(normalized_resume)
    score = round_half_up(calculate_overall_score(coverage_score, density_score, section_score))

    return ScoreResult(
        score=score,
        matched_keywords=matched[:MAX_REPORTED_KEYWORDS],
        missing_keywords=missing[:MAX_REPORTED_KEYWORDS],
        missing_words=missing[:MAX_REPORTED_KEYWORDS],
        missing_skills=missing_skills[:MAX_REPORTED_SKILLS],
        recommendations=build_recommendations(missing, missing_skills, section_score, density_score),
        meta=ScoreMeta(
            coverage_score=round_half_up(coverage_score),
            density_score=round_half_up(density_score),
            section_score=round_half_up(section_score),
            ai_assisted=targets.source == "ai",
            inferred_profile=targets.inferred_profile or "general",
        ),
    )


async def calculate_ats_score(
    resume_text: str | None,
    resume_data: ResumeData | Mapping[str, Any] | None = None,
    *,
    ai_client: AIClient | None = None,
) -> ScoreResult:
    normalized_resume = normalize_for_match(resume_text)
    if not normalized_resume:
        return empty_score_result()

    data = _coerce_resume_data(resume_data)
    critical_text = build_critical_section_text(data, normalized_resume)
    skills_text = build_skills_text(data, normalized_resume)

    resume_keywords = extract_keyword_terms(normalized_resume, ATS_MAX_KEYWORDS)
    targets = await resolve_targets(normalized_resume, resume_keywords, data, ai_client=ai_client)

    result = score_against_targets(normalized_resume, critical_text, skills_text, targets)
    logger.info(
        "ats_score_calculated score=%s targets=%s matched=%s ai_assisted=%s",
        result.score,
        len(result.matched_keywords) + len(result.missing_keywords),
        len(result.matched_keywords),
        result.meta.ai_assisted,
    )
    return result
