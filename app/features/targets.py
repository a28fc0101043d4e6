"""Target resolution: which keywords and skills a resume is expected to contain.

Targets come from an AI model when a client is injected, and from the resume
itself otherwise. Every AI failure mode (no client, transport error, timeout,
unparsable output, empty keyword list) ends on the resume-derived path, so
resolution always produces a ``TargetSet``.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Literal

from app.ai.types import AIClient, ChatMessage
from app.core.config.vocabulary import load_vocabulary
from app.normalize.text import normalize_for_match
from app.schemas.resume import ResumeData

logger = logging.getLogger(__name__)

TargetSource = Literal["ai", "resume"]

MAX_TARGET_KEYWORDS = 40
MAX_TARGET_SKILLS = 25
MAX_DERIVED_SKILLS = 20
MAX_DECLARED_SKILLS = 30
PROMPT_RESUME_CHARS = 10_000
PROMPT_KEYWORD_COUNT = 30
PROMPT_KEYWORD_CHARS = 2_000
AI_TEMPERATURE = 0.3
AI_MAX_TOKENS = 1200

_CODE_FENCE_JSON_RE = re.compile(r"```json", re.IGNORECASE)


@dataclass(slots=True)
class TargetSet:
    source: TargetSource
    inferred_profile: str
    target_keywords: list[str] = field(default_factory=list)
    target_skills: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class Unparsable:
    reason: str


def dedupe_keywords(values: Iterable[Any], max_items: int = 45) -> list[str]:
    seen: dict[str, None] = {}
    for value in values:
        normalized = normalize_for_match(value)
        if not normalized:
            continue
        seen.setdefault(normalized, None)
        if len(seen) >= max_items:
            break
    return list(seen)


def normalize_skill_list(skills: Iterable[Any], max_items: int = MAX_TARGET_SKILLS) -> list[str]:
    return dedupe_keywords(skills, max_items)


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def declared_skills(resume_data: ResumeData | None) -> list[str]:
    if resume_data is None:
        return []
    return normalize_skill_list(resume_data.skills, MAX_DECLARED_SKILLS)


def build_resume_driven_targets(resume_keywords: list[str], resume_data: ResumeData | None = None) -> TargetSet:
    technical = load_vocabulary().technical_skills
    technical_keywords = normalize_skill_list(
        [keyword for keyword in resume_keywords if normalize_for_match(keyword) in technical],
        MAX_DECLARED_SKILLS,
    )

    target_skills = normalize_skill_list(declared_skills(resume_data) + technical_keywords, MAX_TARGET_SKILLS)
    target_keywords = dedupe_keywords([*resume_keywords, *target_skills], MAX_TARGET_KEYWORDS)
    if not target_keywords:
        target_keywords = dedupe_keywords(resume_keywords[:PROMPT_KEYWORD_COUNT], PROMPT_KEYWORD_COUNT)

    return TargetSet(
        source="resume",
        inferred_profile="resume-derived",
        target_keywords=target_keywords,
        target_skills=target_skills,
    )


def _load_json_object(cleaned: str) -> Any:
    # Oversized integers raise a plain ValueError and deep nesting a RecursionError.
    try:
        return json.loads(cleaned)
    except (ValueError, RecursionError):
        pass

    first_brace = cleaned.find("{")
    last_brace = cleaned.rfind("}")
    if first_brace == -1 or last_brace == -1 or first_brace >= last_brace:
        return None
    try:
        return json.loads(cleaned[first_brace : last_brace + 1])
    except (ValueError, RecursionError):
        return None


def parse_ai_targets(value: Any) -> TargetSet | Unparsable:
    cleaned = _CODE_FENCE_JSON_RE.sub("", str(value or "")).replace("```", "").strip()
    if not cleaned:
        return Unparsable("empty response")

    parsed = _load_json_object(cleaned)
    if not isinstance(parsed, dict):
        return Unparsable("response is not a JSON object")

    target_keywords = dedupe_keywords(_as_list(parsed.get("targetKeywords")), MAX_TARGET_KEYWORDS)
    if not target_keywords:
        return Unparsable("no targetKeywords")

    target_skills = normalize_skill_list(_as_list(parsed.get("targetSkills")), MAX_TARGET_SKILLS)
    if not target_skills:
        technical = load_vocabulary().technical_skills
        target_skills = normalize_skill_list(
            [keyword for keyword in target_keywords if keyword in technical],
            MAX_DERIVED_SKILLS,
        )

    inferred_profile = normalize_for_match(parsed.get("inferredProfile") or parsed.get("role") or "") or "general"
    return TargetSet(
        source="ai",
        inferred_profile=inferred_profile,
        target_keywords=target_keywords,
        target_skills=target_skills,
    )


def build_resume_only_prompt(resume_text: str, resume_keywords: list[str]) -> str:
    top_keywords = json.dumps(resume_keywords[:PROMPT_KEYWORD_COUNT])[:PROMPT_KEYWORD_CHARS]
    return f"""You are an ATS optimization expert.
Analyze the resume and output keywords/skills that should naturally appear in summary, work experience, projects, and internships.
Return ONLY valid JSON:
{{
  "inferredProfile": "string",
  "targetKeywords": ["keyword1", "keyword2"],
  "targetSkills": ["skill1", "skill2"]
}}
Rules:
1) Use lowercase concise terms.
2) Do not include markdown or explanations.
3) targetKeywords must represent strong ATS words expected in summary/experience/projects/internships.
4) targetSkills must represent expected skills for this profile.

Resume text:
{resume_text[:PROMPT_RESUME_CHARS]}

Top extracted resume keywords:
{top_keywords}"""


async def resolve_targets(
    normalized_resume: str,
    resume_keywords: list[str],
    resume_data: ResumeData | None = None,
    *,
    ai_client: AIClient | None = None,
) -> TargetSet:
    if ai_client is None:
        return build_resume_driven_targets(resume_keywords, resume_data)

    prompt = build_resume_only_prompt(normalized_resume, resume_keywords)
    try:
        response_text = await ai_client.complete(
            [ChatMessage(role="user", content=prompt)],
            json_mode=True,
            temperature=AI_TEMPERATURE,
            max_tokens=AI_MAX_TOKENS,
        )
    except Exception as exc:  # noqa: BLE001 - resume-derived fallback is expected
        logger.warning("ats_ai_targets_failed prompt_len=%s: %s", len(prompt), exc)
        return build_resume_driven_targets(resume_keywords, resume_data)

    result = parse_ai_targets(response_text)
    if isinstance(result, Unparsable):
        logger.warning("ats_ai_targets_unparsable reason=%s response_len=%s", result.reason, len(response_text or ""))
        return build_resume_driven_targets(resume_keywords, resume_data)
    return result
