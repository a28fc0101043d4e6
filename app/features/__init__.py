from .keyword_extract import KeywordCandidate, build_ngrams, extract_keyword_terms, extract_keywords_from_text
from .score_calculator import (
    calculate_coverage_score,
    calculate_keyword_density_score,
    calculate_overall_score,
    calculate_section_quality_score,
    clamp,
)
from .targets import (
    TargetSet,
    Unparsable,
    build_resume_driven_targets,
    parse_ai_targets,
    resolve_targets,
)

__all__ = [
    "KeywordCandidate",
    "build_ngrams",
    "extract_keyword_terms",
    "extract_keywords_from_text",
    "clamp",
    "calculate_coverage_score",
    "calculate_keyword_density_score",
    "calculate_section_quality_score",
    "calculate_overall_score",
    "TargetSet",
    "Unparsable",
    "build_resume_driven_targets",
    "parse_ai_targets",
    "resolve_targets",
]
