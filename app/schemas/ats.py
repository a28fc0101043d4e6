from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.core.config import settings
from app.schemas.resume import ResumeData

AnalysisMode = Literal["resume_only"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AtsScoreRequest(_CamelModel):
    resume_text: str | None = Field(default=None, max_length=settings.max_resume_chars)
    resume_data: ResumeData | None = None

    @field_validator("resume_text")
    @classmethod
    def _strip_resume_text(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped = value.strip()
        if not stripped:
            return None
        if len(stripped) < 20:
            raise ValueError("resumeText must be at least 20 characters long")
        return stripped

    @model_validator(mode="after")
    def _require_resume_source(self) -> "AtsScoreRequest":
        if self.resume_text is None and self.resume_data is None:
            raise ValueError("either resumeText or resumeData is required")
        return self


class KeywordExtractRequest(_CamelModel):
    text: str = Field(min_length=1, max_length=settings.max_resume_chars)
    max_keywords: int = Field(default=40, ge=1, le=120)


class KeywordItem(BaseModel):
    term: str
    score: float


class KeywordExtractResult(BaseModel):
    keywords: list[KeywordItem] = Field(default_factory=list)


class ScoreMeta(_CamelModel):
    coverage_score: int = Field(ge=0, le=100)
    density_score: int = Field(ge=0, le=100)
    section_score: int = Field(ge=0, le=100)
    ai_assisted: bool = False
    inferred_profile: str = "general"


class ScoreResult(_CamelModel):
    score: int = Field(ge=0, le=100)
    matched_keywords: list[str] = Field(default_factory=list, max_length=25)
    missing_keywords: list[str] = Field(default_factory=list, max_length=25)
    missing_words: list[str] = Field(default_factory=list, max_length=25)
    missing_skills: list[str] = Field(default_factory=list, max_length=20)
    recommendations: list[str] = Field(default_factory=list)
    analysis_mode: AnalysisMode = "resume_only"
    job_description_used: Literal[False] = False
    meta: ScoreMeta


class AtsScoreResponse(BaseModel):
    success: bool = True
    message: str
    data: ScoreResult


class KeywordExtractResponse(BaseModel):
    success: bool = True
    message: str
    data: KeywordExtractResult
