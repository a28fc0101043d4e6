from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _clean_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    return value if isinstance(value, str) else None


class _ResumeModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class PersonalDetails(_ResumeModel):
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    title: str | None = None
    summary: str | None = None
    linkedin: str | None = None
    website: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _text_or_none(cls, value: Any) -> str | None:
        return _clean_text(value)


class ExperienceItem(_ResumeModel):
    company: str | None = None
    role: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    description: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _text_or_none(cls, value: Any) -> str | None:
        return _clean_text(value)


class ProjectItem(_ResumeModel):
    name: str | None = None
    tech_stack: str | None = None
    link: str | None = None
    description: str | None = None

    @field_validator("tech_stack", mode="before")
    @classmethod
    def _join_tech_stack(cls, value: Any) -> str | None:
        if isinstance(value, list):
            return ", ".join(item for item in (_clean_text(entry) for entry in value) if item) or None
        return _clean_text(value)

    @field_validator("name", "link", "description", mode="before")
    @classmethod
    def _text_or_none(cls, value: Any) -> str | None:
        return _clean_text(value)


class EducationItem(_ResumeModel):
    institution: str | None = None
    degree: str | None = None
    start_year: str | None = None
    end_year: str | None = None
    description: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _text_or_none(cls, value: Any) -> str | None:
        return _clean_text(value)


class ResumeData(_ResumeModel):
    """Structured resume as stored by the editor.

    Partially filled resumes are normal: null sections fall back to their
    empty default, and null or non-text list entries are skipped instead of
    rejecting the whole document.
    """

    personal_details: PersonalDetails = Field(default_factory=PersonalDetails)
    work_experience: list[ExperienceItem] = Field(default_factory=list)
    projects: list[ProjectItem] = Field(default_factory=list)
    internships: list[ExperienceItem] = Field(default_factory=list)
    education: list[EducationItem] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    achievements: list[str] = Field(default_factory=list)
    hobbies: list[str] = Field(default_factory=list)

    @field_validator("personal_details", mode="before")
    @classmethod
    def _details_or_default(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("work_experience", "projects", "internships", "education", mode="before")
    @classmethod
    def _drop_empty_entries(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        return [item for item in value if isinstance(item, (dict, BaseModel))]

    @field_validator("skills", "certifications", "achievements", "hobbies", mode="before")
    @classmethod
    def _drop_empty_terms(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        cleaned = (_clean_text(item) for item in value)
        return [item for item in cleaned if item and item.strip()]
