"""Structured résumé returned by the rewrite call."""

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from models.responses import clamp_score


class _Lenient(BaseModel):
    # Models add stray keys; keep what we know, drop the rest
    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: object) -> object:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class ContactInfo(_Lenient):
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    github: str = ""


class SkillGroups(_Lenient):
    technical: list[str] = []
    soft: list[str] = []


class ExperienceEntry(_Lenient):
    title: str = ""
    company: str = ""
    location: str = ""
    duration: str = ""
    achievements: list[str] = []


class EducationEntry(_Lenient):
    degree: str = ""
    institution: str = ""
    year: str = ""
    details: str = ""

    @field_validator("year", mode="before")
    @classmethod
    def _year_text(cls, value: object) -> str:
        return "" if value is None else str(value)


class ProjectEntry(_Lenient):
    name: str = ""
    description: str = ""
    technologies: list[str] = []


class ChangeLog(_Lenient):
    added_keywords: list[str] = []
    emphasized_skills: list[str] = []
    reordered_experience: bool = False
    optimized_summary: bool = True


class OptimizedResume(_Lenient):
    contact_info: ContactInfo = ContactInfo()
    summary: str = ""
    skills: SkillGroups = SkillGroups()
    experience: list[ExperienceEntry] = []
    education: list[EducationEntry] = []
    projects: list[ProjectEntry] = []
    certifications: list[str] = []
    changes: ChangeLog = ChangeLog()
    change_notes: list[str] = []
    expected_score: int = 0
    honest_assessment: str = ""

    @field_validator("expected_score", mode="before")
    @classmethod
    def _clamp(cls, value: object) -> int:
        return clamp_score(value)
