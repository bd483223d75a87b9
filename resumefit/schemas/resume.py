from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

SkillCategory = Literal["technical", "soft"]
SectionName = Literal["summary", "skills", "experience", "education", "projects", "contact", "other"]
CandidateArchetype = Literal["coop", "fulltime", "career_changer"]


def normalize_section_text(value: str | None) -> str | None:
    """Whitespace-only text counts as an absent section."""
    if value is None:
        return None
    return value if value.strip() else None


class EducationEntry(BaseModel):
    degree: str = ""
    institution: str = ""
    dates: str = ""
    gpa: str | None = None

    def as_text(self) -> str:
        parts = [self.degree, self.institution, self.dates]
        text = " ".join(part for part in parts if part)
        if self.gpa:
            text = f"{text} GPA: {self.gpa}"
        return text


class JobEntry(BaseModel):
    company: str = ""
    title: str = ""
    dates: str = ""
    bullet_points: list[str] = Field(default_factory=list)


class Skill(BaseModel):
    name: str
    category: SkillCategory = "technical"


class ParsedResume(BaseModel):
    contact: str | None = None
    summary: str | None = None
    projects: str | None = None
    other: str | None = None
    education: list[EducationEntry] = Field(default_factory=list)
    experience: list[JobEntry] = Field(default_factory=list)
    skills: list[Skill] = Field(default_factory=list)
    raw_text: str | None = None

    def section_text(self, name: str) -> str | None:
        if name in {"summary", "projects", "contact", "other"}:
            return normalize_section_text(getattr(self, name))
        if name == "skills":
            names = [skill.name for skill in self.skills if skill.name.strip()]
            return ", ".join(names) if names else None
        if name == "experience":
            blocks: list[str] = []
            for job in self.experience:
                header = " ".join(part for part in (job.title, job.company, job.dates) if part)
                lines = [header] if header else []
                lines.extend(f"- {bullet}" for bullet in job.bullet_points if bullet.strip())
                if lines:
                    blocks.append("\n".join(lines))
            return normalize_section_text("\n".join(blocks))
        if name == "education":
            entries = [entry.as_text() for entry in self.education]
            return normalize_section_text("\n".join(entry for entry in entries if entry.strip()))
        return None

    def has_section(self, name: str) -> bool:
        return self.section_text(name) is not None

    def all_bullets(self) -> list[str]:
        return [bullet for job in self.experience for bullet in job.bullet_points if bullet.strip()]

    def present_sections(self) -> list[str]:
        order = ("contact", "summary", "skills", "experience", "education", "projects", "other")
        return [name for name in order if self.has_section(name)]
