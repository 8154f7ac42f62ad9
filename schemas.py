from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Oracle-produced records
class Recommendation(BaseModel):
    title: str
    description: str
    priority: Literal["High", "Medium", "Low"]
    category: str = "general"

    @field_validator("priority", mode="before")
    @classmethod
    def _normalize_priority(cls, v):
        if isinstance(v, str):
            return v.strip().capitalize()
        return v


class FormattingCheck(BaseModel):
    name: str
    status: Literal["passed", "warning", "failed"]
    message: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class SkillGap(BaseModel):
    category: Literal["Technical Skills", "Soft Skills", "Industry Keywords"]
    percentage: int = Field(ge=0, le=100)
    missing: List[str] = []


# Engine output
class AnalysisResult(BaseModel):
    overall_score: int = Field(ge=0, le=100)
    keyword_match_score: int = Field(ge=0, le=100)
    format_score: int = Field(ge=0, le=100)
    skills_match_score: int = Field(ge=0, le=100)
    found_keywords: List[str] = []
    missing_keywords: List[str] = []
    recommendations: List[Recommendation] = []
    formatting_checks: List[FormattingCheck] = []
    skills_gap: List[SkillGap] = []


# Stored records
class UserIn(BaseModel):
    username: str = Field(min_length=1)


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str


class ResumeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: Optional[str] = None
    filename: str
    original_text: str
    file_size: int
    uploaded_at: datetime


class JobDescriptionIn(BaseModel):
    title: str
    company: Optional[str] = None
    description: str


class JobDescriptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    company: Optional[str] = None
    description: str
    created_at: datetime


class AnalysisOut(AnalysisResult):
    model_config = ConfigDict(from_attributes=True)

    id: str
    resume_id: str
    job_description_id: str
    analyzed_at: datetime


# Analyze endpoint
class AnalyzeRequest(BaseModel):
    resume_id: str
    job_description_id: str


class AnalyzeResponse(BaseModel):
    analysis: AnalysisOut
    result: AnalysisResult
