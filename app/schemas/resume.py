from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

TipType = Literal["good", "improve"]
Trend = Literal["up", "down", "stable"]
JobType = Literal["full-time", "part-time", "contract", "internship"]

CATEGORY_KEYS: tuple[str, ...] = ("ATS", "toneAndStyle", "content", "structure", "skills")


class CamelModel(BaseModel):
    """Stored and served JSON keeps the camelCase keys written by the dashboard."""

    model_config = ConfigDict(populate_by_name=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class ATSTip(CamelModel):
    type: TipType
    tip: str


class Tip(CamelModel):
    type: TipType
    tip: str
    explanation: str


class ATSCategory(CamelModel):
    score: int = Field(ge=0, le=100)
    tips: list[ATSTip] = Field(default_factory=list, max_length=4)


class FeedbackCategory(CamelModel):
    score: int = Field(ge=0, le=100)
    tips: list[Tip] = Field(default_factory=list, max_length=4)


class Feedback(CamelModel):
    overall_score: int = Field(alias="overallScore", ge=0, le=100)
    ats: ATSCategory = Field(alias="ATS")
    tone_and_style: FeedbackCategory = Field(alias="toneAndStyle")
    content: FeedbackCategory
    structure: FeedbackCategory
    skills: FeedbackCategory

    def category(self, key: str) -> ATSCategory | FeedbackCategory:
        return {
            "ATS": self.ats,
            "toneAndStyle": self.tone_and_style,
            "content": self.content,
            "structure": self.structure,
            "skills": self.skills,
        }[key]


class Resume(CamelModel):
    id: str
    company_name: str | None = Field(default=None, alias="companyName")
    job_title: str | None = Field(default=None, alias="jobTitle")
    job_description: str | None = Field(default=None, alias="jobDescription")
    image_path: str = Field(default="", alias="imagePath")
    resume_path: str = Field(default="", alias="resumePath")
    feedback: Feedback | None = None
    uploaded_at: datetime | None = Field(default=None, alias="uploadedAt")


class JobPosting(CamelModel):
    id: str
    title: str
    company: str
    description: str
    requirements: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    location: str | None = None
    type: JobType | None = None
    experience: str | None = None
    salary: str | None = None
    posted: datetime
    url: str | None = None


class JobMatchScore(CamelModel):
    overall: int = Field(ge=0, le=100)
    skills_match: int = Field(alias="skillsMatch", ge=0, le=100)
    experience_match: int = Field(alias="experienceMatch", ge=0, le=100)
    keyword_match: int = Field(alias="keywordMatch", ge=0, le=100)
    missing_skills: list[str] = Field(default_factory=list, alias="missingSkills")
    matching_skills: list[str] = Field(default_factory=list, alias="matchingSkills")
    recommendations: list[str] = Field(default_factory=list)


class JobMatch(CamelModel):
    job_id: str = Field(alias="jobId")
    resume_id: str = Field(alias="resumeId")
    score: JobMatchScore
    analyzed_at: datetime = Field(alias="analyzedAt")


class CategoryScores(CamelModel):
    ats: int = Field(default=0, alias="ATS")
    tone_and_style: int = Field(default=0, alias="toneAndStyle")
    content: int = 0
    structure: int = 0
    skills: int = 0

    def get(self, key: str) -> int:
        return {
            "ATS": self.ats,
            "toneAndStyle": self.tone_and_style,
            "content": self.content,
            "structure": self.structure,
            "skills": self.skills,
        }[key]


class RecentActivity(CamelModel):
    matches_last_7_days: int = Field(default=0, alias="matchesLast7Days")
    matches_last_30_days: int = Field(default=0, alias="matchesLast30Days")
    last_analyzed: datetime | None = Field(default=None, alias="lastAnalyzed")


class ResumeAnalytics(CamelModel):
    resume_id: str = Field(alias="resumeId")
    uploaded_at: datetime = Field(alias="uploadedAt")
    total_job_matches: int = Field(default=0, alias="totalJobMatches")
    average_match_score: int = Field(default=0, alias="averageMatchScore")
    best_match_score: int = Field(default=0, alias="bestMatchScore")
    improvement_trend: Trend = Field(default="stable", alias="improvementTrend")
    category_scores: CategoryScores = Field(default_factory=CategoryScores, alias="categoryScores")
    recent_activity: RecentActivity = Field(default_factory=RecentActivity, alias="recentActivity")


class CategoryTrend(CamelModel):
    category: str
    trend: Trend
    change: int


class ComparisonInsights(CamelModel):
    best_performer: str = Field(default="", alias="bestPerformer")
    most_improved: str = Field(default="", alias="mostImproved")
    recommendations: list[str] = Field(default_factory=list)
    trends: list[CategoryTrend] = Field(default_factory=list)


class ComparisonData(CamelModel):
    resumes: list[Resume] = Field(default_factory=list)
    analytics: list[ResumeAnalytics] = Field(default_factory=list)
    insights: ComparisonInsights = Field(default_factory=ComparisonInsights)


class ScoreChange(CamelModel):
    change: int | float
    percentage: int


class JobStats(CamelModel):
    total_matches: int = Field(default=0, alias="totalMatches")
    average_score: int = Field(default=0, alias="averageScore")
    top_match: int = Field(default=0, alias="topMatch")
    recent_matches: int = Field(default=0, alias="recentMatches")


class AnalyticsCard(CamelModel):
    resume_id: str = Field(alias="resumeId")
    improvement_trend: Trend = Field(alias="improvementTrend")
    trend_icon: str = Field(alias="trendIcon")
    trend_color: str = Field(alias="trendColor")
    match_label: str | None = Field(default=None, alias="matchLabel")
    uploaded_ago: str = Field(alias="uploadedAgo")
    last_analyzed_ago: str | None = Field(default=None, alias="lastAnalyzedAgo")
