"""Pydantic models for the aggregated analysis report.

Field names are snake_case; aliases carry the camelCase keys the model
service emits, so ``model_dump(by_alias=True)`` reproduces the wire shape.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Rewrite(BaseModel):
    section: str = ""
    original: str = ""
    improved: str = ""


class SkillsAssessment(BaseModel):
    matching: list[str] = []
    missing: list[str] = []
    suggested: list[str] = []


class FormattingAssessment(BaseModel):
    issues: list[str] = []
    suggestions: list[str] = []


class ImpactAssessment(BaseModel):
    strengths: list[str] = []
    weaknesses: list[str] = []
    recommendations: list[str] = []


class IndustryBenchmarks(BaseModel):
    average_score: float | None = Field(default=None, alias="averageScore")
    top_performers_score: float | None = Field(default=None, alias="topPerformersScore")
    your_score: float | None = Field(default=None, alias="yourScore")

    model_config = {"populate_by_name": True}


class SalaryRange(BaseModel):
    entry: str = ""
    mid: str = ""
    senior: str = ""


class IndustryAnalysis(BaseModel):
    trends: list[str] = []
    in_demand_skills: list[str] = Field(default=[], alias="inDemandSkills")
    salary_range: SalaryRange = Field(default_factory=SalaryRange, alias="salaryRange")
    top_companies: list[str] = Field(default=[], alias="topCompanies")
    growth_areas: list[str] = Field(default=[], alias="growthAreas")

    model_config = {"populate_by_name": True}


class NextSteps(BaseModel):
    short_term: list[str] = Field(default=[], alias="shortTerm")
    medium_term: list[str] = Field(default=[], alias="mediumTerm")
    long_term: list[str] = Field(default=[], alias="longTerm")

    model_config = {"populate_by_name": True}


class SkillGaps(BaseModel):
    technical: list[str] = []
    soft: list[str] = []
    industry: list[str] = []


class Certifications(BaseModel):
    recommended: list[str] = []
    priority: list[str] = []


class CareerPaths(BaseModel):
    primary: str = ""
    alternatives: list[str] = []
    requirements: dict[str, list[str]] = {}  # path name -> requirements


class CareerProgression(BaseModel):
    current_level: str = Field(default="", alias="currentLevel")
    next_steps: NextSteps = Field(default_factory=NextSteps, alias="nextSteps")
    skill_gaps: SkillGaps = Field(default_factory=SkillGaps, alias="skillGaps")
    certifications: Certifications = Field(default_factory=Certifications)
    career_paths: CareerPaths = Field(default_factory=CareerPaths, alias="careerPaths")

    model_config = {"populate_by_name": True}


class CompetitorAnalysis(BaseModel):
    market_position: str = Field(default="", alias="marketPosition")
    competitive_advantages: list[str] = Field(default=[], alias="competitiveAdvantages")
    competitive_disadvantages: list[str] = Field(default=[], alias="competitiveDisadvantages")
    differentiation_strategies: list[str] = Field(default=[], alias="differentiationStrategies")
    industry_benchmarks: IndustryBenchmarks = Field(
        default_factory=IndustryBenchmarks, alias="industryBenchmarks"
    )
    industry_analysis: IndustryAnalysis = Field(
        default_factory=IndustryAnalysis, alias="industryAnalysis"
    )
    career_progression: CareerProgression = Field(
        default_factory=CareerProgression, alias="careerProgression"
    )

    model_config = {"populate_by_name": True}


class AnalysisReport(BaseModel):
    overall_score: int = Field(alias="overallScore", ge=60, le=100)
    improvements: list[str]
    rewrites: list[Rewrite] = []
    skills: SkillsAssessment
    keywords: list[str] = []
    formatting: FormattingAssessment
    impact: ImpactAssessment
    competitor_analysis: CompetitorAnalysis = Field(alias="competitorAnalysis")

    model_config = {"populate_by_name": True}

    def to_wire(self) -> dict:
        """Return the camelCase dict shape produced by the model service."""
        return self.model_dump(by_alias=True)
