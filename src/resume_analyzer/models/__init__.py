"""Data models for the resume analyzer."""

from resume_analyzer.models.extraction import AnalysisRequest, ChunkExtraction
from resume_analyzer.models.report import (
    AnalysisReport,
    CareerProgression,
    CompetitorAnalysis,
    FormattingAssessment,
    ImpactAssessment,
    IndustryAnalysis,
    IndustryBenchmarks,
    Rewrite,
    SkillsAssessment,
)

__all__ = [
    "AnalysisReport",
    "AnalysisRequest",
    "CareerProgression",
    "ChunkExtraction",
    "CompetitorAnalysis",
    "FormattingAssessment",
    "ImpactAssessment",
    "IndustryAnalysis",
    "IndustryBenchmarks",
    "Rewrite",
    "SkillsAssessment",
]
