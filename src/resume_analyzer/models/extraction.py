"""Pydantic models for per-chunk extraction and the analysis request."""

from __future__ import annotations

from pydantic import BaseModel, Field


class AnalysisRequest(BaseModel):
    document_text: str = Field(min_length=1)
    job_title: str = Field(min_length=1)

    model_config = {"frozen": True}


class ChunkExtraction(BaseModel):
    skills: list[str] = []
    achievements: list[str] = []
    experience: list[str] = []
    education: list[str] = []
