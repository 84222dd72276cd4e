"""Report Synthesizer - aggregates chunk extractions into a scored report."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence

from pydantic import ValidationError

from resume_analyzer.clients.llm_client import DEFAULT_MODEL, LLMClient
from resume_analyzer.exceptions import (
    IncompleteReportError,
    MalformedReportError,
    ScoreOutOfRangeError,
)
from resume_analyzer.models.extraction import ChunkExtraction
from resume_analyzer.models.report import AnalysisReport
from resume_analyzer.pipeline.retry_policy import RetryPolicy
from resume_analyzer.utils.json_parser import parse_json_object

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "overallScore",
    "improvements",
    "skills",
    "formatting",
    "impact",
    "competitorAnalysis",
)
MIN_SCORE = 60
MAX_SCORE = 100

SYSTEM_PROMPT = """\
You are a professional resume analyzer. Based on the analyzed sections, provide a comprehensive analysis \
for a {job_title} position. Return ONLY a JSON object with the following structure. For scoring:
- Scores should be whole numbers between 60 and 100
- Average scores should be between 70-80
- Top performer scores should be between 85-95
- Your score should be based on content quality, skills match, and formatting
Example scores:
- Strong resume: 85-95
- Good resume: 75-84
- Average resume: 65-74
- Needs improvement: 60-64

{{
  "overallScore": number,
  "improvements": string[],
  "rewrites": [{{"section": string, "original": string, "improved": string}}],
  "skills": {{"matching": string[], "missing": string[], "suggested": string[]}},
  "keywords": string[],
  "formatting": {{"issues": string[], "suggestions": string[]}},
  "impact": {{"strengths": string[], "weaknesses": string[], "recommendations": string[]}},
  "competitorAnalysis": {{
    "marketPosition": string,
    "competitiveAdvantages": string[],
    "competitiveDisadvantages": string[],
    "differentiationStrategies": string[],
    "industryBenchmarks": {{"averageScore": number, "topPerformersScore": number, "yourScore": number}},
    "industryAnalysis": {{
      "trends": string[],
      "inDemandSkills": string[],
      "salaryRange": {{"entry": string, "mid": string, "senior": string}},
      "topCompanies": string[],
      "growthAreas": string[]
    }},
    "careerProgression": {{
      "currentLevel": string,
      "nextSteps": {{"shortTerm": string[], "mediumTerm": string[], "longTerm": string[]}},
      "skillGaps": {{"technical": string[], "soft": string[], "industry": string[]}},
      "certifications": {{"recommended": string[], "priority": string[]}},
      "careerPaths": {{
        "primary": string,
        "alternatives": string[],
        "requirements": {{"[path]": string[]}}
      }}
    }}
  }}
}}"""


def validate_report(data: dict) -> AnalysisReport:
    """Check the report's structure and score bounds, then build the model.

    Only shape is checked, never content. A required field that is absent
    or null is missing.
    """
    for field in REQUIRED_FIELDS:
        if data.get(field) is None:
            raise IncompleteReportError(field)

    score = data["overallScore"]
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise ScoreOutOfRangeError(score)
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise ScoreOutOfRangeError(score)

    try:
        return AnalysisReport.model_validate(data)
    except ValidationError as exc:
        raise MalformedReportError(f"Report does not match the expected shape: {exc}") from exc


class ReportSynthesizer:
    def __init__(
        self,
        llm: LLMClient,
        retry: RetryPolicy,
        *,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ):
        self.llm = llm
        self.retry = retry
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def synthesize(
        self, extractions: Sequence[ChunkExtraction], job_title: str
    ) -> AnalysisReport:
        """Issue one aggregation call over all chunk results and validate it."""
        combined = json.dumps([e.model_dump() for e in extractions], ensure_ascii=False)

        response = await self.retry.execute(
            lambda: self.llm.generate(
                prompt=combined,
                system=SYSTEM_PROMPT.format(job_title=job_title),
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        )
        try:
            data = parse_json_object(response.text)
        except ValueError as exc:
            logger.error("Error parsing final analysis: %s", exc)
            raise MalformedReportError("Failed to parse final analysis") from exc

        report = validate_report(data)
        logger.debug("Report validated: overallScore=%d", report.overall_score)
        return report
