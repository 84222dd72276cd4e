"""Tests for report synthesis and structural validation."""

import json

import pytest

from resume_analyzer.exceptions import (
    IncompleteReportError,
    MalformedReportError,
    RateLimitedError,
    ScoreOutOfRangeError,
)
from resume_analyzer.models.report import AnalysisReport
from resume_analyzer.pipeline.report_synthesizer import (
    REQUIRED_FIELDS,
    ReportSynthesizer,
    validate_report,
)


class TestValidateReport:
    def test_valid_report(self, report_json):
        report = validate_report(report_json)
        assert isinstance(report, AnalysisReport)
        assert report.overall_score == 82
        assert report.competitor_analysis.career_progression.career_paths.requirements == {
            "Platform Engineer": ["Terraform", "Kubernetes"]
        }

    @pytest.mark.parametrize("field", REQUIRED_FIELDS)
    def test_missing_required_field(self, report_json, field):
        del report_json[field]
        with pytest.raises(IncompleteReportError, match=field) as exc_info:
            validate_report(report_json)
        assert exc_info.value.field == field

    def test_null_field_counts_as_missing(self, report_json):
        report_json["impact"] = None
        with pytest.raises(IncompleteReportError, match="impact"):
            validate_report(report_json)

    @pytest.mark.parametrize("score", [59, 101, -1, 1000])
    def test_score_out_of_range(self, report_json, score):
        report_json["overallScore"] = score
        with pytest.raises(ScoreOutOfRangeError):
            validate_report(report_json)

    @pytest.mark.parametrize("score", [60, 100])
    def test_score_bounds_inclusive(self, report_json, score):
        report_json["overallScore"] = score
        assert validate_report(report_json).overall_score == score

    @pytest.mark.parametrize("score", ["85", True])
    def test_non_numeric_score(self, report_json, score):
        report_json["overallScore"] = score
        with pytest.raises(ScoreOutOfRangeError):
            validate_report(report_json)

    def test_optional_sections_may_be_absent(self, report_json):
        del report_json["rewrites"]
        del report_json["keywords"]
        report_json["competitorAnalysis"] = {"marketPosition": "Average"}
        report = validate_report(report_json)
        assert report.rewrites == []
        assert report.competitor_analysis.industry_benchmarks.average_score is None

    def test_type_mismatch_is_malformed(self, report_json):
        report_json["improvements"] = "Add more numbers"
        with pytest.raises(MalformedReportError):
            validate_report(report_json)

    def test_wire_shape_round_trip(self, report_json):
        wire = validate_report(report_json).to_wire()
        assert wire["overallScore"] == 82
        assert wire["competitorAnalysis"]["industryBenchmarks"]["topPerformersScore"] == 90


class TestReportSynthesizer:
    @pytest.mark.asyncio
    async def test_single_aggregation_call(
        self, llm_response, mock_llm_client, retry_policy, sample_extraction, report_json
    ):
        mock_llm_client.generate.return_value = llm_response(report_json)
        synthesizer = ReportSynthesizer(mock_llm_client, retry_policy)

        report = await synthesizer.synthesize([sample_extraction, sample_extraction], "Engineer")

        assert report.overall_score == 82
        assert mock_llm_client.generate.await_count == 1
        kwargs = mock_llm_client.generate.call_args.kwargs
        assert json.loads(kwargs["prompt"]) == [sample_extraction.model_dump()] * 2
        assert "Engineer position" in kwargs["system"]
        assert "between 60 and 100" in kwargs["system"]

    @pytest.mark.asyncio
    async def test_unparseable_response(
        self, llm_response, mock_llm_client, retry_policy, sample_extraction
    ):
        mock_llm_client.generate.return_value = llm_response("Sorry, no analysis today")
        synthesizer = ReportSynthesizer(mock_llm_client, retry_policy)
        with pytest.raises(MalformedReportError, match="Failed to parse final analysis"):
            await synthesizer.synthesize([sample_extraction], "Engineer")
        assert mock_llm_client.generate.await_count == 1

    @pytest.mark.asyncio
    async def test_invalid_report_rejected(
        self, llm_response, mock_llm_client, retry_policy, sample_extraction, report_json
    ):
        report_json["overallScore"] = 42
        mock_llm_client.generate.return_value = llm_response(report_json)
        synthesizer = ReportSynthesizer(mock_llm_client, retry_policy)
        with pytest.raises(ScoreOutOfRangeError):
            await synthesizer.synthesize([sample_extraction], "Engineer")

    @pytest.mark.asyncio
    async def test_rate_limit_retried(
        self, llm_response, mock_llm_client, retry_policy, sleep_recorder, sample_extraction, report_json
    ):
        mock_llm_client.generate.side_effect = [RateLimitedError(), llm_response(report_json)]
        synthesizer = ReportSynthesizer(mock_llm_client, retry_policy)
        report = await synthesizer.synthesize([sample_extraction], "Engineer")
        assert report.overall_score == 82
        assert sleep_recorder.delays == [1.0]
