"""Analysis orchestrator - cache lookup, chunk extraction, report synthesis."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from pydantic import ValidationError

from resume_analyzer.cache.result_cache import ResultCache, fingerprint
from resume_analyzer.clients.llm_client import DEFAULT_MODEL, LLMClient
from resume_analyzer.config import AppConfig
from resume_analyzer.exceptions import AnalysisError, MissingCredentialsError
from resume_analyzer.models.extraction import AnalysisRequest
from resume_analyzer.models.report import AnalysisReport
from resume_analyzer.pipeline.chunk_analyzer import CHUNK_SIZE, ChunkAnalyzer
from resume_analyzer.pipeline.report_synthesizer import ReportSynthesizer
from resume_analyzer.pipeline.retry_policy import RetryPolicy

logger = logging.getLogger(__name__)

# Share of the progress bar covered by chunk extraction; synthesis takes the rest.
CHUNK_PHASE_SHARE = 90

ProgressCallback = Callable[[int], None]


class AnalysisOrchestrator:
    """Public entry point for analyzing a resume against a job title.

    Identical requests running at the same time share one analysis task,
    so the model service sees each (document, title) pair at most once
    until the result is cached.
    """

    def __init__(
        self,
        llm: LLMClient,
        cache: ResultCache,
        *,
        model: str = DEFAULT_MODEL,
        retry: RetryPolicy | None = None,
        chunk_size: int = CHUNK_SIZE,
        max_concurrency: int = 1,
        extraction_temperature: float = 0.7,
        extraction_max_tokens: int = 500,
        synthesis_temperature: float = 0.7,
        synthesis_max_tokens: int = 2000,
    ):
        self.llm = llm
        self.cache = cache
        self.retry = retry or RetryPolicy()
        self.chunk_analyzer = ChunkAnalyzer(
            llm,
            self.retry,
            model=model,
            chunk_size=chunk_size,
            temperature=extraction_temperature,
            max_tokens=extraction_max_tokens,
            max_concurrency=max_concurrency,
        )
        self.synthesizer = ReportSynthesizer(
            llm,
            self.retry,
            model=model,
            temperature=synthesis_temperature,
            max_tokens=synthesis_max_tokens,
        )
        self._in_flight: dict[str, asyncio.Task] = {}

    @classmethod
    def from_config(
        cls, llm: LLMClient, cache: ResultCache, config: AppConfig
    ) -> AnalysisOrchestrator:
        return cls(
            llm,
            cache,
            model=config.llm.model,
            retry=RetryPolicy(
                max_retries=config.analysis.max_retries,
                initial_delay_ms=config.analysis.initial_delay_ms,
            ),
            chunk_size=config.analysis.chunk_size,
            max_concurrency=config.analysis.max_concurrency,
            extraction_temperature=config.llm.extraction_temperature,
            extraction_max_tokens=config.llm.extraction_max_tokens,
            synthesis_temperature=config.llm.synthesis_temperature,
            synthesis_max_tokens=config.llm.synthesis_max_tokens,
        )

    async def analyze_resume(
        self,
        document_text: str,
        job_title: str,
        on_progress: ProgressCallback | None = None,
    ) -> AnalysisReport:
        """Analyze a resume, serving from cache when possible.

        Args:
            document_text: Plain text of the resume.
            job_title: Target position.
            on_progress: Optional callback receiving non-decreasing
                percentages, ending at 100 on success.

        Raises:
            AnalysisError: for any failure; the original is ``__cause__``.
        """
        try:
            request = AnalysisRequest(document_text=document_text, job_title=job_title)
        except ValidationError as exc:
            raise AnalysisError("Document text and job title must not be empty", status=400) from exc

        def _notify(percent: int) -> None:
            if on_progress:
                on_progress(percent)

        cached = self.cache.get(request.document_text, request.job_title)
        if cached is not None:
            logger.info("Serving cached analysis for '%s'", request.job_title)
            _notify(100)
            return cached

        key = fingerprint(request.document_text, request.job_title)
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._run(request, _notify))
            self._in_flight[key] = task
            task.add_done_callback(lambda t: self._forget(key, t))
        else:
            logger.debug("Joining in-flight analysis %s", key[:12])

        report = await asyncio.shield(task)
        _notify(100)
        return report

    def analyze_resume_sync(
        self,
        document_text: str,
        job_title: str,
        on_progress: ProgressCallback | None = None,
    ) -> AnalysisReport:
        """Blocking wrapper around analyze_resume()."""
        return asyncio.run(self.analyze_resume(document_text, job_title, on_progress))

    def _forget(self, key: str, task: asyncio.Task) -> None:
        # Mark the failure as retrieved even when every caller was cancelled.
        if not task.cancelled():
            task.exception()
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

    async def _run(self, request: AnalysisRequest, notify: ProgressCallback) -> AnalysisReport:
        highest = 0

        def _chunk_progress(percent: int) -> None:
            nonlocal highest
            scaled = percent * CHUNK_PHASE_SHARE // 100
            if scaled > highest:
                highest = scaled
                notify(scaled)

        try:
            if not self.llm.has_credentials:
                raise MissingCredentialsError()
            notify(0)
            extractions = await self.chunk_analyzer.analyze(
                request.document_text, request.job_title, _chunk_progress
            )
            report = await self.synthesizer.synthesize(extractions, request.job_title)
        except Exception as exc:
            logger.error("Error analyzing resume: %s", exc)
            raise AnalysisError(
                str(exc) or "Failed to analyze resume",
                status=getattr(exc, "status", None),
            ) from exc

        self.cache.set(request.document_text, request.job_title, report)
        return report
