"""Chunk Analyzer - extracts skills, achievements, experience and education per chunk."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from pydantic import ValidationError

from resume_analyzer.clients.llm_client import DEFAULT_MODEL, LLMClient
from resume_analyzer.exceptions import MalformedExtractionError
from resume_analyzer.models.extraction import ChunkExtraction
from resume_analyzer.pipeline.retry_policy import RetryPolicy
from resume_analyzer.utils.json_parser import parse_json_object

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1000

SYSTEM_PROMPT = """\
You are a professional resume analyzer. Analyze the following resume section for a {job_title} position. \
Focus on extracting key information, skills, and achievements. Return ONLY a JSON object with the following structure:
{{
  "skills": string[],
  "achievements": string[],
  "experience": string[],
  "education": string[]
}}"""


def split_into_chunks(text: str, size: int = CHUNK_SIZE) -> list[str]:
    """Split text into contiguous segments of at most ``size`` characters."""
    if size < 1:
        raise ValueError(f"chunk size must be positive, got {size}")
    return [text[i : i + size] for i in range(0, len(text), size)]


class ChunkAnalyzer:
    def __init__(
        self,
        llm: LLMClient,
        retry: RetryPolicy,
        *,
        model: str = DEFAULT_MODEL,
        chunk_size: int = CHUNK_SIZE,
        temperature: float = 0.7,
        max_tokens: int = 500,
        max_concurrency: int = 1,
    ):
        self.llm = llm
        self.retry = retry
        self.model = model
        self.chunk_size = chunk_size
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.max_concurrency = max_concurrency

    async def extract(self, chunk: str, job_title: str) -> ChunkExtraction:
        """Run one extraction call for a single chunk."""
        response = await self.retry.execute(
            lambda: self.llm.generate(
                prompt=chunk,
                system=SYSTEM_PROMPT.format(job_title=job_title),
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        )
        try:
            data = parse_json_object(response.text)
            return ChunkExtraction(**data)
        except (ValueError, TypeError, ValidationError) as exc:
            logger.error("Error parsing chunk result: %s", exc)
            raise MalformedExtractionError("Failed to parse chunk analysis") from exc

    async def analyze(
        self,
        document_text: str,
        job_title: str,
        on_progress: Callable[[int], None] | None = None,
    ) -> list[ChunkExtraction]:
        """Extract every chunk of the document, in document order.

        Progress is ``round(100 * completed / total)`` after each chunk. With
        ``max_concurrency > 1`` chunks run in parallel; progress still follows
        the completed count and results keep document order.
        """
        chunks = split_into_chunks(document_text, self.chunk_size)
        total = len(chunks)
        logger.debug("Analyzing %d chunk(s) for '%s'", total, job_title)
        completed = 0
        failed = False

        def _report() -> None:
            nonlocal completed
            if failed:
                return
            completed += 1
            if on_progress:
                on_progress(round(100 * completed / total))

        if self.max_concurrency <= 1:
            results = []
            for chunk in chunks:
                results.append(await self.extract(chunk, job_title))
                _report()
            return results

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _bounded(chunk: str) -> ChunkExtraction:
            nonlocal failed
            try:
                async with semaphore:
                    result = await self.extract(chunk, job_title)
            except BaseException:
                failed = True
                raise
            _report()
            return result

        tasks = [asyncio.ensure_future(_bounded(c)) for c in chunks]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            failed = True
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
