"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

API_KEY_ENV = "ANTHROPIC_API_KEY"


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-sonnet-4-5-20250929"
    timeout: int = 60
    extraction_temperature: float = 0.7
    extraction_max_tokens: int = 500
    synthesis_temperature: float = 0.7
    synthesis_max_tokens: int = 2000


@dataclass(frozen=True)
class AnalysisConfig:
    chunk_size: int = 1000
    max_retries: int = 3
    initial_delay_ms: int = 1000
    max_concurrency: int = 1


@dataclass(frozen=True)
class CacheConfig:
    ttl_hours: int = 24

    @property
    def ttl_seconds(self) -> float:
        return self.ttl_hours * 3600.0


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)


def _check_range(name: str, value: float, low: float | None = None, high: float | None = None) -> None:
    if (low is not None and value < low) or (high is not None and value > high):
        bounds = f"[{low if low is not None else '-inf'}, {high if high is not None else 'inf'}]"
        raise ValueError(f"{name} must be within {bounds}, got {value}")


def validate_config(config: AppConfig) -> AppConfig:
    """Reject out-of-range settings. Returns the config unchanged."""
    _check_range("timeout", config.llm.timeout, 1)
    _check_range("extraction_temperature", config.llm.extraction_temperature, 0, 1)
    _check_range("synthesis_temperature", config.llm.synthesis_temperature, 0, 1)
    _check_range("extraction_max_tokens", config.llm.extraction_max_tokens, 1)
    _check_range("synthesis_max_tokens", config.llm.synthesis_max_tokens, 1)
    _check_range("chunk_size", config.analysis.chunk_size, 1)
    _check_range("max_retries", config.analysis.max_retries, 0, 10)
    _check_range("initial_delay_ms", config.analysis.initial_delay_ms, 0)
    _check_range("max_concurrency", config.analysis.max_concurrency, 1)
    _check_range("ttl_hours", config.cache.ttl_hours, 1, 8760)
    return config


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        candidate = Path.cwd() / "config.yaml"
        if candidate.exists():
            path = candidate

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    config = AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        analysis=AnalysisConfig(**raw.get("analysis", {})),
        cache=CacheConfig(**raw.get("cache", {})),
    )
    return validate_config(config)
