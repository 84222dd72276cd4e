"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from resume_analyzer.cache.result_cache import ResultCache
from resume_analyzer.clients.llm_client import LLMClient
from resume_analyzer.config import load_config
from resume_analyzer.exceptions import AnalysisError, ModelServiceError
from resume_analyzer.models.report import AnalysisReport
from resume_analyzer.parsers.resume_parser import extract_text
from resume_analyzer.pipeline.orchestrator import AnalysisOrchestrator

app = typer.Typer(
    name="resume-analyzer",
    help="AI resume analysis against a target job title",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _bullets(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items) or "[dim](none)[/dim]"


def _print_report(report: AnalysisReport, job_title: str) -> None:
    score = report.overall_score
    color = "green" if score >= 85 else "yellow" if score >= 70 else "red"
    benchmarks = report.competitor_analysis.industry_benchmarks
    console.print(
        Panel(
            f"[bold {color}]Overall score: {score}[/bold {color}]"
            + (
                f"\nIndustry average: {benchmarks.average_score} | "
                f"Top performers: {benchmarks.top_performers_score}"
                if benchmarks.average_score is not None
                else ""
            )
            + f"\nMarket position: {report.competitor_analysis.market_position or '-'}",
            title=f"Analysis: {job_title}",
        )
    )
    console.print(Panel(_bullets(report.skills.matching), title="Matching skills", border_style="green"))
    console.print(Panel(_bullets(report.skills.missing), title="Missing skills", border_style="red"))
    console.print(Panel(_bullets(report.improvements), title="Improvements", border_style="blue"))
    if report.keywords:
        console.print(f"[bold]Keywords:[/bold] {', '.join(report.keywords)}")


@app.command()
def analyze(
    resume: Path = typer.Argument(help="Resume file (PDF/TXT/MD)"),
    title: str = typer.Option(..., "--title", "-t", help="Target job title"),
    output: Path = typer.Option(None, "--json", "-o", help="Write the full report as JSON"),
    config_path: Path = typer.Option(None, "--config", help="Path to config.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Analyze a resume for a target job title."""
    _setup_logging(verbose)
    if not resume.exists():
        console.print(f"[red]Resume file not found: {resume}[/red]")
        raise typer.Exit(1)

    try:
        document_text = extract_text(resume)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    try:
        config = load_config(config_path)
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(1)

    if verbose:
        console.print(f"[dim]Resume: {len(document_text)} chars[/dim]")
        console.print(f"[dim]Model: {config.llm.model}[/dim]")

    llm = LLMClient(timeout=config.llm.timeout)
    cache = ResultCache(ttl_seconds=config.cache.ttl_seconds)
    orchestrator = AnalysisOrchestrator.from_config(llm, cache, config)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Analyzing resume...", total=100)

        def on_progress(percent: int) -> None:
            progress.update(task, completed=percent)

        try:
            report = asyncio.run(orchestrator.analyze_resume(document_text, title, on_progress))
        except AnalysisError as e:
            progress.stop()
            status = f" (status {e.status})" if e.status is not None else ""
            console.print(f"[red]Analysis failed{status}: {e.message}[/red]")
            raise typer.Exit(1)

    _print_report(report, title)

    usage = llm.get_token_summary()
    if verbose:
        console.print(
            f"[dim]Tokens: {usage['input']} input, {usage['output']} output, "
            f"{len(usage['calls'])} call(s)[/dim]"
        )

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(
            json.dumps(report.to_wire(), ensure_ascii=False, indent=2), encoding="utf-8"
        )
        console.print(f"[green]Report saved: {output}[/green]")


@app.command("check-key")
def check_key(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Verify that the configured API key works."""
    _setup_logging(verbose)
    try:
        config = load_config()
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(1)
    llm = LLMClient(timeout=config.llm.timeout)
    if not llm.has_credentials:
        console.print("[red]API key not found in environment or .env file[/red]")
        raise typer.Exit(1)

    try:
        reply = asyncio.run(llm.check_credentials(model=config.llm.model))
    except ModelServiceError as e:
        console.print(f"[red]API error: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]API key is working! Response: {reply}[/green]")


if __name__ == "__main__":
    app()
