"""
Exam Grader CLI Application.

Provides a command-line interface for evaluating stored student
submissions against their exam using LLM-based grading.
"""

import json
from decimal import Decimal
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from exam_grader.config import get_settings
from exam_grader.grading import EvaluationEngine
from exam_grader.logging_config import setup_logging
from exam_grader.models import Evaluation, Verdict
from exam_grader.service import EvaluationService, EvaluationServiceError
from exam_grader.storage import JsonFileStore

# Create Typer app
app = typer.Typer(
    name="exam-grader",
    help="Grade free-text exam answers with a language model",
    add_completion=False,
)

console = Console()

DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-d", help="Root directory of the JSON store"),
]


@app.command()
def evaluate(
    roll_number: Annotated[str, typer.Argument(help="Roll number of the student")],
    exam_id: Annotated[str, typer.Argument(help="Identifier of the exam")],
    data_dir: DataDirOption = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the response as JSON"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """
    Evaluate a student's submission against an exam.

    Each answer is graded by the configured model; answers the model
    cannot grade reliably receive a fallback score and are flagged.
    """
    try:
        settings = get_settings()
    except ValidationError as e:
        console.print(f"[red]Configuration Error:[/red] {e}")
        raise typer.Exit(1)

    setup_logging("DEBUG" if verbose else settings.log_level)

    store = JsonFileStore(data_dir or settings.data_directory)
    service = EvaluationService(store, store, EvaluationEngine(settings))

    try:
        with console.status("Evaluating answers... (this may take a moment)"):
            response = service.evaluate(roll_number, exam_id)
    except EvaluationServiceError as e:
        if as_json:
            typer.echo(json.dumps(e.to_payload(), indent=2))
        else:
            console.print(f"[red]Error ({e.status_code}):[/red] {e.message}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(response.to_payload(), indent=2))
        return

    for warning in response.warnings:
        console.print(f"[yellow]⚠ {warning}[/yellow]")
    _display_evaluations(response.evaluations)
    _display_verdict(response.total_marks, response.result)


@app.command()
def show(
    roll_number: Annotated[str, typer.Argument(help="Roll number of the student")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Show the stored evaluation of a submission.
    """
    root = data_dir
    if root is None:
        try:
            root = get_settings().data_directory
        except ValidationError as e:
            console.print(f"[red]Configuration Error:[/red] {e}")
            raise typer.Exit(1)

    store = JsonFileStore(root)
    service = EvaluationService(store, store)
    try:
        submission = service.get_submission(roll_number)
    except EvaluationServiceError as e:
        console.print(f"[red]Error ({e.status_code}):[/red] {e.message}")
        if e.cause is not None:
            console.print(f"[dim]{e.cause}[/dim]")
        raise typer.Exit(1)

    console.print(
        Panel(
            f"Roll number: {submission.roll_number}\n"
            f"Exam: {submission.exam_id or '-'}\n"
            f"Answers: {len(submission.answers)}",
            title="Submission",
        )
    )

    if submission.result is None:
        console.print("[dim]Not evaluated yet[/dim]")
        return

    _display_evaluations(submission.evaluated)
    _display_verdict(submission.total_marks, submission.result)


@app.command()
def health() -> None:
    """
    Check if the grading system is operational.

    Verifies configuration and API connectivity.
    """
    try:
        settings = get_settings()
        console.print("[bold]Exam Grader Health Check[/bold]\n")

        # Check settings
        console.print("[dim]Checking configuration...[/dim]")
        console.print(f"  API Base URL: {settings.together_base_url}")
        console.print(f"  Model: {settings.together_model}")
        console.print(f"  Timeout: {settings.grading_timeout_seconds}s")
        console.print(f"  Workers: {settings.grading_workers}")
        console.print(f"  Data Directory: {settings.data_directory}")

        # Check API connectivity
        console.print("\n[dim]Checking API connectivity...[/dim]")
        engine = EvaluationEngine(settings)

        if engine.health_check():
            console.print("[green]✓ API is reachable[/green]")
        else:
            console.print("[red]✗ API is not reachable[/red]")
            raise typer.Exit(1)

        console.print("\n[green]All systems operational[/green]")

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _display_evaluations(evaluations: tuple[Evaluation, ...] | list[Evaluation]) -> None:
    """Display per-question evaluations in a table."""
    table = Table(title="Evaluations")
    table.add_column("Question", style="cyan")
    table.add_column("Marks", justify="right")
    table.add_column("Fallback", justify="center")
    table.add_column("Feedback")

    for evaluation in evaluations:
        table.add_row(
            evaluation.question_number,
            str(evaluation.marks),
            "⚠️" if evaluation.used_fallback else "",
            evaluation.feedback,
        )

    console.print(table)


def _display_verdict(total_marks: Decimal, verdict: Verdict) -> None:
    color = "green" if verdict == Verdict.PASS else "red"
    console.print(
        Panel(
            f"[{color}][bold]{total_marks}[/bold] marks - {verdict.value}[/{color}]",
            title="Result",
        )
    )


if __name__ == "__main__":
    app()
