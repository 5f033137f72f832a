"""Interactive CLI application."""
import json
import logging
from datetime import date, timedelta
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt, IntPrompt
from rich.table import Table

from prep_meter.codec import report_to_dict
from prep_meter.config import (
    DEFAULT_DB_PATH, DEFAULT_RANGE_DAYS, DOUBT_WINDOW_DAYS, RANKING_SIZE, REPORT_TITLE,
    load_report_options,
)
from prep_meter.db import get_record_counts, init_db, load_records, set_setting
from prep_meter.importer import import_file
from prep_meter.models import DateRange
from prep_meter.snapshot import ReportData, build_report
from prep_meter.syllabus import status_counts

console = Console()
logger = logging.getLogger(__name__)

SETTING_KEYS = (REPORT_TITLE, RANKING_SIZE, DOUBT_WINDOW_DAYS, DEFAULT_RANGE_DAYS)


def fmt(value, digits: int = 1, suffix: str = "") -> str:
    if value is None:
        return "[dim]n/a[/dim]"
    if isinstance(value, float):
        return f"{value:.{digits}f}{suffix}"
    return f"{value}{suffix}"


def default_range(days: int, today: date | None = None) -> DateRange:
    end = today or date.today()
    start = end - timedelta(days=max(days, 1) - 1)
    return DateRange(start.isoformat(), end.isoformat())


def show_welcome():
    console.print(Panel(
        "[bold]JEE Prep Meter[/bold]\n[dim]Study progress reports[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("report", "Study report for a date range"),
        ("export", "Save a report as JSON"),
        ("import", "Load a user export (JSON/YAML)"),
        ("syllabus", "Chapter status overview"),
        ("settings", "Report options"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def ask_range(db_path: str) -> DateRange:
    fallback = default_range(load_report_options(db_path).default_range_days)
    start = Prompt.ask("Start date (YYYY-MM-DD)", default=fallback.start)
    end = Prompt.ask("End date (YYYY-MM-DD)", default=fallback.end)
    # raises ValueError on a malformed date; the command loop reports it
    return DateRange(date.fromisoformat(start.strip()).isoformat(), date.fromisoformat(end.strip()).isoformat())


def render_report(report: ReportData) -> None:
    console.print(Panel(f"[bold]{report.date_range}[/bold]", title=report.title, border_style="blue"))

    kpis = Table(title="Overview", show_header=False)
    kpis.add_column("Metric", style="cyan")
    kpis.add_column("Value", justify="right")
    kpis.add_row("Study hours", fmt(report.total_study_hours))
    kpis.add_row("Coaching hours", fmt(report.total_coaching_hours))
    kpis.add_row("Questions solved", fmt(report.total_questions_solved))
    kpis.add_row("Tests taken", fmt(report.tests_taken_count))
    kpis.add_row("Avg mood", fmt(report.avg_mood))
    kpis.add_row("Avg sleep", fmt(report.avg_sleep, suffix="h"))
    kpis.add_row("Avg efficiency", fmt(None if report.avg_efficiency is None else report.avg_efficiency * 100, suffix="%"))
    kpis.add_row("Homework done", fmt(report.homework_completion_rate, suffix="%"))
    console.print(kpis)

    if report.daily_breakdown:
        days = Table(title="Daily Breakdown")
        days.add_column("Date")
        days.add_column("Study", justify="right")
        days.add_column("Coaching", justify="right")
        days.add_column("Breaks", justify="right")
        days.add_column("Efficiency", justify="right")
        days.add_column("Topics")
        for day in report.daily_breakdown:
            efficiency = None if day.efficiency is None else day.efficiency * 100
            days.add_row(
                day.date, fmt(day.study_hours), fmt(day.coaching_hours), fmt(day.break_hours),
                fmt(efficiency, 0, "%"), ", ".join(day.topics_studied),
            )
        console.print(days)

    if report.weakest_chapters:
        chapters = Table(title="Chapters by Test Score")
        chapters.add_column("Weakest", style="red")
        chapters.add_column("Strongest", style="green")
        for weak, strong in zip(report.weakest_chapters, report.strongest_chapters):
            chapters.add_row(
                f"{weak['name']} ({weak['avg_score']:.0f}%)",
                f"{strong['name']} ({strong['avg_score']:.0f}%)",
            )
        console.print(chapters)

    if report.teacher_metrics:
        teachers = Table(title="Teachers")
        teachers.add_column("Teacher", style="cyan")
        teachers.add_column("Classes", justify="right")
        teachers.add_column("Hours", justify="right")
        teachers.add_column("Avg rating", justify="right")
        teachers.add_column("Doubts cleared", justify="right")
        for name, m in report.teacher_metrics.items():
            teachers.add_row(name, str(m.class_count), fmt(m.total_hours), fmt(m.avg_rating), str(m.doubts_cleared))
        console.print(teachers)

    if report.subject_time_distribution:
        parts = [f"{row['name']}: [bold]{row['value']:.1f}h[/bold]" for row in report.subject_time_distribution]
        console.print("\n  Study time  |  " + "  |  ".join(parts))


def cmd_report(db_path: str):
    date_range = ask_range(db_path)
    report = build_report(load_records(db_path), date_range, load_report_options(db_path))
    render_report(report)


def cmd_export(db_path: str):
    date_range = ask_range(db_path)
    report = build_report(load_records(db_path), date_range, load_report_options(db_path))
    target = Prompt.ask("Output file", default=f"report_{date_range.start}_{date_range.end}.json")
    Path(target).write_text(json.dumps(report_to_dict(report), indent=2))
    console.print(f"[green]Report saved to {target}[/green]")


def cmd_import(db_path: str):
    file_path = Prompt.ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    result = import_file(db_path, file_path)
    summary = ", ".join(f"{n} {name}" for name, n in result["counts"].items() if n)
    console.print(f"[green]Imported {result['filename']}: {summary or 'no records'}[/green]")


def cmd_syllabus(db_path: str):
    records = load_records(db_path)
    counts = status_counts(records.subjects)
    if not counts:
        console.print("[yellow]No topics imported yet.[/yellow]")
        return
    table = Table(title="Chapter Status")
    table.add_column("Status", style="cyan")
    table.add_column("Chapters", justify="right")
    for status, n in counts.items():
        table.add_row(status, str(n))
    console.print(table)
    stored = get_record_counts(db_path)
    console.print(f"\n  Daily plans: [bold]{stored.get('dailyPlans', 0)}[/bold]  |  "
                  f"Tests: [bold]{stored.get('tests', 0)}[/bold]  |  "
                  f"Coaching logs: [bold]{stored.get('coachingLogs', 0)}[/bold]")


def cmd_settings(db_path: str):
    options = load_report_options(db_path)
    current = {
        REPORT_TITLE: options.title,
        RANKING_SIZE: options.ranking_size,
        DOUBT_WINDOW_DAYS: options.doubt_window_days,
        DEFAULT_RANGE_DAYS: options.default_range_days,
    }
    for key in SETTING_KEYS:
        console.print(f"  [cyan]{key:<20}[/cyan] {current[key]}")
    key = Prompt.ask("Setting to change", choices=list(SETTING_KEYS) + ["none"], default="none")
    if key == "none":
        return
    if key == REPORT_TITLE:
        value = Prompt.ask("New value", default=str(current[key]))
    else:
        value = str(IntPrompt.ask("New value", default=current[key]))
    set_setting(db_path, key, value)
    console.print(f"[green]{key} set to {value}[/green]")


def main():
    logging.basicConfig(
        level=logging.WARNING, format="%(message)s", handlers=[RichHandler(console=console)],
    )
    db_path = DEFAULT_DB_PATH
    init_db(db_path)

    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="report").strip().lower()
        try:
            if choice == "report":
                cmd_report(db_path)
            elif choice == "export":
                cmd_export(db_path)
            elif choice == "import":
                cmd_import(db_path)
            elif choice == "syllabus":
                cmd_syllabus(db_path)
            elif choice == "settings":
                cmd_settings(db_path)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Good luck on your exam![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.debug("Command %s failed", choice, exc_info=True)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
