"""Interactive CLI application."""
import logging
from datetime import date, timedelta
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.prompt import Prompt, IntPrompt, Confirm

from cfa_tutor.db import init_db, DEFAULT_DB_PATH
from cfa_tutor.seed import seed_all, is_seeded
from cfa_tutor.config import load_config, save_config_value, config_keys
from cfa_tutor.errors import PlannerError
from cfa_tutor.models import StudyPlanGenerationOptions
from cfa_tutor.planner import generate_plan_for_user
from cfa_tutor.plans import (
    save_plan, get_plan, get_plan_items, get_plan_owner, list_plans, set_item_completed,
    group_items, replace_plan_sessions, delete_plan,
)
from cfa_tutor.progress import (
    get_topics, get_topic_scores, get_progress_for_topic, set_progress, reset_progress,
)
from cfa_tutor.dashboard import (
    get_proficiency_label, get_proficiency_color, get_study_stats, get_plan_summary,
    PRIORITY_LABELS,
)
from cfa_tutor.importer import import_progress

USER_ID = 1

console = Console()


def setup_logging(level: int = logging.WARNING) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def show_welcome():
    console.print(Panel(
        "[bold]CFA Level I[/bold]\n[dim]Weak-Area Study Planner[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("topics", "List exam topics"),
        ("progress", "Proficiency by topic"),
        ("record", "Record practice results"),
        ("import", "Import practice history"),
        ("reset", "Clear all practice results"),
        ("generate", "Generate a study plan"),
        ("plans", "List study plans"),
        ("show", "Show a study plan"),
        ("complete", "Mark a session done"),
        ("regenerate", "Rebuild a plan from current progress"),
        ("delete", "Delete a study plan"),
        ("settings", "Planner settings"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def parse_ids(text: str) -> list[int]:
    return [int(part) for part in text.replace(" ", "").split(",") if part]


def ask_date(prompt: str, default: date | None = None, optional: bool = False) -> date | None:
    while True:
        raw = Prompt.ask(prompt, default=default.isoformat() if default else "").strip()
        if not raw and optional:
            return None
        try:
            return date.fromisoformat(raw)
        except ValueError:
            console.print("[red]Use YYYY-MM-DD.[/red]")


def cmd_topics(db_path: str):
    table = Table(title="CFA Level I Topics")
    table.add_column("ID", justify="right")
    table.add_column("Topic", style="cyan")
    table.add_column("Covers", style="dim")
    for t in get_topics(db_path):
        table.add_row(str(t.id), t.name, t.description)
    console.print(table)


def cmd_progress(db_path: str):
    config = load_config(db_path)
    table = Table(title="Proficiency by Topic")
    table.add_column("Topic", style="cyan")
    table.add_column("Correct", justify="right")
    table.add_column("Accuracy", justify="right")
    table.add_column("Status")
    for s in get_topic_scores(db_path, USER_ID):
        color = get_proficiency_color(s["accuracy"], s["attempted"], config)
        label = get_proficiency_label(s["accuracy"], s["attempted"], config)
        table.add_row(
            f"{s['topic_id']}. {s['name']}",
            f"{s['correct']}/{s['attempted']}",
            f"{s['accuracy']}%",
            f"[{color}]{label}[/{color}]",
        )
    console.print(table)

    stats = get_study_stats(db_path, USER_ID)
    console.print(f"\n  Topics practiced: [bold]{stats['topics_practiced']}/{stats['topics_total']}[/bold]  |  "
                  f"Questions: [bold]{stats['questions_attempted']}[/bold]  |  "
                  f"Accuracy: [bold]{stats['accuracy']}%[/bold]  |  "
                  f"Time: [bold]{stats['hours_spent']}h[/bold]")
    if stats["weakest_topic"]:
        console.print(f"\n  [yellow]Recommendation: Focus on {stats['weakest_topic']}[/yellow]")


def cmd_record(db_path: str):
    cmd_topics(db_path)
    topic_ids = [str(t.id) for t in get_topics(db_path)]
    topic_id = IntPrompt.ask("Topic", choices=topic_ids)
    attempted = IntPrompt.ask("Questions attempted")
    correct = IntPrompt.ask("Questions correct")
    minutes = IntPrompt.ask("Minutes spent", default=0)
    existing = get_progress_for_topic(db_path, USER_ID, topic_id)
    if existing:
        attempted += existing.questions_attempted
        correct += existing.questions_correct
        seconds = existing.total_time_spent + minutes * 60
    else:
        seconds = minutes * 60
    record = set_progress(db_path, USER_ID, topic_id, attempted, correct, seconds)
    console.print(f"[green]Saved. Topic accuracy now {record.accuracy}%[/green]")


def cmd_import(db_path: str):
    file_path = Prompt.ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    result = import_progress(db_path, USER_ID, file_path)
    console.print(f"[green]Imported {result['imported']} records from {result['filename']}[/green]")
    if result["skipped"]:
        console.print(f"[yellow]Skipped: {', '.join(result['skipped'])}[/yellow]")


def cmd_reset(db_path: str):
    if Confirm.ask("Clear all recorded practice results?", default=False):
        reset_progress(db_path, USER_ID)
        console.print("[green]Practice history cleared.[/green]")


def check_owner(db_path: str, plan_id: int) -> None:
    if get_plan_owner(db_path, plan_id) != USER_ID:
        raise KeyError(f"Study plan {plan_id} not found")


def ask_options(db_path: str) -> StudyPlanGenerationOptions:
    config = load_config(db_path)
    today = date.today()
    start = ask_date("Start date", today)
    end = ask_date("End date", today + timedelta(days=90))
    exam = ask_date("Exam date (blank for none)", optional=True)
    daily = IntPrompt.ask("Daily study minutes", default=config.default_daily_minutes)
    included = parse_ids(Prompt.ask("Only these topic ids (comma separated, blank for all)", default=""))
    excluded = parse_ids(Prompt.ask("Skip these topic ids (comma separated)", default=""))
    name = Prompt.ask("Plan name", default=f"CFA Level I Study Plan ({start.isoformat()})")
    return StudyPlanGenerationOptions(
        name=name,
        start_date=start,
        end_date=end,
        daily_study_time=daily,
        target_exam_date=exam,
        included_topics=included,
        excluded_topics=excluded,
    )


def show_warnings(plan) -> None:
    for warning in plan.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")


def cmd_generate(db_path: str):
    console.print("\n[bold]New Study Plan[/bold]")
    options = ask_options(db_path)
    plan = generate_plan_for_user(db_path, USER_ID, options)
    plan_id = save_plan(db_path, USER_ID, plan)
    console.print(f"[green]Created plan {plan_id}: {len(plan.sessions)} sessions, "
                  f"{plan.total_minutes} minutes[/green]")
    show_warnings(plan)
    render_plan(db_path, plan_id)


def cmd_plans(db_path: str):
    plans = list_plans(db_path, USER_ID)
    if not plans:
        console.print("[yellow]No study plans yet. Use 'generate' to create one.[/yellow]")
        return
    table = Table(title="Study Plans")
    table.add_column("ID", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Dates")
    table.add_column("Progress", justify="right")
    table.add_column("Focus")
    for p in plans:
        table.add_row(
            str(p["id"]), p["name"], f"{p['start_date']} → {p['end_date']}",
            f"{p['progress']}%", ", ".join(p["focus_areas"][:3]) + ("…" if len(p["focus_areas"]) > 3 else ""),
        )
    console.print(table)


def render_plan(db_path: str, plan_id: int, today: date | None = None):
    plan = get_plan(db_path, plan_id)
    summary = get_plan_summary(db_path, plan_id, today)
    focus = "\n".join(
        f"  {a.topic_name} [dim]({a.proficiency}%, {PRIORITY_LABELS[a.priority]} priority)[/dim]"
        for a in plan.focus_areas
    )
    console.print(Panel(
        f"{plan.start_date.isoformat()} to {plan.end_date.isoformat()}, {plan.daily_study_time} min/day\n"
        f"Progress: [bold]{summary['completion']}%[/bold] "
        f"({summary['minutes_done']}/{summary['minutes_total']} minutes)\n"
        f"[red]{summary['overdue']} overdue[/red]  [cyan]{summary['today']} today[/cyan]  "
        f"{summary['upcoming']} upcoming\n\n[bold]Focus areas:[/bold]\n{focus}",
        title=plan.name, border_style="blue",
    ))
    groups = group_items(get_plan_items(db_path, plan_id), today)
    for key, style in (("overdue", "red"), ("today", "cyan"), ("upcoming", "white")):
        items = groups[key]
        if not items:
            continue
        table = Table(title=key.capitalize(), title_style=style)
        table.add_column("Item", justify="right")
        table.add_column("Date")
        table.add_column("Session")
        table.add_column("Minutes", justify="right")
        for item in items[:20]:
            table.add_row(str(item.id), item.scheduled_date.isoformat(), item.title, str(item.duration_minutes))
        if len(items) > 20:
            table.caption = f"{len(items) - 20} more"
        console.print(table)


def cmd_show(db_path: str):
    plan_id = IntPrompt.ask("Plan id")
    check_owner(db_path, plan_id)
    render_plan(db_path, plan_id)


def cmd_complete(db_path: str):
    item_id = IntPrompt.ask("Item id")
    done = Confirm.ask("Mark as completed?", default=True)
    set_item_completed(db_path, item_id, done)
    console.print("[green]Progress updated![/green]")


def cmd_regenerate(db_path: str):
    plan_id = IntPrompt.ask("Plan id")
    check_owner(db_path, plan_id)
    old = get_plan(db_path, plan_id)
    start = max(old.start_date, date.today())
    options = StudyPlanGenerationOptions(
        name=old.name,
        start_date=start,
        end_date=max(old.end_date, start),
        daily_study_time=old.daily_study_time,
        target_exam_date=old.target_exam_date,
        included_topics=old.included_topics,
        excluded_topics=old.excluded_topics,
    )
    plan = generate_plan_for_user(db_path, USER_ID, options)
    replace_plan_sessions(db_path, plan_id, plan)
    console.print(f"[green]Plan {plan_id} rebuilt: {len(plan.sessions)} sessions[/green]")
    show_warnings(plan)


def cmd_delete(db_path: str):
    plan_id = IntPrompt.ask("Plan id")
    check_owner(db_path, plan_id)
    if Confirm.ask(f"Delete plan {plan_id}?", default=False):
        delete_plan(db_path, plan_id)
        console.print("[green]Study plan deleted.[/green]")


def cmd_settings(db_path: str):
    config = load_config(db_path)
    table = Table(title="Planner Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key in config_keys():
        table.add_row(key, str(getattr(config, key)))
    console.print(table)
    key = Prompt.ask("Setting to change (blank to keep)", default="").strip()
    if not key:
        return
    value = Prompt.ask(f"New value for {key}")
    save_config_value(db_path, key, value)
    console.print(f"[green]{key} updated.[/green]")


def main():
    db_path = DEFAULT_DB_PATH
    setup_logging()
    init_db(db_path)
    first_run = not is_seeded(db_path)
    if first_run:
        console.print("[dim]Setting up for first use...[/dim]")
    seed_all(db_path)
    if first_run:
        console.print("[green]Ready![/green]\n")

    show_welcome()

    commands = {
        "topics": cmd_topics,
        "progress": cmd_progress,
        "record": cmd_record,
        "import": cmd_import,
        "reset": cmd_reset,
        "generate": cmd_generate,
        "plans": cmd_plans,
        "show": cmd_show,
        "complete": cmd_complete,
        "regenerate": cmd_regenerate,
        "delete": cmd_delete,
        "settings": cmd_settings,
    }
    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="progress").strip().lower()
        try:
            if choice in ("quit", "exit", "q"):
                console.print("[dim]Good luck on your exam![/dim]")
                break
            elif choice in commands:
                commands[choice](db_path)
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except PlannerError as e:
            console.print(f"[red]Cannot build plan: {e}[/red]")
        except (KeyError, ValueError) as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
