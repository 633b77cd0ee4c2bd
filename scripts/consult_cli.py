#!/usr/bin/env python3
"""
Medicare Healthcare Assistant: terminal front-end.

Commands:
  quit / exit        end the session
  stats              show session statistics
  save <REPORT_ID>   write that report to REPORTS_DIR (default: latest report)
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Tuple

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from rich.console import Console
from rich.panel import Panel

from src.consultation.formatter import format_message, to_rich_markup
from src.consultation.models import BotEntry
from src.consultation.report import DirectorySaver, ReportExporter
from src.consultation.service import ConversationController
from utils.exceptions import AppError
from utils.logger import get_logger
from utils.settings import load_settings

log = get_logger(__name__)
console = Console()

EXIT_COMMANDS = ("quit", "exit")


def print_header() -> None:
    console.rule("[bold green]Medicare Healthcare Assistant")
    console.print("👋 Hello! I am your healthcare assistant. How can I help you today?")
    console.print("[dim]Commands: quit | stats | save <REPORT_ID>  (Ctrl+C cancels a pending request)[/dim]\n")


def render_entry(entry: BotEntry) -> None:
    body = (
        f"[dim]Timestamp[/dim]\n{entry.display_timestamp}\n\n"
        f"[dim]Medical Response[/dim]\n{to_rich_markup(format_message(entry.response))}"
    )
    console.print(Panel(
        body,
        title="Medical Consultation Report",
        subtitle=f"ID: {entry.report_id}",
        border_style="green",
    ))


def parse_command(line: str) -> Optional[Tuple[str, str]]:
    """
    Recognise a command only when it is the whole input, so questions such as
    "Quit smoking: what helps?" still go to the model.

    Returns:
        (command, argument) or None for an ordinary question.
    """
    words = line.split()
    if not words:
        return None
    cmd = words[0].lower()
    if len(words) == 1 and cmd in EXIT_COMMANDS + ("stats", "save"):
        return cmd, ""
    if len(words) == 2 and cmd == "save" and words[1].isalnum():
        return cmd, words[1]
    return None


def handle_command(cmd: str, arg: str, controller: ConversationController, exporter: ReportExporter) -> bool:
    """
    Commands are handled here, never sent to the model.

    Returns:
        True when the session should end.
    """
    if cmd in EXIT_COMMANDS:
        console.print("\n👋 Goodbye!\n")
        return True

    if cmd == "stats":
        questions = sum(1 for e in controller.entries if e.kind == "user")
        console.print(f"\n📊 Questions: {questions}   Reports: {len(controller.bot_entries())}\n")
        return False

    if cmd == "save":
        reports = controller.bot_entries()
        entry = controller.find_report(arg) if arg else (reports[-1] if reports else None)
        if entry is None:
            console.print("[yellow]No such report.[/yellow]")
            return False
        try:
            report = exporter.export(entry)
        except OSError as e:
            log.error(f"Could not save report: {e}", exc_info=True)
            console.print(f"[red]Could not save report: {e}[/red]")
            return False
        console.print(f"💾 Saved {report.filename}")
    return False


def main() -> None:
    settings = load_settings()
    try:
        controller = ConversationController(settings=settings)
    except AppError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    exporter = ReportExporter(DirectorySaver(settings.reports_dir))

    print_header()
    while True:
        try:
            user_input = console.input("[bold]You:[/bold] ")
        except (KeyboardInterrupt, EOFError):
            console.print("\n\n👋 Goodbye!\n")
            break

        stripped = user_input.strip()
        if not stripped:
            continue
        command = parse_command(stripped)
        if command is not None:
            if handle_command(*command, controller, exporter):
                break
            continue

        try:
            with console.status("Sending..."):
                entry = controller.submit(user_input)
        except KeyboardInterrupt:
            console.print(f"\n[yellow]{controller.error}[/yellow]\n")
            continue

        if entry is not None:
            render_entry(entry)
        elif controller.error:
            console.print(f"[red]{controller.error}[/red]\n")


if __name__ == "__main__":
    main()
