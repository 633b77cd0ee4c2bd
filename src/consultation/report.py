"""
Plain-text export of one completed exchange ("Medical Consultation Report").
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable

from src.consultation.models import BotEntry
from utils.logger import get_logger

log = get_logger(__name__)

DISCLAIMER = (
    "Disclaimer: This is an AI-generated response for informational purposes only.\n"
    "Please consult with a qualified healthcare professional for medical advice."
)

REPORT_TEMPLATE = """
Medical Consultation Report
--------------------------
ID: {report_id}
Timestamp: {timestamp}

Patient Query:
{query}

Medical Response:
{response}

{disclaimer}
"""

MIME_TYPE = "text/plain"

# Host file-save primitive: receives the target filename and a readable buffer.
Saver = Callable[[str, BinaryIO], None]


@dataclass(frozen=True)
class ReportFile:
    filename: str
    content: bytes
    mime: str = MIME_TYPE


def report_filename(report_id: str) -> str:
    return f"medical-report-{report_id}.txt"


def render_report_text(entry: BotEntry) -> str:
    return REPORT_TEMPLATE.format(
        report_id=entry.report_id,
        timestamp=entry.display_timestamp,
        query=entry.query,
        response=entry.response,
        disclaimer=DISCLAIMER,
    )


def build_report(entry: BotEntry) -> ReportFile:
    return ReportFile(
        filename=report_filename(entry.report_id),
        content=render_report_text(entry).encode("utf-8"),
    )


class DirectorySaver:
    """Saves reports into a local directory (created on first use)."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self.saved: list[Path] = []

    def __call__(self, filename: str, buffer: BinaryIO) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        # Only the basename is honoured so a crafted id cannot escape the directory.
        target = self.directory / Path(filename).name
        target.write_bytes(buffer.read())
        self.saved.append(target)


class ReportExporter:
    def __init__(self, saver: Saver):
        self.saver = saver

    def export(self, entry: BotEntry) -> ReportFile:
        """Hand one report to the saver. The buffer is closed even if saving fails."""
        report = build_report(entry)
        with io.BytesIO(report.content) as buffer:
            self.saver(report.filename, buffer)
        log.info(f"Exported {report.filename} ({len(report.content)} bytes)")
        return report
