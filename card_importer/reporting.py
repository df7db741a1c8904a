import csv
import logging
from pathlib import Path
from typing import List

from .models import PhaseReport


def format_phase_report(report: PhaseReport) -> List[str]:
    lines = [f"{report.title}"]
    for directory, count in report.directory_counts.items():
        lines.append(f"{count} files => {directory}")
    if report.skipped:
        lines.append(f"{report.skipped} files already present")
    for failure in report.failures:
        lines.append(f"FAILED {failure.source}: {failure.error}")
    return lines


def print_summary(reports: List[PhaseReport]):
    for report in reports:
        for line in format_phase_report(report):
            print(line)


def write_csv_report(reports: List[PhaseReport], output_csv: Path):
    """
    One row per (phase, directory), plus one row per failed transfer.
    """
    headers = ["Phase", "Directory", "Files", "Failed Source", "Error"]

    with open(output_csv, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(headers)
        for report in reports:
            for directory, count in report.directory_counts.items():
                writer.writerow([report.title, str(directory), count, "", ""])
            for failure in report.failures:
                writer.writerow([report.title, "", "", str(failure.source), failure.error])

    logging.info(f"Report written to {output_csv}")
