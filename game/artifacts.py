"""Export a finished game: report.json, report.pdf, history/summary tables."""

import json
import os
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import pandas as pd

from game.report import GameReport
from game.schemas import HistoryEntry


def report_to_dict(report: GameReport) -> dict:
    d = asdict(report)
    d["hazard"] = report.hazard.value
    d["difficulty"] = report.difficulty.value
    return d


def report_to_dataframe(report: GameReport) -> pd.DataFrame:
    """One row per phase plus the final score, for charts and CSV download."""
    rows = [
        {"component": "preparedness", "score": report.preparedness_score, "weight": 0.30},
        {"component": "response", "score": report.response_score, "weight": 0.40},
        {"component": "recovery", "score": report.recovery_score, "weight": 0.30},
        {"component": "final", "score": report.final_score, "weight": 1.0},
    ]
    df = pd.DataFrame(rows)
    df["hazard"] = report.hazard.value
    df["difficulty"] = report.difficulty.value
    df["grade"] = report.grade.letter
    return df


def history_to_dataframe(history: list[HistoryEntry]) -> pd.DataFrame:
    cols = ["timestamp", "hazard", "difficulty", "final_score"]
    if not history:
        return pd.DataFrame(columns=cols)
    return pd.DataFrame([h.model_dump(mode="json") for h in history], columns=cols)


def write_report_json(report: GameReport, out_dir: str, name: str = "report.json") -> str:
    Path(out_dir).mkdir(parents=True, exist_ok=True)
    path = os.path.join(out_dir, name)
    with open(path, "w") as f:
        json.dump(report_to_dict(report), f, indent=2)
    return path


def write_report_pdf(report: GameReport, out_dir: str, name: Optional[str] = None) -> str:
    """Render the after-action report with reportlab platypus. Returns the PDF path."""
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import letter
    from reportlab.lib.styles import getSampleStyleSheet
    from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

    Path(out_dir).mkdir(parents=True, exist_ok=True)
    pdf_path = os.path.join(out_dir, name or f"report_{report.hazard.value}_{report.difficulty.value}.pdf")
    doc = SimpleDocTemplate(pdf_path, pagesize=letter)
    styles = getSampleStyleSheet()
    story = [Paragraph("Barangay DRRM Simulation: After-Action Report", styles["Title"]), Spacer(1, 12)]
    story.append(Paragraph(f"Hazard: {report.hazard.value} | Difficulty: {report.difficulty.value}", styles["Normal"]))
    story.append(Paragraph(
        f"Final score: {report.final_score} | Grade: {report.grade.letter} ({report.grade.label})", styles["Normal"]
    ))
    story.append(Spacer(1, 12))

    data = [
        ["Phase", "Score"],
        ["Preparedness (30%)", str(report.preparedness_score)],
        ["Response (40%)", str(report.response_score)],
        ["Recovery (30%)", str(report.recovery_score)],
    ]
    t = Table(data)
    t.setStyle(TableStyle([("BACKGROUND", (0, 0), (-1, 0), colors.grey), ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke)]))
    story.append(t)
    story.append(Spacer(1, 12))

    story.append(Paragraph("What went well", styles["Heading2"]))
    for f in report.correct_decisions:
        story.append(Paragraph(f"• {f.text}", styles["Normal"]))
    story.append(Paragraph("Areas to improve", styles["Heading2"]))
    for f in report.mistakes:
        story.append(Paragraph(f"• {f.text}", styles["Normal"]))
        if f.improvement:
            story.append(Paragraph(f"  {f.improvement}", styles["Italic"]))

    story.append(Paragraph("RA 10121 compliance", styles["Heading2"]))
    rows = [["Requirement", "Met", "Detail"]]
    rows += [[c.requirement, "yes" if c.met else "no", c.detail] for c in report.compliance]
    ct = Table(rows)
    ct.setStyle(TableStyle([("BACKGROUND", (0, 0), (-1, 0), colors.grey), ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke)]))
    story.append(ct)

    if report.lesson is not None:
        story.append(Spacer(1, 12))
        story.append(Paragraph("Lesson", styles["Heading2"]))
        story.append(Paragraph(report.lesson.real_world, styles["Normal"]))
        story.append(Paragraph(report.lesson.lesson, styles["Normal"]))
        story.append(Paragraph(f"Key takeaway: {report.lesson.key_takeaway}", styles["Normal"]))
    doc.build(story)
    return pdf_path
