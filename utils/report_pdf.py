# utils/report_pdf.py
"""Reports page as a PDF (reportlab)."""

from __future__ import annotations

import io
from datetime import date
from typing import Any, Dict, List, Optional

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.pdfgen import canvas as _rl_canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from models.base import utcnow


# ---------- ReportLab helpers ----------
def _page_number(canv: _rl_canvas.Canvas, doc):
    canv.setFont("Helvetica", 8)
    canv.setFillColor(colors.HexColor("#64748b"))
    canv.drawRightString(doc.pagesize[0]-36, 18, f"Page {canv.getPageNumber()}")


def _table_from_df(df: pd.DataFrame, col_widths=None, header_bg=colors.HexColor("#f1f5f9")):
    data = [list(df.columns)] + df.astype(str).values.tolist()
    tbl = Table(data, colWidths=col_widths, repeatRows=1)
    tbl.setStyle(TableStyle([
        ("BACKGROUND", (0,0), (-1,0), header_bg),
        ("TEXTCOLOR", (0,0), (-1,0), colors.HexColor("#0f172a")),
        ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
        ("FONTSIZE", (0,0), (-1,0), 9),
        ("ALIGN", (0,0), (-1,0), "CENTER"),
        ("GRID", (0,0), (-1,-1), 0.3, colors.HexColor("#cbd5e1")),
        ("FONTSIZE", (0,1), (-1,-1), 8),
        ("VALIGN", (0,0), (-1,-1), "TOP"),
        ("ROWBACKGROUNDS", (0,1), (-1,-1), [colors.white, colors.HexColor("#f8fafc")]),
    ]))
    return tbl


def _counts_df(rows: List[Dict[str, Any]], label: str) -> pd.DataFrame:
    df = pd.DataFrame(rows, columns=["status", "count"])
    df.columns = [label, "Count"]
    return df


def build_report_pdf(report: Dict[str, List[Dict[str, Any]]], finance: Optional[Dict[str, float]] = None,
                     generated_on: Optional[date] = None) -> bytes:
    """Return PDF bytes with project and task counts, plus finance totals when given."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=LETTER, topMargin=36, bottomMargin=36, leftMargin=36, rightMargin=36)

    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(name="H1", fontSize=18, leading=22, spaceAfter=12, textColor=colors.HexColor("#0f172a")))
    styles.add(ParagraphStyle(name="H2", fontSize=14, leading=18, spaceAfter=8, textColor=colors.HexColor("#1f2937")))
    styles.add(ParagraphStyle(name="Muted", fontSize=9, textColor=colors.HexColor("#6b7280")))

    story = []
    story.append(Paragraph("Foundry-PM Report", styles["H1"]))
    story.append(Paragraph(f"Generated {generated_on or utcnow().date()}", styles["Muted"]))
    story.append(Spacer(1, 12))

    story.append(Paragraph("Projects by Status", styles["H2"]))
    story.append(_table_from_df(_counts_df(report["projects"], "Status"), col_widths=[200, 80]))
    story.append(Spacer(1, 12))

    story.append(Paragraph("Tasks by Status", styles["H2"]))
    story.append(_table_from_df(_counts_df(report["tasks"], "Status"), col_widths=[200, 80]))
    story.append(Spacer(1, 12))

    if finance is not None:
        story.append(Paragraph("Finance", styles["H2"]))
        df_fin = pd.DataFrame([[f"{finance['income']:,.2f}", f"{finance['expenses']:,.2f}", f"{finance['profit']:,.2f}"]],
                              columns=["Income", "Expenses", "Profit"])
        story.append(_table_from_df(df_fin, col_widths=[120, 120, 120], header_bg=colors.HexColor("#eef2ff")))

    doc.build(story, onFirstPage=_page_number, onLaterPages=_page_number)
    pdf_bytes = buf.getvalue()
    buf.close()
    return pdf_bytes
