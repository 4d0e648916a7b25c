"""
Download buttons for the filtered record set and the PDF renderer behind them.
"""

from __future__ import annotations

import io
from html import escape
from typing import Tuple

import streamlit as st
from reportlab.lib import colors
from reportlab.lib.pagesizes import landscape, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import LongTable, Paragraph, SimpleDocTemplate, Spacer, TableStyle

from anomaly_dashboard.config import CSV_FILE_NAME, PDF_FILE_NAME
from anomaly_dashboard.data.export import PdfTable

# Relative widths for Category, Description, Location, Date Reported, Source Link
COLUMN_WEIGHTS = [1.2, 3.5, 1.4, 1.4, 2.5]
PDF_PREPARED_KEY = "anomaly_pdf_prepared_for"


def _column_widths(count: int, available: float) -> list:
    weights = COLUMN_WEIGHTS if count == len(COLUMN_WEIGHTS) else [1.0] * count
    total = sum(weights) or 1.0
    return [available * w / total for w in weights]


def render_pdf(table: PdfTable, title: str = "Anomalies") -> bytes:
    """Render a header/rows table into a landscape PDF document."""
    buf = io.BytesIO()
    pagesize = landscape(letter)
    doc = SimpleDocTemplate(
        buf,
        pagesize=pagesize,
        topMargin=0.5 * inch,
        bottomMargin=0.5 * inch,
        leftMargin=0.5 * inch,
        rightMargin=0.5 * inch,
        title=title,
    )
    styles = getSampleStyleSheet()
    header_style = ParagraphStyle("HeaderCell", parent=styles["Normal"], fontSize=9, fontName="Helvetica-Bold", textColor=colors.white)
    cell_style = ParagraphStyle("BodyCell", parent=styles["Normal"], fontSize=8, leading=10)

    data = [[Paragraph(escape(h, quote=False), header_style) for h in table.headers]]
    data += [[Paragraph(escape(cell, quote=False), cell_style) for cell in row] for row in table.rows]

    story = [Paragraph(escape(title, quote=False), styles["Title"]), Spacer(1, 0.2 * inch)]
    if table.headers:
        grid = LongTable(data, colWidths=_column_widths(len(table.headers), doc.width), repeatRows=1)
        grid.setStyle(
            TableStyle([
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#1a73e8")),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f3f6fb")]),
            ])
        )
        story.append(grid)
    doc.build(story)
    return buf.getvalue()


TableKey = Tuple[Tuple[str, ...], Tuple[Tuple[str, ...], ...]]


def table_key(table: PdfTable) -> TableKey:
    """Hashable copy of the table; identical content gives an identical key."""
    return tuple(table.headers), tuple(tuple(row) for row in table.rows)


@st.cache_data(show_spinner="Rendering PDF...", max_entries=8)
def _cached_pdf(key: TableKey) -> bytes:
    headers, rows = key
    return render_pdf(PdfTable(headers=list(headers), rows=[list(row) for row in rows]))


def pdf_bytes(table: PdfTable) -> bytes:
    """Rendered PDF for ``table``, reused across reruns while the table is unchanged."""
    return _cached_pdf(table_key(table))


def render_export_buttons(csv_text: str, pdf_table: PdfTable) -> None:
    col_csv, col_pdf = st.columns(2)
    with col_csv:
        st.download_button(
            "Export CSV",
            data=csv_text.encode("utf-8"),
            file_name=CSV_FILE_NAME,
            mime="text/csv",
            key="anomaly_export_csv",
        )
    with col_pdf:
        # Built only on request; a changed table needs a new request
        key = table_key(pdf_table)
        prepared = st.session_state.get(PDF_PREPARED_KEY) == key
        if not prepared and st.button("Prepare PDF", key="anomaly_prepare_pdf"):
            st.session_state[PDF_PREPARED_KEY] = key
            prepared = True
        if prepared:
            st.download_button(
                "Export PDF",
                data=pdf_bytes(pdf_table),
                file_name=PDF_FILE_NAME,
                mime="application/pdf",
                key="anomaly_export_pdf",
            )
