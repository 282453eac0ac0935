#!/usr/bin/env python3
"""
PDF Report Export
Renders the dashboard's tabular views (stock, transactions, employees,
production recap, assets) into a single-table PDF download.
"""

import io
from datetime import datetime
from typing import List, Optional, Sequence

from flask import make_response
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from stockplus.utils.logger import get_logger

logger = get_logger("stockplus.services.reports.pdf_export")

HEADER_BACKGROUND = colors.HexColor('#1F3A5F')
ROW_BACKGROUND = colors.HexColor('#F2F2F2')


class TableReportGenerator:
    """Generates a titled PDF holding one table, a record count and optional footer lines"""

    def __init__(self, wide: bool = False):
        self.pagesize = landscape(A4) if wide else A4
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        self.styles.add(ParagraphStyle(
            name='ReportTitle',
            parent=self.styles['Heading1'],
            fontSize=16,
            spaceAfter=6,
            alignment=TA_CENTER,
            textColor=colors.HexColor('#333333'),
        ))
        self.styles.add(ParagraphStyle(
            name='ReportMeta',
            parent=self.styles['Normal'],
            fontSize=8,
            textColor=colors.HexColor('#666666'),
            alignment=TA_CENTER,
        ))
        self.styles.add(ParagraphStyle(
            name='Cell',
            parent=self.styles['Normal'],
            fontSize=8,
            leading=10,
        ))

    def generate(
        self,
        title: str,
        headers: Sequence[str],
        rows: Sequence[Sequence],
        footer_lines: Optional[List[str]] = None,
        exported_at: Optional[datetime] = None,
    ) -> bytes:
        """
        Build the PDF and return its bytes.

        Empty or None cell values are rendered as "-".
        """
        exported_at = exported_at or datetime.now()
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=self.pagesize,
            rightMargin=12 * mm,
            leftMargin=12 * mm,
            topMargin=12 * mm,
            bottomMargin=12 * mm,
            title=title,
        )

        story = [
            Paragraph(title, self.styles['ReportTitle']),
            Paragraph(f"Exported on: {exported_at.strftime('%d/%m/%Y %H:%M')}", self.styles['ReportMeta']),
            Spacer(1, 6 * mm),
        ]

        data = [[Paragraph(f"<b>{header}</b>", self.styles['Cell']) for header in headers]]
        for row in rows:
            data.append([Paragraph(self._cell_text(value), self.styles['Cell']) for value in row])

        table = Table(data, repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), HEADER_BACKGROUND),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('GRID', (0, 0), (-1, -1), 0.25, colors.HexColor('#DDDDDD')),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, ROW_BACKGROUND]),
            ('TOPPADDING', (0, 0), (-1, -1), 3),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 3),
        ]))
        story.append(table)

        story.append(Spacer(1, 6 * mm))
        story.append(Paragraph(f"Total records: {len(rows)}", self.styles['ReportMeta']))
        for line in footer_lines or []:
            story.append(Paragraph(line, self.styles['ReportMeta']))

        doc.build(story)
        buffer.seek(0)
        logger.info(f"Generated PDF report '{title}' with {len(rows)} rows")
        return buffer.getvalue()

    @staticmethod
    def _cell_text(value) -> str:
        if value is None or value == '':
            return '-'
        text = str(value)
        return text.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')


def report_filename(prefix: str, today: Optional[datetime] = None) -> str:
    today = today or datetime.now()
    return f"{prefix}_{today.strftime('%Y-%m-%d')}.pdf"


def pdf_response(pdf_content: bytes, filename: str):
    response = make_response(pdf_content)
    response.headers['Content-Type'] = 'application/pdf'
    response.headers['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response
