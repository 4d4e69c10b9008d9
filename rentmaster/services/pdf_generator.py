"""
PDF Generator Service for RentMaster.

Generates printable PDFs for:
- Revenue reports (per period and per payment mode)
"""

import io
from datetime import datetime
from decimal import Decimal

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from rentmaster.schemas.dashboard import RevenueReport

HEADER_COLOR = colors.HexColor('#1a1a2e')
RULE_COLOR = colors.HexColor('#e0e0e0')

DATA_TABLE_STYLE = TableStyle([
    ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
    ('FONTSIZE', (0, 0), (-1, -1), 9),
    ('BACKGROUND', (0, 0), (-1, 0), HEADER_COLOR),
    ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
    ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
    ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
    ('GRID', (0, 0), (-1, -1), 0.5, RULE_COLOR),
    ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
    ('TOPPADDING', (0, 0), (-1, -1), 6),
    ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#f9f9f9')]),
])


class PDFGenerator:
    """Generates PDF reports."""

    def __init__(self):
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Add custom paragraph styles."""
        self.styles.add(ParagraphStyle(
            name='ReportTitle',
            parent=self.styles['Heading1'],
            fontSize=24,
            spaceAfter=30,
            alignment=TA_CENTER,
            textColor=HEADER_COLOR,
        ))
        self.styles.add(ParagraphStyle(
            name='ReportSubtitle',
            parent=self.styles['Normal'],
            fontSize=12,
            spaceAfter=20,
            alignment=TA_CENTER,
            textColor=colors.HexColor('#666666'),
        ))
        self.styles.add(ParagraphStyle(
            name='SectionHeader',
            parent=self.styles['Heading2'],
            fontSize=14,
            spaceBefore=20,
            spaceAfter=10,
            textColor=HEADER_COLOR,
        ))
        self.styles.add(ParagraphStyle(
            name='Footer',
            parent=self.styles['Normal'],
            fontSize=8,
            textColor=colors.HexColor('#888888'),
            alignment=TA_CENTER,
            spaceBefore=20,
        ))

    def generate_revenue_report(self, report: RevenueReport) -> bytes:
        """
        Generate PDF for a revenue report.

        Args:
            report: Aggregated revenue from the reporting service

        Returns:
            PDF bytes
        """
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            rightMargin=0.75*inch,
            leftMargin=0.75*inch,
            topMargin=0.75*inch,
            bottomMargin=0.75*inch,
        )

        story = []

        # Header
        story.append(Paragraph("RentMaster", self.styles['ReportTitle']))
        story.append(Paragraph(
            f"Revenue Report: {report.start_date.isoformat()} to {report.end_date.isoformat()}",
            self.styles['ReportSubtitle'],
        ))

        # Totals
        story.append(Paragraph("SUMMARY", self.styles['SectionHeader']))
        story.append(HRFlowable(width="100%", thickness=1, color=RULE_COLOR))
        summary_table = Table(
            [
                ["Total Revenue:", self._format_amount(report.total_revenue)],
                ["Transactions:", str(report.total_transactions)],
                ["Grouped By:", report.group_by.value],
            ],
            colWidths=[3*inch, 3*inch],
        )
        summary_table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 11),
            ('TEXTCOLOR', (0, 0), (0, -1), colors.HexColor('#666666')),
            ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 8),
        ]))
        story.append(summary_table)
        story.append(Spacer(1, 0.25*inch))

        # Per period
        story.append(Paragraph("REVENUE BY PERIOD", self.styles['SectionHeader']))
        story.append(HRFlowable(width="100%", thickness=1, color=RULE_COLOR))
        if report.revenue_data:
            rows = [["Period", "Amount", "Payments"]]
            for item in report.revenue_data:
                rows.append([item.period, self._format_amount(item.amount), str(item.count)])
            story.append(self._data_table(rows))
        else:
            story.append(Paragraph("No completed payments in this range.", self.styles['Normal']))
        story.append(Spacer(1, 0.25*inch))

        # Per payment mode
        story.append(Paragraph("REVENUE BY PAYMENT MODE", self.styles['SectionHeader']))
        story.append(HRFlowable(width="100%", thickness=1, color=RULE_COLOR))
        if report.revenue_by_payment_mode:
            rows = [["Payment Mode", "Amount", "Payments"]]
            for item in report.revenue_by_payment_mode:
                rows.append([item.payment_mode, self._format_amount(item.amount), str(item.count)])
            story.append(self._data_table(rows))
        else:
            story.append(Paragraph("No completed payments in this range.", self.styles['Normal']))

        story.append(Spacer(1, 0.5*inch))
        story.append(HRFlowable(width="100%", thickness=1, color=RULE_COLOR))
        story.append(Paragraph(
            f"Generated by RentMaster on {datetime.utcnow().strftime('%Y-%m-%d %H:%M UTC')}",
            self.styles['Footer'],
        ))

        doc.build(story)
        buffer.seek(0)
        return buffer.read()

    def _data_table(self, rows: list[list[str]]) -> Table:
        table = Table(rows, colWidths=[3*inch, 2*inch, 1.5*inch], repeatRows=1)
        table.setStyle(DATA_TABLE_STYLE)
        return table

    def _format_amount(self, amount: Decimal) -> str:
        return f"{amount:,.2f}"


def get_pdf_generator() -> PDFGenerator:
    """Get PDF generator instance."""
    return PDFGenerator()
