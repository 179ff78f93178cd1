"""
PDF export service for assessment reports
Renders each sheet of a report Workbook as a table section
"""

import logging
from io import BytesIO
from xml.sax.saxutils import escape as xml_escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from models.performance import (
    BAND_ABSENT, BAND_ABSENTEE, BAND_AT_RISK, BAND_BORDERLINE, BAND_GOOD,
)
from models.workbook import HEADER_DANGER, HEADER_PRIMARY, STYLE_SECTION, STYLE_SUBHEADER
from utils.exceptions import SerializationError

logger = logging.getLogger(__name__)

PAGE_SIZE = landscape(A4)
MARGIN = 12 * mm

HEADER_COLORS = {
    HEADER_PRIMARY: colors.HexColor('#4472C4'),
    HEADER_DANGER: colors.HexColor('#DC3545'),
}

BAND_COLORS = {
    BAND_GOOD: colors.HexColor('#90EE90'),
    BAND_BORDERLINE: colors.HexColor('#FFFFE0'),
    BAND_AT_RISK: colors.HexColor('#FFB6C1'),
    BAND_ABSENT: colors.HexColor('#D3D3D3'),
    BAND_ABSENTEE: colors.HexColor('#FFE4E1'),
    STYLE_SECTION: colors.HexColor('#D9E1F2'),
    STYLE_SUBHEADER: colors.HexColor('#E7E6E6'),
}


class PdfExportService:
    """Service for exporting report workbooks to PDF"""

    @staticmethod
    def _cell_style():
        """Compact cell Paragraph style to enable word-wrap in table cells."""
        styles = getSampleStyleSheet()
        return ParagraphStyle('Cell', parent=styles['Normal'], fontSize=7, leading=9,
                              spaceAfter=0, spaceBefore=0)

    @staticmethod
    def _header_style():
        styles = getSampleStyleSheet()
        return ParagraphStyle('HeaderCell', parent=styles['Normal'], fontSize=7, leading=9,
                              fontName='Helvetica-Bold', textColor=colors.white,
                              spaceAfter=0, spaceBefore=0)

    @staticmethod
    def _to_paragraph(value, style):
        text = '' if value is None else xml_escape(str(value))
        return Paragraph(text, style)

    @staticmethod
    def build_table(sheet, page_width):
        """Table for one sheet: header row, wrapped body cells, band shading"""
        width = max([len(sheet.header)] + [len(row) for row in sheet.rows])
        cell_style = PdfExportService._cell_style()
        header_style = PdfExportService._header_style()

        def pad(row):
            return list(row) + [''] * (width - len(row))

        data = [[PdfExportService._to_paragraph(value, header_style) for value in pad(sheet.header)]]
        for row in sheet.rows:
            data.append([PdfExportService._to_paragraph(value, cell_style) for value in pad(row)])

        table = Table(data, repeatRows=1, colWidths=[page_width / float(width)] * width)
        header_bg = HEADER_COLORS.get(sheet.header_style, HEADER_COLORS[HEADER_PRIMARY])
        style = [
            ('BOX', (0, 0), (-1, -1), 0.5, colors.grey),
            ('INNERGRID', (0, 0), (-1, -1), 0.25, colors.lightgrey),
            ('BACKGROUND', (0, 0), (-1, 0), header_bg),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('LEFTPADDING', (0, 1), (-1, -1), 3),
            ('RIGHTPADDING', (0, 1), (-1, -1), 3),
            ('TOPPADDING', (0, 1), (-1, -1), 2),
            ('BOTTOMPADDING', (0, 1), (-1, -1), 2),
        ]
        # Table row 0 is the header, so data row i sits at i + 1
        for row_index, band in sorted(sheet.row_styles.items()):
            if band in BAND_COLORS:
                style.append(('BACKGROUND', (0, row_index + 1), (-1, row_index + 1), BAND_COLORS[band]))
        for (row_index, col_index), band in sorted(sheet.cell_styles.items()):
            if band in BAND_COLORS:
                cell = (col_index, row_index + 1)
                style.append(('BACKGROUND', cell, cell, BAND_COLORS[band]))
        table.setStyle(TableStyle(style))
        return table

    @staticmethod
    def build_elements(workbook, page_width):
        styles = getSampleStyleSheet()
        elements = [Paragraph(xml_escape(workbook.filename or 'Assessment Report'), styles['Title'])]
        for index, sheet in enumerate(workbook.sheets):
            if index:
                elements.append(PageBreak())
            elements.append(Paragraph(xml_escape(sheet.name), styles['Heading2']))
            elements.append(Spacer(1, 4))
            elements.append(PdfExportService.build_table(sheet, page_width))
        return elements

    @staticmethod
    def serialize(workbook):
        """Return the PDF bytes for a report Workbook"""
        buffer = BytesIO()
        try:
            doc = SimpleDocTemplate(
                buffer, pagesize=PAGE_SIZE,
                leftMargin=MARGIN, rightMargin=MARGIN, topMargin=MARGIN, bottomMargin=MARGIN,
                title=workbook.filename or '', author=workbook.creator or '',
            )
            page_width = PAGE_SIZE[0] - 2 * MARGIN
            doc.build(PdfExportService.build_elements(workbook, page_width))
            return buffer.getvalue()
        except Exception as e:
            logger.exception("Error exporting workbook %s to PDF", workbook.filename)
            raise SerializationError(f"Failed to generate PDF file: {e}") from e
        finally:
            buffer.close()
