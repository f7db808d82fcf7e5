"""
First-Aid Instruction Sheet
Renders an analysis bundle as a printable PDF using ReportLab.
"""

from datetime import datetime
import io
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm, inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

DISCLAIMER = (
    "This sheet is an automated first-aid aid, not a medical diagnosis. "
    "If in doubt, call your local emergency number."
)


class InstructionSheetGenerator:
    """Builds a one-injury instruction sheet."""

    # Color scheme
    COLORS = {
        'high': colors.Color(0.8, 0.1, 0.1),      # Dark red
        'medium': colors.Color(0.9, 0.6, 0.1),    # Orange
        'low': colors.Color(0.2, 0.6, 0.2),       # Green
        'header': colors.Color(0.1, 0.2, 0.4),    # Dark blue
        'subheader': colors.Color(0.2, 0.3, 0.5),
    }

    def __init__(self):
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        self.styles.add(ParagraphStyle(
            'SheetTitle',
            parent=self.styles['Title'],
            fontSize=22,
            textColor=self.COLORS['header'],
            spaceAfter=20
        ))
        self.styles.add(ParagraphStyle(
            'SectionHeader',
            parent=self.styles['Heading1'],
            fontSize=15,
            textColor=self.COLORS['header'],
            spaceBefore=16,
            spaceAfter=8
        ))
        self.styles.add(ParagraphStyle(
            'Warning',
            parent=self.styles['Normal'],
            fontSize=12,
            textColor=self.COLORS['high'],
            fontName='Helvetica-Bold'
        ))
        self.styles.add(ParagraphStyle(
            'Small',
            parent=self.styles['Normal'],
            fontSize=8,
            textColor=colors.grey
        ))

    def build(self, bundle) -> bytes:
        """
        Render *bundle* to PDF bytes.

        Args:
            bundle: An InstructionBundle or its ``to_dict()`` form.
        """
        data = bundle.to_dict() if hasattr(bundle, "to_dict") else dict(bundle)
        details = data.get("details") or {}
        severity = details.get("severity", "medium")

        buf = io.BytesIO()
        doc = SimpleDocTemplate(
            buf,
            pagesize=A4,
            rightMargin=1.5*cm,
            leftMargin=1.5*cm,
            topMargin=2*cm,
            bottomMargin=2*cm,
            title=f"First Aid: {data.get('injuryType', 'Injury')}",
        )

        story = [Paragraph("FIRST AID INSTRUCTIONS", self.styles['SheetTitle'])]

        summary = [
            ['Injury:', data.get('injuryType', 'Unknown')],
            ['Confidence:', f"{float(data.get('probability', 0)) * 100:.0f}%"],
            ['Severity:', str(severity).upper()],
            ['Location:', details.get('location', 'Undetermined')],
            ['Blood level:', details.get('bloodLevel', 'none')],
            ['Foreign objects:', 'Yes' if details.get('foreignObjects') else 'No'],
            ['Estimated time:', data.get('estimatedTime', '')],
            ['Generated:', datetime.now().strftime('%Y-%m-%d %H:%M:%S')],
        ]
        summary_table = Table(summary, colWidths=[4*cm, 12*cm])
        summary_table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('TEXTCOLOR', (1, 2), (1, 2), self.COLORS.get(severity, colors.black)),
            ('FONTNAME', (1, 2), (1, 2), 'Helvetica-Bold'),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 5),
        ]))
        story.append(summary_table)
        story.append(Spacer(1, 0.2*inch))

        if data.get('warning'):
            story.append(Paragraph(escape(data['warning']), self.styles['Warning']))
        if data.get('failSafe'):
            story.append(Paragraph(
                "Automatic analysis was unavailable; treat as bleeding until assessed.",
                self.styles['Warning']
            ))

        story.append(Paragraph("STEPS", self.styles['SectionHeader']))
        rows = [['#', 'Instruction']]
        important_rows = []
        for step in data.get('steps', []):
            text = escape(step.get('content', ''))
            if step.get('duration'):
                text += f" <i>({escape(step['duration'])})</i>"
            if step.get('important'):
                text = f"<b>{text}</b>"
                important_rows.append(len(rows))
            rows.append([str(step.get('id', len(rows))), Paragraph(text, self.styles['Normal'])])

        steps_table = Table(rows, colWidths=[1*cm, 15*cm])
        style = [
            ('BACKGROUND', (0, 0), (-1, 0), self.COLORS['subheader']),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ]
        for row in important_rows:
            style.append(('BACKGROUND', (0, row), (-1, row), colors.Color(1.0, 0.93, 0.93)))
        steps_table.setStyle(TableStyle(style))
        story.append(steps_table)

        if data.get('note'):
            story.append(Spacer(1, 0.2*inch))
            story.append(Paragraph(f"<b>Note:</b> {escape(data['note'])}", self.styles['Normal']))

        sources = data.get('sources') or []
        if sources:
            story.append(Paragraph("SOURCES", self.styles['SectionHeader']))
            for source in sources:
                story.append(Paragraph(f"• {escape(source)}", self.styles['Normal']))

        story.append(Spacer(1, 0.4*inch))
        story.append(Paragraph(DISCLAIMER, self.styles['Small']))

        doc.build(story)
        return buf.getvalue()
