"""PDF and Excel rendering of a ReportTable.

Every export produces both files side by side, branded with the academy
profile. When the profile has a readable logo it is laid faintly behind the
PDF pages and placed in the workbook's top-right corner.
"""
import logging
from datetime import datetime
from io import BytesIO
from pathlib import Path
from xml.sax.saxutils import escape

import pandas as pd
from openpyxl.drawing.image import Image as XLImage
from openpyxl.styles import Font
from PIL import Image as PILImage, UnidentifiedImageError
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.lib.utils import ImageReader
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

logger = logging.getLogger(__name__)

HEADER_BLUE = colors.HexColor("#1E3A8A")
STRIPE = colors.HexColor("#F1F5F9")
WATERMARK_ALPHA = 0.08


def _generated_stamp():
    return datetime.now().strftime("%Y-%m-%d %H:%M")


def faded_logo(logo_path, alpha=WATERMARK_ALPHA):
    """PNG bytes of the logo with its alpha scaled down, or None if unusable."""
    if not logo_path or not Path(logo_path).is_file():
        return None
    try:
        with PILImage.open(logo_path) as img:
            img = img.convert("RGBA")
            faded = img.getchannel("A").point(lambda a: int(a * alpha))
            img.putalpha(faded)
            buf = BytesIO()
            img.save(buf, format="PNG")
            return buf.getvalue()
    except (OSError, UnidentifiedImageError) as e:
        logger.warning("Logo %s could not be read: %s", logo_path, e)
        return None


def _branding_lines(academy):
    contact = " | ".join(x for x in (academy.contact, academy.email) if x)
    return [academy.name, academy.address, contact]


def export_pdf(academy, report, path):
    path = Path(path)
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "ReportTitle", parent=styles["Heading1"], fontSize=18, textColor=HEADER_BLUE, alignment=1
    )
    center = ParagraphStyle("Center", parent=styles["Normal"], alignment=1)

    story = [Paragraph(escape(academy.name), title_style)]
    for line in _branding_lines(academy)[1:]:
        if line:
            story.append(Paragraph(escape(line), center))
    story.append(Spacer(1, 12))
    story.append(Paragraph(escape(report.title), styles["Heading2"]))
    story.append(Paragraph(f"Generated on: {_generated_stamp()}", styles["Normal"]))
    story.append(Spacer(1, 12))

    data = [report.headers] + [[str(c) for c in row] for row in report.rows]
    table = Table(data, repeatRows=1)
    style = [
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BLUE),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("ALIGN", (0, 0), (-1, -1), "LEFT"),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]
    for i in range(2, len(data), 2):
        style.append(("BACKGROUND", (0, i), (-1, i), STRIPE))
    table.setStyle(TableStyle(style))
    story.append(table)

    logo = faded_logo(academy.logo_path)

    def _watermark(canvas, doc):
        if logo is None:
            return
        width, height = doc.pagesize
        size = min(width, height) * 0.5
        canvas.saveState()
        canvas.drawImage(
            ImageReader(BytesIO(logo)), (width - size) / 2, (height - size) / 2,
            width=size, height=size, mask="auto", preserveAspectRatio=True,
        )
        canvas.restoreState()

    doc = SimpleDocTemplate(str(path), pagesize=landscape(A4), leftMargin=0.5 * inch, rightMargin=0.5 * inch)
    doc.build(story, onFirstPage=_watermark, onLaterPages=_watermark)
    return path


def export_excel(academy, report, path):
    path = Path(path)
    branding = _branding_lines(academy)
    # branding, blank, title, generated, blank, then the table
    start_row = len(branding) + 4

    df = pd.DataFrame(report.rows, columns=report.headers)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name="Report", index=False, startrow=start_row)
        ws = writer.sheets["Report"]
        for i, line in enumerate(branding, start=1):
            ws.cell(row=i, column=1, value=line)
        ws.cell(row=1, column=1).font = Font(bold=True, size=14)
        title_row = len(branding) + 2
        ws.cell(row=title_row, column=1, value=report.title).font = Font(bold=True, size=12)
        ws.cell(row=title_row + 1, column=1, value=f"Generated: {_generated_stamp()}")

        logo = faded_logo(academy.logo_path, alpha=0.3)
        if logo is not None:
            img = XLImage(BytesIO(logo))
            img.width, img.height = 80, 80
            col = max(len(report.headers), 2)
            ws.add_image(img, f"{ws.cell(row=1, column=col).column_letter}1")
    return path


def export_dual_reports(academy, report, out_dir):
    """Write <stem>.pdf and <stem>.xlsx into out_dir and return both paths."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    pdf_path = export_pdf(academy, report, out_dir / f"{report.filename_stem}.pdf")
    xlsx_path = export_excel(academy, report, out_dir / f"{report.filename_stem}.xlsx")
    logger.info("Exported %s to %s", report.title, out_dir)
    return pdf_path, xlsx_path
