# hospital_admin/utils/bill_pdf.py
"""
Printable bill receipt rendered with reportlab.
"""

from decimal import Decimal
from io import BytesIO
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from hospital_admin.models.billing import Bill


def _money(value) -> str:
    return f"{Decimal(value or 0):,.2f}"


def generate_bill_pdf(
    bill: Bill,
    hospital_name: str = "Hospital",
    hospital_address: Optional[str] = None,
    hospital_phone: Optional[str] = None,
) -> BytesIO:
    """
    Generate a receipt for a bill and its line items.
    Returns a BytesIO buffer containing the PDF.
    """
    buffer = BytesIO()

    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=20 * mm,
        leftMargin=20 * mm,
        topMargin=15 * mm,
        bottomMargin=10 * mm,
        title=f"Receipt {bill.bill_number}",
    )

    elements = []

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "ReceiptTitle",
        parent=styles["Heading1"],
        fontSize=20,
        textColor=colors.black,
        spaceAfter=8,
        fontName="Helvetica-Bold",
    )
    normal_style = ParagraphStyle(
        "ReceiptNormal",
        parent=styles["Normal"],
        fontSize=10,
        textColor=colors.black,
        spaceAfter=4,
    )
    small_style = ParagraphStyle(
        "ReceiptSmall",
        parent=styles["Normal"],
        fontSize=8,
        textColor=colors.black,
        spaceAfter=4,
    )

    # Header
    elements.append(Paragraph(hospital_name, title_style))
    contact = [part for part in (hospital_address, hospital_phone) if part]
    if contact:
        elements.append(Paragraph(" • ".join(contact), small_style))
    elements.append(Spacer(1, 5 * mm))

    patient = bill.patient
    header_rows = [
        ["Receipt No:", bill.bill_number],
        ["Date:", bill.created_at.strftime("%d/%m/%Y")],
        ["Patient:", patient.full_name if patient else "N/A"],
        ["Patient No:", patient.patient_number if patient else "N/A"],
        ["Status:", bill.payment_status.value.capitalize()],
    ]
    if bill.payment_method:
        header_rows.append(["Payment Method:", bill.payment_method.value.capitalize()])

    header_table = Table(header_rows, colWidths=[40 * mm, 130 * mm])
    header_table.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
                ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 10),
                ("ALIGN", (0, 0), (-1, -1), "LEFT"),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
                ("TOPPADDING", (0, 0), (-1, -1), 3),
            ]
        )
    )
    elements.append(header_table)
    elements.append(Spacer(1, 6 * mm))

    # Line items
    item_rows = [["Item", "Type", "Qty", "Unit Price", "Total"]]
    for item in bill.items:
        item_rows.append(
            [
                item.item_name,
                item.item_type,
                str(item.quantity),
                _money(item.unit_price),
                _money(item.total_price),
            ]
        )

    subtotal = sum((Decimal(item.total_price) for item in bill.items), Decimal("0"))
    item_rows.append(["", "", "", "Subtotal", _money(subtotal)])
    item_rows.append(["", "", "", "Discount", _money(bill.discount)])
    item_rows.append(["", "", "", "Total", _money(bill.total_amount)])
    item_rows.append(["", "", "", "Paid", _money(bill.paid_amount)])
    item_rows.append(["", "", "", "Balance", _money(bill.balance)])

    summary_start = len(bill.items) + 1
    items_table = Table(item_rows, colWidths=[60 * mm, 30 * mm, 15 * mm, 30 * mm, 35 * mm])
    items_table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.grey),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("ALIGN", (2, 0), (-1, -1), "RIGHT"),
                ("GRID", (0, 0), (-1, summary_start - 1), 1, colors.black),
                ("FONTNAME", (3, summary_start), (3, -1), "Helvetica-Bold"),
                ("LINEABOVE", (3, summary_start), (-1, summary_start), 1, colors.black),
                ("TOPPADDING", (0, 0), (-1, -1), 4),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
            ]
        )
    )
    elements.append(items_table)

    elements.append(Spacer(1, 10 * mm))
    elements.append(Paragraph("Thank you. Please keep this receipt for your records.", normal_style))

    doc.build(elements)
    buffer.seek(0)
    return buffer
