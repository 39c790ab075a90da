import csv
from collections import OrderedDict
from datetime import date, datetime
from decimal import Decimal
from io import StringIO, BytesIO

from sqlalchemy.orm import Session

from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib import colors
from reportlab.lib.units import inch

from ..models import Booking, BookingStatus

# Bookings that count towards revenue
REVENUE_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.CHECKED_OUT)


def _month_bounds(today: date) -> tuple[datetime, datetime]:
    start = datetime(today.year, today.month, 1)
    if today.month == 12:
        end = datetime(today.year + 1, 1, 1)
    else:
        end = datetime(today.year, today.month + 1, 1)
    return start, end


def revenue_by_month(db: Session, start: datetime, end: datetime) -> list[dict]:
    """Revenue and booking counts grouped by creation month (YYYY-MM), oldest first."""
    rows = (
        db.query(Booking.created_at, Booking.total_amount)
        .filter(
            Booking.created_at >= start,
            Booking.created_at < end,
            Booking.status.in_(REVENUE_STATUSES),
        )
        .order_by(Booking.created_at.asc())
        .all()
    )
    buckets: OrderedDict[str, dict] = OrderedDict()
    for created_at, total in rows:
        key = created_at.strftime("%Y-%m")
        bucket = buckets.setdefault(key, {"month": key, "revenue": Decimal("0"), "bookings": 0})
        bucket["revenue"] += Decimal(str(total))
        bucket["bookings"] += 1
    return list(buckets.values())


def dashboard_stats(db: Session, today: date | None = None) -> dict:
    today = today or date.today()
    month_start, month_end = _month_bounds(today)
    this_month = revenue_by_month(db, month_start, month_end)
    return {
        "total_bookings": db.query(Booking).count(),
        "pending_bookings": db.query(Booking).filter(Booking.status == BookingStatus.PENDING).count(),
        "confirmed_bookings": db.query(Booking).filter(Booking.status == BookingStatus.CONFIRMED).count(),
        "revenue_this_month": this_month[0]["revenue"] if this_month else Decimal("0"),
        "revenue_by_month": revenue_by_month(db, datetime(today.year, 1, 1), month_end),
    }


def generate_csv_report(bookings: list[Booking]) -> str:
    """Generates a CSV report from a list of bookings."""
    output = StringIO()
    writer = csv.writer(output)

    # Header
    writer.writerow(["Reference", "Guest", "Hotel", "Room", "Check-in", "Check-out", "Nights", "Total", "Status", "Payment"])

    # Data
    for b in bookings:
        writer.writerow([
            b.booking_reference,
            b.guest_name,
            b.hotel.name if b.hotel else f"Hotel #{b.hotel_id}",
            b.room.room_number if b.room else f"Room #{b.room_id}",
            b.check_in.isoformat(),
            b.check_out.isoformat(),
            b.nights,
            f"{b.total_amount:.2f}",
            b.status.value,
            b.payment_status.value,
        ])

    return output.getvalue()


def generate_pdf_report(bookings: list[Booking], period_start: date, period_end: date) -> bytes:
    """Generates a PDF report from a list of bookings using ReportLab."""
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, rightMargin=0.5*inch, leftMargin=0.5*inch, topMargin=0.5*inch, bottomMargin=0.5*inch)
    styles = getSampleStyleSheet()
    elements = []

    elements.append(Paragraph("Booking Report", styles['h1']))
    elements.append(Paragraph(f"Period: {period_start.isoformat()} to {period_end.isoformat()}", styles['h2']))
    elements.append(Spacer(1, 0.25*inch))

    data = [["Reference", "Guest", "Room", "Check-in", "Check-out", "Total", "Status"]]
    total = Decimal("0")
    for b in bookings:
        total += Decimal(str(b.total_amount))
        data.append([
            b.booking_reference,
            b.guest_name,
            b.room.room_number if b.room else f"#{b.room_id}",
            b.check_in.isoformat(),
            b.check_out.isoformat(),
            f"{b.total_amount:.2f}",
            b.status.value.replace("_", " ").title(),
        ])
    data.append(["", "", "", "", "Total", f"{total:.2f}", ""])

    table = Table(data, colWidths=[1.1*inch, 1.5*inch, 0.7*inch, 0.9*inch, 0.9*inch, 0.9*inch, 1*inch])
    style = TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.teal),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
        ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
        ('BOTTOMPADDING', (0, 0), (-1, 0), 12),
        ('BACKGROUND', (0, 1), (-1, -2), colors.beige),
        ('GRID', (0, 0), (-1, -1), 1, colors.black),
    ])
    table.setStyle(style)
    elements.append(table)

    doc.build(elements)
    return buffer.getvalue()


def bookings_in_period(db: Session, period_start: date, period_end: date) -> list[Booking]:
    """Bookings whose stay overlaps [period_start, period_end)."""
    return (
        db.query(Booking)
        .filter(Booking.check_in < period_end, Booking.check_out > period_start)
        .order_by(Booking.check_in.asc(), Booking.id.asc())
        .all()
    )
