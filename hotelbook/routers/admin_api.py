from datetime import date

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ..db import get_db
from ..errors import InvalidRequestError
from ..models import User
from ..schemas import DashboardStatsOut
from ..security import require_admin
from ..services.reporting import bookings_in_period, dashboard_stats, generate_csv_report, generate_pdf_report

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


def _check_period(start: date, end: date) -> None:
    if start >= end:
        raise InvalidRequestError("Report end must be after start")


@router.get("/stats", response_model=DashboardStatsOut)
def stats(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return dashboard_stats(db)


@router.get("/reports/bookings.csv")
def bookings_csv(start: date, end: date, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    _check_period(start, end)
    content = generate_csv_report(bookings_in_period(db, start, end))
    filename = f"bookings_{start.isoformat()}_{end.isoformat()}.csv"
    return Response(content, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})


@router.get("/reports/bookings.pdf")
def bookings_pdf(start: date, end: date, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    _check_period(start, end)
    content = generate_pdf_report(bookings_in_period(db, start, end), start, end)
    filename = f"bookings_{start.isoformat()}_{end.isoformat()}.pdf"
    return Response(content, media_type="application/pdf", headers={"Content-Disposition": f"attachment; filename={filename}"})
