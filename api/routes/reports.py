"""
Therapist reports: summary stats, chart aggregates and the session list.

Income is the therapist's share of paid sessions that were completed or
no-shows; payment processing itself lives elsewhere.
"""

from collections import Counter
from datetime import date, datetime, time, timedelta, timezone
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from api.deps import require_therapist
from api.models import SessionStatus, TherapySession, User
from api.models.report import (
    MonthlyIncome,
    PatientRef,
    ReportCharts,
    ReportSession,
    ReportSummary,
    StatusCount,
    TherapistReport,
    TypeCount,
)
from config import get_palette, get_settings
from storage import get_storage

router = APIRouter(prefix="/api/therapist/reports", tags=["reports"])

EARNING_STATUSES = {SessionStatus.COMPLETED, SessionStatus.NO_SHOW}


def _earning(session: TherapySession) -> float:
    if session.status in EARNING_STATUSES and session.is_paid and session.booked_rate > 0:
        return session.booked_rate * get_settings().therapist_share
    return 0.0


def _rate(part: int, total: int) -> str:
    return f"{part / total * 100:.1f}" if total else "0.0"


def _shift_month(day: date, months: int) -> date:
    index = day.year * 12 + day.month - 1 + months
    return date(index // 12, index % 12 + 1, 1)


def _window(
    filter_type: str,
    start_date: Optional[date],
    end_date: Optional[date],
    now: datetime,
) -> tuple[Optional[datetime], Optional[datetime]]:
    if filter_type == "weekly":
        return now - timedelta(days=7), None
    if filter_type == "monthly":
        month_ago = _shift_month(now.date(), -1).replace(day=min(now.day, 28))
        return datetime.combine(month_ago, now.time(), tzinfo=timezone.utc), None
    if filter_type == "custom":
        start = datetime.combine(start_date, time.min, tzinfo=timezone.utc) if start_date else None
        end = datetime.combine(end_date, time.max, tzinfo=timezone.utc) if end_date else None
        return start, end
    return None, None


def _monthly_income(sessions: list[TherapySession], now: datetime) -> list[MonthlyIncome]:
    this_month = now.date().replace(day=1)
    data = []
    for offset in range(5, -1, -1):
        month_start = _shift_month(this_month, -offset)
        next_start = _shift_month(month_start, 1)
        in_month = [s for s in sessions if month_start <= s.scheduled_at.date() < next_start]
        data.append(
            MonthlyIncome(
                month=month_start.strftime("%b %Y"),
                income=round(sum(_earning(s) for s in in_month), 2),
                sessions=sum(1 for s in in_month if s.status == SessionStatus.COMPLETED),
            )
        )
    return data


def _report_row(session: TherapySession) -> ReportSession:
    amount = _earning(session)
    breakdown = ""
    if amount:
        share = get_settings().therapist_share
        fee = session.booked_rate - amount
        breakdown = (
            f"Total: LKR {session.booked_rate:.2f} | "
            f"System Fee ({(1 - share) * 100:.0f}%): LKR {fee:.2f} | "
            f"Your Share ({share * 100:.0f}%): LKR {amount:.2f}"
        )
    return ReportSession(
        id=session.id,
        patient_id=session.patient_id,
        patient_name=session.patient_name,
        scheduled_at=session.scheduled_at,
        duration=session.duration,
        type=session.type,
        status=session.status.value,
        booked_rate=session.booked_rate,
        is_paid=session.is_paid,
        therapist_amount=round(amount, 2),
        breakdown=breakdown,
    )


@router.get("", response_model=TherapistReport)
def get_report(
    filter_type: Literal["all", "weekly", "monthly", "custom"] = Query("all", alias="filterType"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    patient_id: Optional[str] = Query(None, alias="patientId"),
    therapist: User = Depends(require_therapist),
):
    """Build the report for the acting therapist."""
    storage = get_storage()
    palette = get_palette()
    now = datetime.now(timezone.utc)

    own = storage.sessions.filter(lambda s: s.therapist_id == therapist.id)
    start, end = _window(filter_type, start_date, end_date, now)
    sessions = [
        s for s in own
        if (start is None or s.scheduled_at >= start)
        and (end is None or s.scheduled_at <= end)
        and (not patient_id or s.patient_id == patient_id)
    ]
    sessions.sort(key=lambda s: s.scheduled_at, reverse=True)

    statuses = Counter(s.status for s in sessions)
    total = len(sessions)
    completed = statuses[SessionStatus.COMPLETED]
    scheduled = statuses[SessionStatus.SCHEDULED] + statuses[SessionStatus.APPROVED]
    cancelled = statuses[SessionStatus.CANCELLED]
    no_show = statuses[SessionStatus.NO_SHOW]
    paid = sum(1 for s in sessions if s.booked_rate > 0)

    summary = ReportSummary(
        total_sessions=total,
        completed_sessions=completed,
        scheduled_sessions=scheduled,
        cancelled_sessions=cancelled,
        no_show_sessions=no_show,
        paid_sessions=paid,
        free_sessions=total - paid,
        total_income=f"{sum(_earning(s) for s in sessions):.2f}",
        no_show_rate=_rate(no_show, total),
        cancellation_rate=_rate(cancelled, total),
    )

    charts = ReportCharts(
        session_status_data=[
            StatusCount(status="Completed", count=completed, color=palette.success),
            StatusCount(status="Scheduled", count=scheduled, color=palette.primary),
            StatusCount(status="Cancelled", count=cancelled, color=palette.danger),
            StatusCount(status="No Show", count=no_show, color=palette.warning),
        ],
        paid_vs_free_data=[
            TypeCount(type="Paid Sessions", count=paid, color=palette.primary),
            TypeCount(type="Free Sessions", count=total - paid, color=palette.primary_soft),
        ],
        sessions_by_type=[
            TypeCount(type=kind, count=count)
            for kind, count in Counter(s.type or "Other" for s in sessions).items()
        ],
        monthly_income_data=_monthly_income(own, now),
    )

    patient_ids = {s.patient_id for s in own}
    patients = sorted(
        (storage.children.get(pid) for pid in patient_ids if storage.children.get(pid)),
        key=lambda c: c.first_name,
    )

    return TherapistReport(
        summary=summary,
        charts=charts,
        patients=[
            PatientRef(id=c.id, first_name=c.first_name, last_name=c.last_name)
            for c in patients
        ],
        sessions=[_report_row(s) for s in sessions],
    )
