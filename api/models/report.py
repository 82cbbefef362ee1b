"""Therapist report models (summary, chart aggregates, session list)."""

from datetime import datetime
from typing import Optional

from api.models.base import CamelModel


class ReportSummary(CamelModel):
    total_sessions: int
    completed_sessions: int
    scheduled_sessions: int
    cancelled_sessions: int
    no_show_sessions: int
    paid_sessions: int
    free_sessions: int
    total_income: str  # LKR, two decimals
    no_show_rate: str  # percent, one decimal
    cancellation_rate: str


class StatusCount(CamelModel):
    status: str
    count: int
    color: str


class TypeCount(CamelModel):
    type: str
    count: int
    color: Optional[str] = None


class MonthlyIncome(CamelModel):
    month: str  # e.g. "Jan 2026"
    income: float
    sessions: int


class ReportCharts(CamelModel):
    session_status_data: list[StatusCount]
    paid_vs_free_data: list[TypeCount]
    sessions_by_type: list[TypeCount]
    monthly_income_data: list[MonthlyIncome]


class PatientRef(CamelModel):
    id: str
    first_name: str
    last_name: str


class ReportSession(CamelModel):
    id: str
    patient_id: str
    patient_name: str
    scheduled_at: datetime
    duration: int
    type: str
    status: str
    booked_rate: float
    is_paid: bool
    therapist_amount: float = 0.0
    breakdown: str = ""


class TherapistReport(CamelModel):
    summary: ReportSummary
    charts: ReportCharts
    patients: list[PatientRef]
    sessions: list[ReportSession]
