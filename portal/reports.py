"""CSV export of a therapist report."""

import csv
import io

from api.models import TherapistReport

CSV_HEADER = [
    "Patient Name",
    "Date",
    "Time",
    "Duration (min)",
    "Type",
    "Status",
    "Rate (LKR)",
    "Paid",
]


def sessions_to_csv(report: TherapistReport) -> str:
    """Session rows followed by a blank line and the summary block."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for session in report.sessions:
        writer.writerow([
            session.patient_name,
            session.scheduled_at.strftime("%Y-%m-%d"),
            session.scheduled_at.strftime("%H:%M"),
            session.duration,
            session.type,
            session.status,
            f"{session.booked_rate:.2f}",
            "Yes" if session.is_paid else "No",
        ])

    summary = report.summary
    writer.writerow([])
    writer.writerow(["SUMMARY"])
    writer.writerow(["Total Sessions", summary.total_sessions])
    writer.writerow(["Completed Sessions", summary.completed_sessions])
    writer.writerow(["Scheduled Sessions", summary.scheduled_sessions])
    writer.writerow(["Cancelled Sessions", summary.cancelled_sessions])
    writer.writerow(["No Show Sessions", summary.no_show_sessions])
    writer.writerow(["Total Income (LKR)", summary.total_income])
    writer.writerow(["No Show Rate (%)", summary.no_show_rate])
    writer.writerow(["Cancellation Rate (%)", summary.cancellation_rate])
    return buffer.getvalue()
