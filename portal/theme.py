"""Status colours and badges for the dashboards, built on the brand palette."""

from dataclasses import dataclass
from functools import lru_cache

from config import Palette


@dataclass(frozen=True)
class Theme(Palette):
    def status_color(self, status: str) -> str:
        """Badge colour for a session, task or application status."""
        return {
            "COMPLETED": self.success,
            "approved": self.success,
            "accepted": self.success,
            "SCHEDULED": self.primary,
            "APPROVED": self.primary,
            "IN_PROGRESS": self.info,
            "under_review": self.info,
            "PENDING": self.warning,
            "pending": self.warning,
            "NO_SHOW": self.warning,
            "OVERDUE": self.danger,
            "CANCELLED": self.danger,
            "rejected": self.danger,
        }.get(status, self.muted)

    def badge(self, label: str, status: str) -> str:
        """Inline HTML badge for Streamlit markdown."""
        color = self.status_color(status)
        return (
            f'<span style="background:{color};color:white;padding:2px 8px;'
            f'border-radius:8px;font-size:0.8em">{label}</span>'
        )


@lru_cache
def get_theme() -> Theme:
    return Theme()
