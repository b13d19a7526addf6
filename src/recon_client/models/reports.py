"""Report data models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class Report(BaseModel):
    """A generated reconciliation report."""
    id: int
    report_name: str = Field(alias="reportName")
    generated_at: datetime | None = Field(default=None, alias="generatedAt")
    generated_by_username: str | None = Field(default=None, alias="generatedByUsername")
    reviewed_by_username: str | None = Field(default=None, alias="reviewedByUsername")
    status: str = "PENDING"

    model_config = {"populate_by_name": True, "extra": "allow"}

    def to_row(self) -> dict[str, str]:
        """Flatten into the dashboard's table columns."""
        return {
            "id": str(self.id),
            "name": self.report_name,
            "dateGenerated": self.generated_at.date().isoformat() if self.generated_at else "-",
            "reportDoneBy": self.generated_by_username or "-",
            "reviewedBy": self.reviewed_by_username or "-",
            "status": self.status.lower(),
        }
