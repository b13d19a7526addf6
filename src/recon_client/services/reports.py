"""Reconciliation report listing and download."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from recon_client.client import ReconClient
from recon_client.decoding import unwrap_list
from recon_client.errors import DecodeError, ReconClientError
from recon_client.models.reports import Report

logger = logging.getLogger(__name__)

_FILENAME_RE = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.IGNORECASE)


def filename_from_disposition(header: str | None) -> str | None:
    """Extract the filename from a Content-Disposition header."""
    if not header:
        return None
    match = _FILENAME_RE.search(header)
    if not match:
        return None
    # Never let the server choose a directory
    return Path(match.group(1).strip()).name or None


class ReportService:
    """Service for listing and downloading generated reports."""

    def __init__(self, client: ReconClient) -> None:
        self._client = client
        self._paths = client.endpoints

    async def list_reports(self) -> list[Report]:
        """List generated reports.

        The backend answers some failures with a 2xx ``{"status": "error"}``
        body; those are raised rather than returned as an empty list.
        """
        data = await self._client.get(self._paths.reports)
        if isinstance(data, dict) and data.get("status") == "error":
            raise ReconClientError(f"Report listing failed: {data.get('message', 'unknown error')}")
        try:
            return [Report.model_validate(r) for r in unwrap_list(data, "reports")]
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Unexpected report listing: {e}") from e

    async def download_report(
        self,
        report_id: int,
        dest_dir: str = ".",
        filename: str | None = None,
    ) -> Path:
        """Download a report file.

        Args:
            report_id: Report to download.
            dest_dir: Directory to write into; created if missing.
            filename: Override the server-supplied file name.

        Returns:
            Path of the written file.
        """
        response = await self._client.send("GET", f"{self._paths.reports}/{report_id}/download")

        name = (
            filename
            or filename_from_disposition(response.headers.get("content-disposition"))
            or f"report-{report_id}"
        )
        dir_path = Path(dest_dir)
        dir_path.mkdir(parents=True, exist_ok=True)
        path = dir_path / name
        path.write_bytes(response.content)
        logger.info(f"Saved report {report_id} to {path} ({len(response.content)} bytes)")
        return path
