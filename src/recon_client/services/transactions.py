"""Transaction file uploads and reconciliation."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Any

from recon_client.client import ReconClient
from recon_client.models.transactions import UPLOAD_TARGETS, FileKind, ReconcileRequest


class TransactionService:
    """Service for uploading source files and reconciling them."""

    def __init__(self, client: ReconClient) -> None:
        self._client = client
        self._base = client.endpoints.transactions

    async def upload(self, kind: FileKind, file_path: str | Path, recon_date: str) -> Any:
        """Upload one source file as multipart form data.

        The file is read into memory so the body can be replayed after a
        token refresh.
        """
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f"Upload file not found: {path}")

        suffix, field = UPLOAD_TARGETS[kind]
        mime = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return await self._client.post(
            self._base + suffix,
            files={field: (path.name, path.read_bytes(), mime)},
            data={"reconDate": recon_date},
        )

    async def upload_host(self, file_path: str | Path, recon_date: str) -> Any:
        return await self.upload(FileKind.HOST, file_path, recon_date)

    async def upload_issuer(self, file_path: str | Path, recon_date: str) -> Any:
        return await self.upload(FileKind.ISSUER, file_path, recon_date)

    async def upload_acquirer(self, file_path: str | Path, recon_date: str) -> Any:
        return await self.upload(FileKind.ACQUIRER, file_path, recon_date)

    async def upload_ihs(self, file_path: str | Path, recon_date: str) -> Any:
        return await self.upload(FileKind.IHS, file_path, recon_date)

    async def upload_all(
        self,
        files: dict[FileKind, str | Path],
        recon_date: str,
    ) -> dict[FileKind, Any]:
        """Upload every file in order, stopping at the first failure."""
        results: dict[FileKind, Any] = {}
        for kind in FileKind:
            if kind in files:
                results[kind] = await self.upload(kind, files[kind], recon_date)
        return results

    async def reconcile_and_save_report(self, request: ReconcileRequest) -> Any:
        """Run reconciliation for the uploaded files and save a report."""
        return await self._client.post(
            f"{self._base}/reconcile",
            json=request.model_dump(by_alias=True),
        )

    async def view_reconciled(self, page: int = 0, size: int = 20, recon_date: str | None = None) -> Any:
        """Fetch one page of reconciled transactions."""
        params: dict[str, Any] = {"page": page, "size": size}
        if recon_date:
            params["reconDate"] = recon_date
        return await self._client.get(f"{self._base}/reconciled", params=params)
