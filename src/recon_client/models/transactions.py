"""Transaction upload and reconciliation models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class FileKind(str, Enum):
    """Source files accepted by the reconciliation backend."""
    HOST = "host"
    ISSUER = "issuer"
    ACQUIRER = "acquirer"
    IHS = "ihs"


# (path suffix under the transactions endpoint, multipart field name)
UPLOAD_TARGETS: dict[FileKind, tuple[str, str]] = {
    FileKind.HOST: ("/upload", "file"),
    FileKind.ISSUER: ("/upload/issuer", "issuerFile"),
    FileKind.ACQUIRER: ("/upload/acquirer", "acquirerFile"),
    FileKind.IHS: ("/upload/ihs", "ihsFile"),
}


class ReconcileRequest(BaseModel):
    user_id: int = Field(alias="userId")
    account_number: str = Field(alias="accountNumber")
    account_name: str = Field(alias="accountName")
    recon_date: str = Field(alias="reconDate")
    currency: str
    timestamp: str

    model_config = {"populate_by_name": True}
