"""Import endpoint response shapes."""

from typing import Optional

from meterhub.schemas.common import BaseSchema


class DiagnosticResponse(BaseSchema):
    line_number: Optional[int] = None
    reason: str


class ImportResponse(BaseSchema):
    message: str
    count: int
    kind_of_meter: Optional[str] = None
    diagnostics: list[DiagnosticResponse] = []


class FileImportResponse(BaseSchema):
    name: str
    kind: str
    imported: int
    kind_of_meter: Optional[str] = None
    error: Optional[str] = None
    diagnostics: list[DiagnosticResponse] = []


class BatchImportResponse(BaseSchema):
    customers_imported: int
    readings_imported: int
    total: int
    failed_files: list[str] = []
    files: list[FileImportResponse] = []


class BatchJobResponse(BaseSchema):
    job_id: str
    message: str
