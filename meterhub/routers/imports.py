"""
CSV import routes.

  POST /import/customers  → upload a roster CSV
  POST /import/readings   → upload one series CSV (file name drives meter kind)
  POST /import/batch      → import the configured directory batch
                            (?background=true enqueues it on the RQ worker)

Each request is one transaction: rows are flushed as they are parsed and
committed once the file is done. A hard failure rolls the whole file back;
so does a duplicate customer id (409), which makes re-running a batch safe.
"""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from meterhub.database import get_db
from meterhub.schemas.imports import BatchImportResponse, BatchJobResponse, ImportResponse
from meterhub.services.ingestion.base import ImportFailure, SourceNotFoundError
from meterhub.services.ingestion.customer_importer import CustomerRosterImporter
from meterhub.services.ingestion.reading_importer import ReadingSeriesImporter
from meterhub.services.ingestion.sources import decode_bytes
from meterhub.services.storage.base import get_store
from meterhub.workers.import_jobs import run_batch_import_sync

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/import", tags=["import"])


@router.post("/customers", response_model=ImportResponse)
def import_customers(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
) -> ImportResponse:
    text = _read_upload(file)
    try:
        result = CustomerRosterImporter(get_store(db)).import_text(text)
        db.commit()
    except ImportFailure as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Import failed: {exc}",
        )
    except IntegrityError as exc:
        db.rollback()
        raise _conflict(exc)

    return ImportResponse.model_validate(
        {
            "message": f"Successfully imported {result.imported} customers",
            "count": result.imported,
            "diagnostics": result.diagnostics,
        }
    )


@router.post("/readings", response_model=ImportResponse)
def import_readings(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
) -> ImportResponse:
    text = _read_upload(file)
    try:
        result = ReadingSeriesImporter(get_store(db)).import_text(
            text, source_name=file.filename
        )
        db.commit()
    except ImportFailure as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Import failed: {exc}",
        )
    except IntegrityError as exc:
        db.rollback()
        raise _conflict(exc)

    return ImportResponse.model_validate(
        {
            "message": f"Successfully imported {result.imported} readings",
            "count": result.imported,
            "kind_of_meter": result.kind_of_meter,
            "diagnostics": result.diagnostics,
        }
    )


@router.post("/batch", response_model=BatchImportResponse | BatchJobResponse)
def import_batch(
    background: bool = False,
    db: Session = Depends(get_db),
) -> BatchImportResponse | BatchJobResponse:
    """
    Import roster + series files from settings.import_data_path.
    With background=true the batch runs on the RQ worker and only the job id
    is returned.
    """
    if background:
        from meterhub.workers.queue import enqueue_batch_import

        job_id = enqueue_batch_import()
        return BatchJobResponse(job_id=job_id, message="Batch import enqueued")

    try:
        summary = run_batch_import_sync(db)
        db.commit()
    except SourceNotFoundError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except ImportFailure as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Import failed: {exc}",
        )
    except IntegrityError as exc:
        db.rollback()
        raise _conflict(exc)

    return BatchImportResponse.model_validate(summary)


# ── Helpers ───────────────────────────────────────────────────────────────────


def _conflict(exc: IntegrityError) -> HTTPException:
    # Re-importing a roster hits the customers primary key; nothing is kept
    logger.warning("Import rejected by the database: %s", exc.orig)
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=f"Import failed: record already exists ({exc.orig})",
    )


def _read_upload(file: UploadFile) -> str:
    data = file.file.read()
    text = decode_bytes(data)
    if not text.strip():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="CSV content is required",
        )
    return text
