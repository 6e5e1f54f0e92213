# app/routes/applications.py
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse

from app.services.application_store import ApplicationStore
from app.services.dependencies import get_application_store
from app.services.errors import TrackerError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["applications"])
stats_router = APIRouter(prefix="/stats", tags=["applications"])


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "message": message},
    )


def _from_tracker_error(e: TrackerError, failure: str) -> JSONResponse:
    # storage problems are reported under the operation that hit them
    error = failure if e.http_status >= 500 else e.title
    return _error(e.http_status, error, e.message)


# ----------------------
# Routes
# ----------------------

@router.get("", response_class=JSONResponse)
def list_applications(
    month: Optional[str] = Query(None, description="YYYY-MM, or 'all'. Defaults to the current month."),
    status: Optional[str] = Query(None, description="recruiter | ongoing | rejected | success"),
    store: ApplicationStore = Depends(get_application_store),
):
    try:
        applied_month, records = store.list_applications(month=month, status=status)
    except TrackerError as e:
        return _from_tracker_error(e, "Failed to read applications")
    except Exception as e:
        logger.exception("❌ Error reading applications")
        return _error(500, "Failed to read applications", str(e))

    return JSONResponse({
        "success": True,
        "month": applied_month,
        "count": len(records),
        "applications": [r.to_document() for r in records],
    })


@stats_router.get("/applications", response_class=JSONResponse)
def applications_summary(store: ApplicationStore = Depends(get_application_store)):
    """
    Counts per month and per status, for the month picker and dashboard badges.
    Lives outside /applications so no record id can be shadowed by it.
    """
    try:
        summary = store.summarize()
    except TrackerError as e:
        return _from_tracker_error(e, "Failed to read applications")
    except Exception as e:
        logger.exception("❌ Error summarising applications")
        return _error(500, "Failed to read applications", str(e))
    return JSONResponse({"success": True, **summary})


@router.get("/{app_id}", response_class=JSONResponse)
def get_application(app_id: str, store: ApplicationStore = Depends(get_application_store)):
    try:
        record = store.get_application(app_id)
    except TrackerError as e:
        return _from_tracker_error(e, "Failed to read application")
    except Exception as e:
        logger.exception(f"❌ Error reading application {app_id}")
        return _error(500, "Failed to read application", str(e))
    return JSONResponse({"success": True, "application": record.to_document()})


@router.post("", response_class=JSONResponse, status_code=201)
def create_application(
    payload: Dict[str, Any] = Body(...),
    store: ApplicationStore = Depends(get_application_store),
):
    """
    Create an application. Requires company, role, dateReceived and
    jobDescription; any `id` in the body is ignored.
    """
    try:
        record = store.create_application(payload)
    except TrackerError as e:
        return _from_tracker_error(e, "Failed to create application")
    except Exception as e:
        logger.exception("❌ Error creating application")
        return _error(500, "Failed to create application", str(e))
    return JSONResponse(status_code=201, content={"success": True, "application": record.to_document()})


@router.put("/{app_id}", response_class=JSONResponse)
def update_application(
    app_id: str,
    payload: Dict[str, Any] = Body(...),
    store: ApplicationStore = Depends(get_application_store),
):
    """Shallow-merge the body onto the record. The record keeps its own id."""
    try:
        record = store.update_application(app_id, payload)
    except TrackerError as e:
        return _from_tracker_error(e, "Failed to update application")
    except Exception as e:
        logger.exception(f"❌ Error updating application {app_id}")
        return _error(500, "Failed to update application", str(e))
    return JSONResponse({"success": True, "application": record.to_document()})
