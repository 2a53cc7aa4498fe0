"""Scan API endpoints."""

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse

from ..errors import ScanError, ScanErrorKind
from ..models.common import Category
from ..services.scan_manager import scan_manager

router = APIRouter(prefix="/scan", tags=["scan"])


def error_response(e: ScanError) -> JSONResponse:
    status = 409 if e.kind is ScanErrorKind.SCAN_IN_PROGRESS else 500
    return JSONResponse(status_code=status, content={"kind": e.kind.value, "message": e.message})


@router.post("")
async def scan_files():
    """Run a full scan and return its summary."""
    try:
        return await scan_manager.run_scan()
    except ScanError as e:
        return error_response(e)


@router.post("/start")
async def start_scan():
    try:
        job = await scan_manager.start_scan()
    except ScanError as e:
        return error_response(e)
    return {"job_id": job.id, "status": job.status}


@router.get("/job")
async def get_scan_job():
    job = scan_manager.get_job()
    if not job:
        raise HTTPException(status_code=404, detail="No scan has been started")
    return job


@router.post("/cancel")
async def cancel_scan():
    return {"cancelled": scan_manager.cancel_scan()}


@router.get("/results/{category}")
async def get_results(
    category: Category,
    offset: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    sort_by: str = Query("size", pattern="^(name|size|modified)$"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
):
    job = scan_manager.get_job()
    if not job or job.summary is None:
        raise HTTPException(status_code=404, detail="No scan results available")

    records = scan_manager.get_results(category)
    sort_key_map = {
        "name": lambda r: r.name.lower(),
        "size": lambda r: r.size,
        "modified": lambda r: r.modified_at,
    }
    records = sorted(records, key=sort_key_map[sort_by], reverse=sort_order == "desc")

    return {
        "job_id": job.id,
        "category": category,
        "total": len(records),
        "offset": offset,
        "limit": limit,
        "files": records[offset:offset + limit],
    }
