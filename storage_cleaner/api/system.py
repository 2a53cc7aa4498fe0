"""System info, index and file utility endpoints."""

import os

from fastapi import APIRouter, HTTPException, Query

from ..errors import ScanError
from ..services.scan_manager import scan_manager
from ..services.system_inspector import inspect_system
from ..utils.formatting import format_size
from .scan import error_response

router = APIRouter(tags=["system"])


@router.get("/system/info")
async def get_system_info():
    return await inspect_system(scan_manager)


@router.post("/system/reindex")
async def reindex():
    try:
        indexed = await scan_manager.reindex()
    except ScanError as e:
        return error_response(e)
    return {"indexed_files": indexed}


@router.get("/files/size")
async def get_file_size(path: str = Query(..., min_length=1)):
    try:
        return {"path": path, "size": os.path.getsize(path)}
    except OSError:
        raise HTTPException(status_code=404, detail=f"Cannot read size of {path}")


@router.get("/format-size")
async def get_formatted_size(size: int):
    return {"size": size, "formatted": format_size(size)}
