"""Report which collections and cache directories can be scanned."""

import asyncio

from ..models.system import SystemInfo
from ..sources.sqlite_index import SQLiteMetadataSource
from .scan_manager import ScanManager


async def inspect_system(manager: ScanManager) -> SystemInfo:
    """Gather source availability for the dashboard."""
    source = manager.source
    scanner = manager.scanner

    sources = await asyncio.to_thread(source.check_availability)
    for category_scanner in scanner.scanners.values():
        sources.append(await asyncio.to_thread(
            category_scanner.check_availability, source, manager.settings,
        ))

    info = SystemInfo(sources=sources)
    if isinstance(source, SQLiteMetadataSource):
        info.index_path = source.db_path
        info.indexed_files = await asyncio.to_thread(source.count)
    return info
