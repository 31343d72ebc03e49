import logging
from typing import Optional

from supabase import AsyncClient, acreate_client

from campus_connect.config import settings
from campus_connect.services.attendance_service import AttendanceService, FetchErrorPolicy
from campus_connect.services.attendance_source import SupabaseAttendanceSource

logger = logging.getLogger(__name__)

_client: Optional[AsyncClient] = None

async def get_supabase_client() -> AsyncClient:
    """
    Returns the process-wide async Supabase client, creating it on first use.
    """
    global _client
    if _client is None:
        try:
            _client = await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
        except Exception:
            logger.exception("Error creating Supabase client")
            raise
    return _client

# Dependencies for routers
async def get_db() -> AsyncClient:
    """FastAPI dependency to get the Supabase client."""
    return await get_supabase_client()

async def get_attendance_service() -> AttendanceService:
    """FastAPI dependency wiring the attendance service to Supabase."""
    db = await get_supabase_client()
    return AttendanceService(
        SupabaseAttendanceSource(db),
        on_fetch_error=FetchErrorPolicy(settings.ATTENDANCE_FETCH_ERROR_POLICY),
    )
