from fastapi import APIRouter, Depends
from typing import List

from campus_connect.database import get_attendance_service
from campus_connect.dependencies import StudentUser
from campus_connect.models.user import CurrentUser
from campus_connect.models.attendance import AttendanceReport, MonthlyAttendance
from campus_connect.services.attendance_service import AttendanceService

router = APIRouter(
    prefix="/api/student",
    tags=["Student"],
    dependencies=[StudentUser]
)

@router.get("/attendance", response_model=AttendanceReport)
async def get_overall_attendance(
    current_user: CurrentUser = StudentUser,
    service: AttendanceService = Depends(get_attendance_service)
):
    """
    Per-subject percentages, the overall figure and its status for the
    signed-in student. A student without a profile row gets an empty report.
    """
    return await service.fetch_and_aggregate(current_user.email)

@router.get("/attendance/{subject_id}", response_model=List[MonthlyAttendance])
async def get_attendance_for_subject(
    subject_id: str,
    current_user: CurrentUser = StudentUser,
    service: AttendanceService = Depends(get_attendance_service)
):
    return await service.subject_records(current_user.email, subject_id)
