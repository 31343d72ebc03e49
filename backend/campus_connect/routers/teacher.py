from fastapi import APIRouter, Depends, status
from typing import List

from campus_connect.database import get_attendance_service
from campus_connect.dependencies import TeacherUser
from campus_connect.models.user import CurrentUser
from campus_connect.models.attendance import AttendanceMarkRequest, Subject
from campus_connect.services.attendance_service import AttendanceService

router = APIRouter(
    prefix="/api/teacher",
    tags=["Teacher"],
    dependencies=[TeacherUser]
)

@router.get("/subjects", response_model=List[Subject])
async def get_subject_catalog(
    service: AttendanceService = Depends(get_attendance_service)
):
    return await service.list_subjects()

@router.post("/attendance", status_code=status.HTTP_201_CREATED)
async def mark_class_attendance(
    request: AttendanceMarkRequest,
    current_user: CurrentUser = TeacherUser,
    service: AttendanceService = Depends(get_attendance_service)
):
    """
    Marks one class: a status per student for a subject on a date.
    Marking the same class again overwrites the earlier statuses.
    """
    written = await service.mark_attendance(request.subject_id, request.date, request.marks)
    return {
        "message": "Attendance marked successfully",
        "subject_id": request.subject_id,
        "date": str(request.date),
        "rows_written": written,
    }
