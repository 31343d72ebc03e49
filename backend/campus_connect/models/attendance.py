from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional, List, Union
from enum import Enum
from datetime import date

Status = Literal['present', 'absent']

# Supabase tables in the project mix bigint and uuid primary keys.
RowId = Union[int, str]

class StatusTier(str, Enum):
    GOOD = "Good"
    WARNING = "Warning"

class Subject(BaseModel):
    id: RowId
    name: str

    model_config = ConfigDict(from_attributes=True)

class StudentRef(BaseModel):
    id: RowId
    email: Optional[str] = None

class AttendanceRecord(BaseModel):
    id: Optional[RowId] = None
    student_id: RowId
    subject_id: RowId
    date: date
    status: Status

    model_config = ConfigDict(from_attributes=True, frozen=True)

class SubjectAttendanceSummary(BaseModel):
    subject_id: RowId = Field(serialization_alias="subjectId")
    name: str
    total_classes: int = Field(serialization_alias="totalClasses")
    present_classes: int = Field(serialization_alias="presentClasses")
    percentage: int

class AttendanceReport(BaseModel):
    overall_percentage: int = Field(serialization_alias="overallPercentage")
    status: StatusTier
    status_color: str = Field(serialization_alias="statusColor")
    status_message: str = Field(serialization_alias="statusMessage")
    subject_summaries: List[SubjectAttendanceSummary] = Field(
        default_factory=list, serialization_alias="subjectSummaries"
    )
    skipped_subjects: List[RowId] = Field(
        default_factory=list, serialization_alias="skippedSubjects"
    )

class MonthlyAttendance(BaseModel):
    month: str  # e.g. "March 2025"
    records: List[AttendanceRecord]

class AttendanceMark(BaseModel):
    student_id: RowId
    status: Status

class AttendanceMarkRequest(BaseModel):
    subject_id: RowId
    date: date
    marks: List[AttendanceMark]
