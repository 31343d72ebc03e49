from pydantic import BaseModel
from typing import Dict, Literal

Role = Literal['student', 'teacher', 'office_staff']

# Profile table holding the rows of each role, keyed by email.
ROLE_TABLES: Dict[str, str] = {
    "student": "student",
    "teacher": "teacher",
    "office_staff": "office_staff",
}

class CurrentUser(BaseModel):
    user_id: str
    email: str
    role: Role
