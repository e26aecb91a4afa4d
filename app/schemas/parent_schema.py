from typing import List, Optional
from app.schemas.base_schema import CamelModel


class StudentCreate(CamelModel):
    name: str
    nickname: Optional[str] = None


class StudentRead(StudentCreate):
    id: str
    parent_id: Optional[str] = None


class ParentCreate(CamelModel):
    display_name: str
    phone: Optional[str] = None
    line_user_id: Optional[str] = None


class ParentRead(ParentCreate):
    id: str
    children: List[StudentRead] = []
