from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session
from app.models.parent_model import Parent
from app.models.student_model import Student
from app.schemas.parent_schema import ParentCreate, StudentCreate


def get_parent(db: Session, parent_id: str) -> Optional[Parent]:
    return db.get(Parent, parent_id)


def get_all_parents(db: Session, skip: int = 0, limit: int = 100) -> List[Parent]:
    stmt = select(Parent).offset(skip).limit(limit)
    return db.execute(stmt).scalars().all()


def create_parent(db: Session, parent_in: ParentCreate) -> Parent:
    db_parent = Parent(**parent_in.model_dump())
    db.add(db_parent)
    db.commit()
    db.refresh(db_parent)
    return db_parent


def get_student(db: Session, student_id: str) -> Optional[Student]:
    return db.get(Student, student_id)


def add_student(db: Session, parent: Parent, student_in: StudentCreate) -> Student:
    """Thêm học sinh cho phụ huynh."""
    db_student = Student(parent_id=parent.id, **student_in.model_dump())
    db.add(db_student)
    db.commit()
    db.refresh(db_student)
    return db_student
