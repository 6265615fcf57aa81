from sqlalchemy import or_
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from typing import List, Optional, Tuple
import math

from ..models.user import User
from ..core.security import UserRole
from ..schemas.common import Pagination
from ..utils.validators import parse_search_query


class DoctorService:
    def __init__(self, db: Session):
        self.db = db

    def list_doctors(
        self,
        specialty: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[User], Pagination]:
        """Doctors ordered by rating, then review count."""
        query = self.db.query(User).filter(User.role == UserRole.DOCTOR)

        if specialty and specialty != "all":
            query = query.filter(User.specialty == specialty)

        term = parse_search_query(search)
        if term:
            pattern = f"%{term}%"
            query = query.filter(or_(
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
                User.specialty.ilike(pattern),
            ))

        total = query.count()
        doctors = (
            query.order_by(User.rating.desc(), User.review_count.desc(), User.id)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        pagination = Pagination(
            page=page,
            limit=limit,
            total=total,
            pages=math.ceil(total / limit),
        )
        return doctors, pagination

    def get_doctor(self, doctor_id: int) -> User:
        doctor = self.db.query(User).filter(User.id == doctor_id).first()
        if not doctor or not doctor.is_doctor:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Doctor not found"
            )
        return doctor

    def list_specialties(self) -> List[str]:
        rows = (
            self.db.query(User.specialty)
            .filter(User.role == UserRole.DOCTOR, User.specialty.isnot(None))
            .distinct()
            .order_by(User.specialty)
            .all()
        )
        return [row[0] for row in rows]
