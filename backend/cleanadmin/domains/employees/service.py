from __future__ import annotations

from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cleanadmin.core.errors import NotFound, ValidationError
from cleanadmin.core.logging import get_logger
from cleanadmin.core.numbers import quantize
from cleanadmin.models import Employee

logger = get_logger(__name__)

_OPTIONAL_TEXT_FIELDS = ("email", "phone_number", "job_title", "employee_number", "scheduler_id")
_REQUIRED_FIELDS = ("name", "hourly_rate", "is_active")


def _clean(values: dict[str, Any]) -> dict[str, Any]:
    cleaned = dict(values)
    for field in _OPTIONAL_TEXT_FIELDS:
        if field in cleaned and isinstance(cleaned[field], str):
            cleaned[field] = cleaned[field].strip() or None
    if isinstance(cleaned.get("name"), str):
        cleaned["name"] = cleaned["name"].strip()
    if cleaned.get("hourly_rate") is not None:
        cleaned["hourly_rate"] = quantize(cleaned["hourly_rate"])
    return cleaned


def _commit(db: Session, row: Employee) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("Scheduler id is already assigned to another employee") from None
    db.refresh(row)


def list_employees(db: Session, active_only: bool = False) -> list[Employee]:
    query = db.query(Employee)
    if active_only:
        query = query.filter(Employee.is_active.is_(True))
    return query.order_by(Employee.name.asc(), Employee.id.asc()).all()


def get_employee_by_id(db: Session, employee_id: int) -> Employee:
    row = db.query(Employee).filter(Employee.id == employee_id).one_or_none()
    if not row:
        raise NotFound("Employee not found", {"employee_id": employee_id})
    return row


def create_employee(db: Session, values: dict[str, Any]) -> Employee:
    row = Employee(**_clean(values))
    db.add(row)
    _commit(db, row)
    logger.info("employee_created", employee_id=row.id, hourly_rate=str(row.hourly_rate))
    return row


def update_employee(db: Session, employee_id: int, patch: dict[str, Any]) -> Employee:
    row = get_employee_by_id(db, employee_id)
    for key, value in _clean(patch).items():
        if value is None and key in _REQUIRED_FIELDS:
            continue
        setattr(row, key, value)
    _commit(db, row)
    logger.info("employee_updated", employee_id=row.id, fields=sorted(patch))
    return row


def deactivate_employee(db: Session, employee_id: int) -> Employee:
    return update_employee(db, employee_id, {"is_active": False})
