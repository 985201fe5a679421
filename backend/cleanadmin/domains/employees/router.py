from datetime import date, datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from cleanadmin.core.numbers import to_float
from cleanadmin.db.session import get_session
from cleanadmin.domains.employees import service
from cleanadmin.domains.payroll.schemas import PayrollRecordOut, serialize_record
from cleanadmin.domains.payroll.service import list_payroll_records
from cleanadmin.models import Employee

router = APIRouter(prefix="/employees", tags=["employees"])


class EmployeeBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str | None = None
    phone_number: str | None = None
    job_title: str | None = None
    employee_number: str | None = None
    employment_start_date: date | None = None
    hourly_rate: float = Field(default=0, ge=0, allow_inf_nan=False)
    is_active: bool = True
    scheduler_id: str | None = None


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: str | None = None
    phone_number: str | None = None
    job_title: str | None = None
    employee_number: str | None = None
    employment_start_date: date | None = None
    hourly_rate: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    is_active: bool | None = None
    scheduler_id: str | None = None


class EmployeeOut(EmployeeBase):
    id: int
    current_week_hours: float = 0
    last_sync_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


def _out(row: Employee) -> EmployeeOut:
    return EmployeeOut(
        id=row.id,
        name=row.name,
        email=row.email,
        phone_number=row.phone_number,
        job_title=row.job_title,
        employee_number=row.employee_number,
        employment_start_date=row.employment_start_date,
        hourly_rate=to_float(row.hourly_rate),
        is_active=row.is_active,
        scheduler_id=row.scheduler_id,
        current_week_hours=to_float(row.current_week_hours),
        last_sync_at=row.last_sync_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


@router.get("", response_model=list[EmployeeOut])
def list_employees(active: bool = False, db: Session = Depends(get_session)):
    return [_out(row) for row in service.list_employees(db, active_only=active)]


@router.post("", response_model=EmployeeOut, status_code=201)
def create_employee(payload: EmployeeCreate, db: Session = Depends(get_session)):
    return _out(service.create_employee(db, payload.model_dump()))


@router.get("/{employee_id}", response_model=EmployeeOut)
def get_employee(employee_id: int, db: Session = Depends(get_session)):
    return _out(service.get_employee_by_id(db, employee_id))


@router.patch("/{employee_id}", response_model=EmployeeOut)
def update_employee(employee_id: int, payload: EmployeeUpdate, db: Session = Depends(get_session)):
    return _out(service.update_employee(db, employee_id, payload.model_dump(exclude_unset=True)))


@router.delete("/{employee_id}", response_model=EmployeeOut)
def deactivate_employee(employee_id: int, db: Session = Depends(get_session)):
    return _out(service.deactivate_employee(db, employee_id))


@router.get("/{employee_id}/payroll", response_model=list[PayrollRecordOut])
def employee_payroll_history(employee_id: int, db: Session = Depends(get_session)):
    service.get_employee_by_id(db, employee_id)
    return [serialize_record(r) for r in list_payroll_records(db, employee_id=employee_id)]
