from datetime import date, datetime
from typing import Iterator

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from cleanadmin.core.config import settings
from cleanadmin.core.numbers import to_float
from cleanadmin.db.session import get_session
from cleanadmin.domains.timesheets import service
from cleanadmin.domains.timesheets.sync import sync_week_timesheets
from cleanadmin.integrations.connecteam import ConnecteamClient
from cleanadmin.models import WEEKDAYS, Timesheet

router = APIRouter(prefix="/timesheets", tags=["timesheets"])


class DailyHours(BaseModel):
    monday: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    tuesday: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    wednesday: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    thursday: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    friday: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    saturday: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    sunday: float | None = Field(default=None, ge=0, allow_inf_nan=False)


class TimesheetUpsert(BaseModel):
    employeeId: int
    weekStartDate: date
    totalHours: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    dailyHours: DailyHours | None = None
    notes: str | None = None


class TimesheetOut(BaseModel):
    id: int
    employee_id: int
    employee_name: str | None = None
    employee_email: str | None = None
    employee_hourly_rate: float | None = None
    employee_job_title: str | None = None
    week_start_date: date
    week_end_date: date
    total_hours: float
    daily_hours: dict[str, float]
    notes: str | None = None
    synced_from_scheduler: bool
    synced_at: datetime | None = None
    updated_at: datetime | None = None


class TimesheetWeekOut(BaseModel):
    week_start_date: date
    week_end_date: date
    employee_count: int
    total_hours: float
    last_synced_at: datetime | None = None


class SyncRequest(BaseModel):
    weekStartDate: date | None = None


class SyncResultOut(BaseModel):
    week_start: date
    week_end: date
    employees_synced: int
    errors: list[str]
    synced_at: datetime


def get_connecteam_client() -> Iterator[ConnecteamClient]:
    with ConnecteamClient(settings.connecteam) as client:
        yield client


def serialize_timesheet(row: Timesheet) -> TimesheetOut:
    employee = row.employee
    return TimesheetOut(
        id=row.id,
        employee_id=row.employee_id,
        employee_name=employee.name if employee else None,
        employee_email=employee.email if employee else None,
        employee_hourly_rate=to_float(employee.hourly_rate) if employee else None,
        employee_job_title=employee.job_title if employee else None,
        week_start_date=row.week_start_date,
        week_end_date=row.week_end_date,
        total_hours=to_float(row.total_hours),
        daily_hours={day: to_float(getattr(row, f"{day}_hours")) for day in WEEKDAYS},
        notes=row.notes,
        synced_from_scheduler=bool(row.synced_from_scheduler),
        synced_at=row.synced_at,
        updated_at=row.updated_at,
    )


@router.get("/weeks", response_model=list[TimesheetWeekOut])
def list_weeks(db: Session = Depends(get_session)):
    return [TimesheetWeekOut(**week) for week in service.list_timesheet_weeks(db)]


@router.put("", response_model=TimesheetOut)
def upsert_timesheet(payload: TimesheetUpsert, db: Session = Depends(get_session)):
    row = service.upsert_timesheet(
        db,
        payload.employeeId,
        payload.weekStartDate,
        total_hours=payload.totalHours,
        daily_hours=payload.dailyHours.model_dump(exclude_none=True) if payload.dailyHours else None,
        notes=payload.notes,
    )
    return serialize_timesheet(row)


@router.post("/sync", response_model=SyncResultOut)
def sync_timesheets(
    payload: SyncRequest,
    db: Session = Depends(get_session),
    client: ConnecteamClient = Depends(get_connecteam_client),
):
    return SyncResultOut(**sync_week_timesheets(db, client, week_date=payload.weekStartDate))


@router.get("/{week_date}", response_model=list[TimesheetOut])
def timesheets_for_week(week_date: str, db: Session = Depends(get_session)):
    return [serialize_timesheet(row) for row in service.get_timesheets_for_week(db, week_date)]
