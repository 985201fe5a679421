from datetime import date, datetime

from pydantic import BaseModel, Field

from cleanadmin.core.numbers import to_float
from cleanadmin.core.weeks import week_end
from cleanadmin.domains.payroll.ledger import summarize
from cleanadmin.models import PayrollRecord, PayrollTransaction


class PayrollEmployeeOut(BaseModel):
    id: int
    name: str
    hourly_rate: float
    scheduler_id: str | None = None


class TransactionOut(BaseModel):
    id: int
    payroll_record_id: int
    amount: float
    paid_at: datetime
    method: str | None = None
    memo: str | None = None
    created_at: datetime | None = None


class PayrollRecordOut(BaseModel):
    id: int
    employee_id: int
    date: date
    week_end: date
    hours_worked: float
    hourly_rate: float
    total_pay: float
    total_paid: float
    balance: float
    overpaid: float
    status: str
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    employee: PayrollEmployeeOut | None = None
    transactions: list[TransactionOut] = []


class PayrollRecordCreate(BaseModel):
    employeeId: int
    date: date
    hoursWorked: float = Field(..., ge=0, allow_inf_nan=False)
    hourlyRate: float = Field(..., ge=0, allow_inf_nan=False)
    notes: str | None = None


class PayrollRecordUpdate(BaseModel):
    status: str | None = None
    hoursWorked: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    hourlyRate: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    totalPay: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    notes: str | None = None


class PaymentCreate(BaseModel):
    amount: float = Field(..., allow_inf_nan=False)
    paidAt: datetime | None = None
    method: str | None = Field(default=None, max_length=50)
    memo: str | None = None


class PaymentResultOut(BaseModel):
    record: PayrollRecordOut
    transaction: TransactionOut


class WeeklyGenerateRequest(BaseModel):
    weekStartDate: str = Field(..., min_length=1)


class GenerationFailureOut(BaseModel):
    employee_id: int
    employee_name: str
    error: str


class GenerationResultOut(BaseModel):
    week_start: date
    week_end: date
    created: int
    updated: int
    timesheets_found: int
    records: list[PayrollRecordOut]
    failures: list[GenerationFailureOut]


class WeeklyHoursUpdate(BaseModel):
    employeeId: int
    hours: float = Field(..., ge=0, allow_inf_nan=False)


class PayrollWeekOut(BaseModel):
    week_id: str
    week_start: date
    week_end: date
    record_count: int


def serialize_transaction(row: PayrollTransaction) -> TransactionOut:
    return TransactionOut(
        id=row.id,
        payroll_record_id=row.payroll_record_id,
        amount=to_float(row.amount),
        paid_at=row.paid_at,
        method=row.method,
        memo=row.memo,
        created_at=row.created_at,
    )


def serialize_record(row: PayrollRecord) -> PayrollRecordOut:
    transactions = list(row.transactions)
    summary = summarize(row.total_pay, [t.amount for t in transactions])
    employee = row.employee
    return PayrollRecordOut(
        id=row.id,
        employee_id=row.employee_id,
        date=row.pay_date,
        week_end=week_end(row.pay_date),
        hours_worked=to_float(row.hours_worked),
        hourly_rate=to_float(row.hourly_rate),
        total_pay=to_float(row.total_pay),
        total_paid=float(summary.total_paid),
        balance=float(summary.balance),
        overpaid=float(summary.overpaid),
        status=row.status,
        notes=row.notes,
        created_at=row.created_at,
        updated_at=row.updated_at,
        employee=PayrollEmployeeOut(
            id=employee.id,
            name=employee.name,
            hourly_rate=to_float(employee.hourly_rate),
            scheduler_id=employee.scheduler_id,
        )
        if employee
        else None,
        transactions=[serialize_transaction(t) for t in transactions],
    )
