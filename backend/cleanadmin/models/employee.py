from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, Numeric, String

from cleanadmin.db.session import Base


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=True)
    phone_number = Column(String(50), nullable=True)
    job_title = Column(String(200), nullable=True)
    employee_number = Column(String(50), nullable=True)
    employment_start_date = Column(Date, nullable=True)

    hourly_rate = Column(Numeric(10, 2), nullable=False, default=0)
    # Employees are deactivated, never deleted, so payroll history keeps its references
    is_active = Column(Boolean, nullable=False, default=True)

    # User id in the scheduling provider, used to match synced timesheets
    scheduler_id = Column(String(64), nullable=True, unique=True)
    current_week_hours = Column(Numeric(8, 2), nullable=False, default=0)
    last_sync_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
