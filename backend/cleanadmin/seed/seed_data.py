from datetime import date

from sqlalchemy.orm import Session

from cleanadmin.db.session import session_scope
from cleanadmin.models import Employee, Timesheet

DEMO_WEEK = date(2025, 1, 6)


def seed(session: Session) -> None:
    """Load a small crew with one week of timesheets for local demos."""
    crew = [
        Employee(name="Ava Thompson", email="ava@example.com", hourly_rate=30, scheduler_id="9001"),
        Employee(name="Liam Nguyen", email="liam@example.com", hourly_rate=28.5, scheduler_id="9002"),
        Employee(name="Mia Patel", hourly_rate=32, is_active=False),
    ]
    session.add_all(crew)
    session.flush()

    hours = {crew[0].id: 38, crew[1].id: 0, crew[2].id: 12}
    session.add_all(
        [
            Timesheet(
                employee_id=employee_id,
                week_start_date=DEMO_WEEK,
                week_end_date=date(2025, 1, 12),
                total_hours=total,
            )
            for employee_id, total in hours.items()
        ]
    )
    session.commit()


def run() -> None:
    with session_scope() as session:
        seed(session)


if __name__ == "__main__":
    run()
