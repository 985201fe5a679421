"""create core tables

Revision ID: 0001
Revises: None
Create Date: 2025-01-03
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def upgrade() -> None:
    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone_number", sa.String(length=50), nullable=True),
        sa.Column("job_title", sa.String(length=200), nullable=True),
        sa.Column("employee_number", sa.String(length=50), nullable=True),
        sa.Column("employment_start_date", sa.Date(), nullable=True),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("scheduler_id", sa.String(length=64), nullable=True),
        sa.Column("current_week_hours", sa.Numeric(8, 2), nullable=False, server_default="0"),
        sa.Column("last_sync_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("scheduler_id"),
    )
    op.create_index(op.f("ix_employees_id"), "employees", ["id"], unique=False)

    op.create_table(
        "timesheets",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("week_start_date", sa.Date(), nullable=False),
        sa.Column("week_end_date", sa.Date(), nullable=False),
        sa.Column("total_hours", sa.Numeric(8, 2), nullable=False, server_default="0"),
        *[
            sa.Column(f"{day}_hours", sa.Numeric(6, 2), nullable=False, server_default="0")
            for day in WEEKDAYS
        ],
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("synced_from_scheduler", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("synced_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id", "week_start_date", name="uq_timesheets_employee_week"),
    )
    op.create_index(op.f("ix_timesheets_id"), "timesheets", ["id"], unique=False)
    op.create_index(op.f("ix_timesheets_employee_id"), "timesheets", ["employee_id"], unique=False)
    op.create_index(
        op.f("ix_timesheets_week_start_date"), "timesheets", ["week_start_date"], unique=False
    )

    op.create_table(
        "payroll_records",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("pay_date", sa.Date(), nullable=False),
        sa.Column("hours_worked", sa.Numeric(8, 2), nullable=False, server_default="0"),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("total_pay", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id", "pay_date", name="uq_payroll_records_employee_week"),
    )
    op.create_index(op.f("ix_payroll_records_id"), "payroll_records", ["id"], unique=False)
    op.create_index(
        op.f("ix_payroll_records_employee_id"), "payroll_records", ["employee_id"], unique=False
    )
    op.create_index(op.f("ix_payroll_records_pay_date"), "payroll_records", ["pay_date"], unique=False)

    op.create_table(
        "payroll_transactions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("payroll_record_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("paid_at", sa.DateTime(), nullable=False),
        sa.Column("method", sa.String(length=50), nullable=True),
        sa.Column("memo", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("amount > 0", name="ck_payroll_transactions_amount_positive"),
        sa.ForeignKeyConstraint(["payroll_record_id"], ["payroll_records.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_payroll_transactions_id"), "payroll_transactions", ["id"], unique=False
    )
    op.create_index(
        op.f("ix_payroll_transactions_payroll_record_id"),
        "payroll_transactions",
        ["payroll_record_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_payroll_transactions_payroll_record_id"), table_name="payroll_transactions")
    op.drop_index(op.f("ix_payroll_transactions_id"), table_name="payroll_transactions")
    op.drop_table("payroll_transactions")
    op.drop_index(op.f("ix_payroll_records_pay_date"), table_name="payroll_records")
    op.drop_index(op.f("ix_payroll_records_employee_id"), table_name="payroll_records")
    op.drop_index(op.f("ix_payroll_records_id"), table_name="payroll_records")
    op.drop_table("payroll_records")
    op.drop_index(op.f("ix_timesheets_week_start_date"), table_name="timesheets")
    op.drop_index(op.f("ix_timesheets_employee_id"), table_name="timesheets")
    op.drop_index(op.f("ix_timesheets_id"), table_name="timesheets")
    op.drop_table("timesheets")
    op.drop_index(op.f("ix_employees_id"), table_name="employees")
    op.drop_table("employees")
