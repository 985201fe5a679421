from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cleanadmin.api.routes import health
from cleanadmin.core.config import settings
from cleanadmin.core.errors import register_error_handlers
from cleanadmin.core.logging import configure_logging, get_logger
from cleanadmin.core.monitoring import configure_error_monitoring
from cleanadmin.core.observability import configure_observability
from cleanadmin.domains.employees.router import router as employee_router
from cleanadmin.domains.payroll.router import router as payroll_router
from cleanadmin.domains.reporting.router import router as reporting_router
from cleanadmin.domains.timesheets.router import router as timesheet_router

configure_logging(settings.log_level)
configure_observability()
configure_error_monitoring()
logger = get_logger(__name__)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin).rstrip("/") for origin in settings.cors_origins] or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_error_handlers(app)

app.include_router(health.router)
app.include_router(employee_router)
app.include_router(timesheet_router)
app.include_router(payroll_router)
app.include_router(reporting_router)


@app.on_event("startup")
def startup_event() -> None:
    logger.info("startup_complete", env=settings.env)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Cleaning admin API running", "environment": settings.env}
