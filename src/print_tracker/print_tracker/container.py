from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .audit.service import AuditService
from .audit.sql_audit_repository import SQLAuditRepository
from .core.constants import (
    DEFAULT_BACKUP_KEEP,
    DEFAULT_BACKUP_TIME,
    DEFAULT_BLOCK_MINUTES,
    DEFAULT_LOCKOUT_MINUTES,
    DEFAULT_LOGIN_ATTEMPT_WINDOW_MINUTES,
    DEFAULT_LOGIN_MAX_ATTEMPTS,
    DEFAULT_SWEEP_INTERVAL_SECONDS,
)
from .database.connection import DataAccess
from .jobs.calculator.engine import CalculationEngine
from .jobs.service import JobService
from .jobs.sql_job_repository import SQLJobRepository
from .machines.service import MachineService
from .machines.sql_machine_repository import SQLMachineRepository
from .maintenance.backup import BackupService
from .maintenance.scheduler import BackupScheduler
from .pricing.service import PricingService
from .pricing.sql_pricing_repository import SQLPricingRepository
from .reports.service import ReportService
from .reports.sql_report_repository import SQLReportRepository
from .security.login_attempts import LoginAttemptGuard
from .security.rate_limiter import RateLimiter, rules_from_config, with_login_floor
from .security.sweeper import ExpirySweeper
from .users.service import AuthService, UserService
from .users.sql_user_repository import SQLUserRepository


@dataclass(frozen=True)
class Container:
    data: DataAccess

    users_repo: SQLUserRepository
    machines_repo: SQLMachineRepository
    pricing_repo: SQLPricingRepository
    jobs_repo: SQLJobRepository
    reports_repo: SQLReportRepository
    audit_repo: SQLAuditRepository

    login_guard: LoginAttemptGuard
    rate_limiter: RateLimiter
    sweeper: ExpirySweeper

    auth_service: AuthService
    user_service: UserService
    machine_service: MachineService
    pricing_service: PricingService
    job_service: JobService
    report_service: ReportService
    audit_service: AuditService
    backup_service: BackupService
    backup_scheduler: BackupScheduler


def build_container(*, data: DataAccess, settings: Optional[Any] = None) -> Container:
    """Wire repositories, services and security state around one data access object.

    ``settings`` is a config module (or any object with the same attributes);
    missing attributes fall back to the built-in defaults.
    """

    def setting(name: str, default: Any) -> Any:
        return getattr(settings, name, default) if settings is not None else default

    users_repo = SQLUserRepository(data)
    machines_repo = SQLMachineRepository(data)
    pricing_repo = SQLPricingRepository(data)
    jobs_repo = SQLJobRepository(data)
    reports_repo = SQLReportRepository(data)
    audit_repo = SQLAuditRepository(data)

    login_max_attempts = int(setting("LOGIN_MAX_ATTEMPTS", DEFAULT_LOGIN_MAX_ATTEMPTS))
    login_guard = LoginAttemptGuard(
        max_attempts=login_max_attempts,
        window_minutes=int(setting("LOGIN_ATTEMPT_WINDOW_MINUTES", DEFAULT_LOGIN_ATTEMPT_WINDOW_MINUTES)),
        lockout_minutes=int(setting("LOCKOUT_MINUTES", DEFAULT_LOCKOUT_MINUTES)),
    )
    rate_limiter = RateLimiter(
        with_login_floor(rules_from_config(setting("RATE_LIMITS", None)), login_max_attempts),
        block_minutes=int(setting("RATE_LIMIT_BLOCK_MINUTES", DEFAULT_BLOCK_MINUTES)),
    )
    sweeper = ExpirySweeper(
        [login_guard, rate_limiter],
        interval_seconds=float(setting("SWEEP_INTERVAL_SECONDS", DEFAULT_SWEEP_INTERVAL_SECONDS)),
    )

    auth_service = AuthService(users_repo, login_guard)
    user_service = UserService(users_repo, machines_repo)
    machine_service = MachineService(machines_repo)
    pricing_service = PricingService(pricing_repo)
    job_service = JobService(jobs_repo, engine=CalculationEngine())
    report_service = ReportService(reports_repo, max_workers=int(setting("REPORT_MAX_WORKERS", 5)))
    audit_service = AuditService(audit_repo)
    backup_service = BackupService(
        backend=data.dialect,
        backup_dir=setting("BACKUP_DIR", "backups"),
        db_config=setting("DB_CONFIG", None),
        sqlite_path=setting("SQLITE_PATH", None),
        keep=int(setting("BACKUP_KEEP", DEFAULT_BACKUP_KEEP)),
    )
    backup_scheduler = BackupScheduler(backup_service, run_at=setting("BACKUP_TIME", DEFAULT_BACKUP_TIME))

    return Container(
        data=data,
        users_repo=users_repo,
        machines_repo=machines_repo,
        pricing_repo=pricing_repo,
        jobs_repo=jobs_repo,
        reports_repo=reports_repo,
        audit_repo=audit_repo,
        login_guard=login_guard,
        rate_limiter=rate_limiter,
        sweeper=sweeper,
        auth_service=auth_service,
        user_service=user_service,
        machine_service=machine_service,
        pricing_service=pricing_service,
        job_service=job_service,
        report_service=report_service,
        audit_service=audit_service,
        backup_service=backup_service,
        backup_scheduler=backup_scheduler,
    )
