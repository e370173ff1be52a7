"""Bootstrap wiring for the workflow services.

Builds every port and service once per process. The ``memory`` backend uses
the in-memory stubs; the ``postgres`` backend uses the SQLAlchemy adapters
over a shared session factory.

Usage:
    from branchflow.bootstrap.workflow import get_workflow_container

    container = get_workflow_container()
    await container.lifecycle.propose_event(...)

Tests install their own container with set_workflow_container() and clear
it with reset_workflow_container().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from structlog import get_logger

from branchflow.application.services import (
    AdmissionControllerService,
    CalendarQueryService,
    EventLifecycleService,
    ProctorAssignmentService,
)
from branchflow.bootstrap.database import get_session_factory
from branchflow.config.workflow_config import AppConfig, WorkflowConfig
from branchflow.infrastructure.adapters.log_notification_dispatcher import (
    LogNotificationDispatcher,
)
from branchflow.infrastructure.adapters.persistence import (
    PostgresApprovalLedger,
    PostgresCalendarSlotCounter,
    PostgresEventRepository,
    PostgresProctorLedger,
    PostgresRoleDirectory,
)
from branchflow.infrastructure.adapters.system_time_authority import SystemTimeAuthority
from branchflow.infrastructure.stubs import (
    ApprovalLedgerStub,
    CalendarSlotCounterStub,
    EventRepositoryStub,
    NotificationDispatcherStub,
    ProctorLedgerStub,
    RoleDirectoryStub,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from branchflow.application.ports import (
        ApprovalLedgerProtocol,
        CalendarSlotCounterProtocol,
        EventRepositoryProtocol,
        NotificationDispatcherProtocol,
        ProctorLedgerProtocol,
        RoleDirectoryProtocol,
        TimeAuthorityProtocol,
    )

logger = get_logger(__name__)


@dataclass(frozen=True)
class WorkflowContainer:
    """Every wired port and service of one process."""

    config: WorkflowConfig
    time_authority: TimeAuthorityProtocol
    directory: RoleDirectoryProtocol
    events: EventRepositoryProtocol
    ledger: ApprovalLedgerProtocol
    calendar: CalendarSlotCounterProtocol
    proctor_ledger: ProctorLedgerProtocol
    notifier: NotificationDispatcherProtocol
    admission: AdmissionControllerService
    lifecycle: EventLifecycleService
    calendar_queries: CalendarQueryService
    proctors: ProctorAssignmentService


def _assemble(
    *,
    config: WorkflowConfig,
    time_authority: TimeAuthorityProtocol,
    directory: RoleDirectoryProtocol,
    events: EventRepositoryProtocol,
    ledger: ApprovalLedgerProtocol,
    calendar: CalendarSlotCounterProtocol,
    proctor_ledger: ProctorLedgerProtocol,
    notifier: NotificationDispatcherProtocol,
) -> WorkflowContainer:
    admission = AdmissionControllerService(calendar, config)
    return WorkflowContainer(
        config=config,
        time_authority=time_authority,
        directory=directory,
        events=events,
        ledger=ledger,
        calendar=calendar,
        proctor_ledger=proctor_ledger,
        notifier=notifier,
        admission=admission,
        lifecycle=EventLifecycleService(
            events=events,
            ledger=ledger,
            admission=admission,
            directory=directory,
            notifier=notifier,
            time_authority=time_authority,
            config=config,
        ),
        calendar_queries=CalendarQueryService(events, admission),
        proctors=ProctorAssignmentService(
            ledger=proctor_ledger,
            directory=directory,
            time_authority=time_authority,
            config=config,
        ),
    )


def build_memory_container(
    config: WorkflowConfig | None = None,
    time_authority: TimeAuthorityProtocol | None = None,
) -> WorkflowContainer:
    """Wire the services over fresh in-memory stubs."""
    time_authority = time_authority or SystemTimeAuthority()
    directory = RoleDirectoryStub()
    ledger = ApprovalLedgerStub()
    return _assemble(
        config=config or WorkflowConfig(),
        time_authority=time_authority,
        directory=directory,
        events=EventRepositoryStub(ledger),
        ledger=ledger,
        calendar=CalendarSlotCounterStub(),
        proctor_ledger=ProctorLedgerStub(),
        notifier=NotificationDispatcherStub(directory, time_authority),
    )


def build_postgres_container(
    session_factory: async_sessionmaker[AsyncSession],
    config: WorkflowConfig | None = None,
    time_authority: TimeAuthorityProtocol | None = None,
) -> WorkflowContainer:
    """Wire the services over the PostgreSQL adapters."""
    directory = PostgresRoleDirectory(session_factory)
    return _assemble(
        config=config or WorkflowConfig(),
        time_authority=time_authority or SystemTimeAuthority(),
        directory=directory,
        events=PostgresEventRepository(session_factory),
        ledger=PostgresApprovalLedger(session_factory),
        calendar=PostgresCalendarSlotCounter(session_factory),
        proctor_ledger=PostgresProctorLedger(session_factory),
        notifier=LogNotificationDispatcher(directory),
    )


def build_container(
    app_config: AppConfig,
    workflow_config: WorkflowConfig | None = None,
) -> WorkflowContainer:
    """Wire the services for the backend named in ``app_config``."""
    workflow_config = workflow_config or WorkflowConfig.from_environment()
    log = logger.bind(storage=app_config.storage, environment=app_config.environment)

    if app_config.storage == "postgres":
        container = build_postgres_container(
            get_session_factory(app_config.database_url), workflow_config
        )
    else:
        container = build_memory_container(workflow_config)

    log.info("workflow_container_built", daily_event_cap=workflow_config.daily_event_cap)
    return container


_container: WorkflowContainer | None = None


def get_workflow_container() -> WorkflowContainer:
    """Get the process-wide container, building it from the environment."""
    global _container
    if _container is None:
        _container = build_container(AppConfig.from_environment())
    return _container


def set_workflow_container(container: WorkflowContainer) -> None:
    """Set a custom container (for testing)."""
    global _container
    _container = container


def reset_workflow_container() -> None:
    """Reset the singleton container (for testing)."""
    global _container
    _container = None
