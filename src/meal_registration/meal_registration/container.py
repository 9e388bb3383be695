from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .activity.mysql_activity_repository import MySQLActivityLogRepository
from .activity.repository import ActivityLogRepository
from .activity.service import ActivityLogService
from .core.constants import DEFAULT_SUMMARY_CACHE_TTL_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .maintenance.auto_reset import AutoResetService
from .orders.mysql_order_repository import MySQLOrderRepository
from .orders.repository import OrderRepository
from .registration.service import RegistrationService
from .reporting.cache import SummaryCache
from .reporting.service import ReportingService
from .roster.mysql_roster_repository import MySQLRosterRepository
from .roster.repository import RosterRepository
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    orders_repo: OrderRepository
    activity_repo: ActivityLogRepository
    roster_repo: RosterRepository
    settings_repo: SettingsRepository

    settings_service: SettingsService
    activity_service: ActivityLogService
    registration_service: RegistrationService
    reporting_service: ReportingService
    auto_reset_service: AutoResetService


def assemble(
    *,
    orders: OrderRepository,
    activity: ActivityLogRepository,
    roster: RosterRepository,
    settings: SettingsRepository,
    conn: Optional[DatabaseConnection] = None,
    cache: Optional[SummaryCache] = None,
    **service_kwargs,
) -> Container:
    """Wire services on top of any repository implementations (MySQL or in-memory).

    Each container owns its summary cache; containers sharing repositories only see
    each other's writes once their cached entries expire.
    """

    settings_service = SettingsService(settings)
    activity_service = ActivityLogService(activity, roster)
    reporting_service = ReportingService(
        orders,
        activity,
        roster,
        settings_service,
        cache=cache if cache is not None else SummaryCache(),
        **service_kwargs,
    )
    registration_service = RegistrationService(
        orders,
        activity,
        roster,
        settings_service,
        listeners=[reporting_service.notify_changed],
        **service_kwargs,
    )
    auto_reset_service = AutoResetService(
        orders,
        roster,
        settings_service,
        listeners=[reporting_service.notify_changed],
        **service_kwargs,
    )

    return Container(
        conn=conn,
        orders_repo=orders,
        activity_repo=activity,
        roster_repo=roster,
        settings_repo=settings,
        settings_service=settings_service,
        activity_service=activity_service,
        registration_service=registration_service,
        reporting_service=reporting_service,
        auto_reset_service=auto_reset_service,
    )


def build_container(*, db_config: dict, cache_ttl_seconds: float = DEFAULT_SUMMARY_CACHE_TTL_SECONDS) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return assemble(
        conn=conn,
        orders=MySQLOrderRepository(conn),
        activity=MySQLActivityLogRepository(conn),
        roster=MySQLRosterRepository(conn),
        settings=MySQLSettingsRepository(conn),
        cache=SummaryCache(cache_ttl_seconds),
    )
