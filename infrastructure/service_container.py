"""
Service container for dependency injection and initialization.

This module centralizes service creation and wiring for the surrounding
application.

Usage:
    container = ServiceContainer(config)
    container.initialize()

    # Access services
    settlement_service = container.settlement_service
    pick_service = container.pick_service
"""

import logging
from dataclasses import dataclass
from typing import Any

import config as app_config
from database import Database
from domain.services.judging_service import JudgingService
from domain.services.payout_service import PayoutService

# Repositories
from repositories.activity_repository import ActivityRepository
from repositories.bet_repository import BetRepository
from repositories.ledger_repository import LedgerRepository

logger = logging.getLogger("sidebet.infrastructure.container")


@dataclass
class RepositoryContainer:
    """Container for all repositories."""

    bet: BetRepository | None = None
    ledger: LedgerRepository | None = None
    activity: ActivityRepository | None = None


@dataclass
class ServiceConfig:
    """Configuration for service initialization."""

    # Database
    db_path: str = app_config.DB_PATH

    # Judging
    yes_no_void_on_no_winners: bool = app_config.YES_NO_VOID_ON_NO_WINNERS

    # Settlement retries
    settlement_max_attempts: int = app_config.SETTLEMENT_MAX_ATTEMPTS
    settlement_retry_delay_seconds: float = app_config.SETTLEMENT_RETRY_DELAY_SECONDS

    # Side effects
    enable_notifications: bool = True
    enable_activity_feed: bool = True


class ServiceContainer:
    """
    Central container for all application services.

    Handles proper initialization order and dependency injection.

    Example:
        container = ServiceContainer(ServiceConfig(db_path="bets.db"))
        container.initialize()

        bet = container.bet_service.create_bet(...)
    """

    def __init__(self, config: ServiceConfig | None = None):
        """
        Initialize the container with configuration.

        Args:
            config: Service configuration (uses defaults if None)
        """
        self.config = config or ServiceConfig()
        self._initialized = False
        self._repos = RepositoryContainer()

        self._database: Database | None = None
        self._services: dict[str, Any] = {}

    @property
    def is_initialized(self) -> bool:
        """Check if container has been initialized."""
        return self._initialized

    def initialize(self) -> None:
        """
        Initialize all services in correct order.

        This method is idempotent - calling it multiple times has no effect.
        """
        if self._initialized:
            logger.debug("ServiceContainer already initialized, skipping")
            return

        logger.info("Initializing ServiceContainer...")

        self._init_database()
        self._init_repositories()
        self._init_side_effect_services()
        self._init_core_services()

        self._initialized = True
        logger.info("ServiceContainer initialization complete")

    def _init_database(self) -> None:
        """Initialize database and run migrations."""
        logger.debug(f"Initializing database at {self.config.db_path}")
        self._database = Database(self.config.db_path)

    def _init_repositories(self) -> None:
        """Initialize all repositories."""
        logger.debug("Initializing repositories")

        db_path = self.config.db_path
        self._repos.bet = BetRepository(db_path)
        self._repos.ledger = LedgerRepository(db_path)
        self._repos.activity = ActivityRepository(db_path)

    def _init_side_effect_services(self) -> None:
        """Initialize notification and activity feed collaborators."""
        from services.activity_service import ActivityFeedService
        from services.notification_service import NotificationService

        self._services["notification"] = (
            NotificationService(self._repos.activity) if self.config.enable_notifications else None
        )
        self._services["activity"] = (
            ActivityFeedService(self._repos.activity) if self.config.enable_activity_feed else None
        )

    def _init_core_services(self) -> None:
        """Initialize bet lifecycle services."""
        logger.debug("Initializing core services")

        from services.bet_service import BetService
        from services.ledger_service import LedgerService
        from services.pick_service import PickService
        from services.settlement_service import SettlementService

        self._services["bet"] = BetService(
            self._repos.bet,
            notification_service=self._services["notification"],
            activity_service=self._services["activity"],
        )
        self._services["pick"] = PickService(self._repos.bet)
        self._services["settlement"] = SettlementService(
            self._repos.bet,
            judging_service=JudgingService(void_yes_no_without_winners=self.config.yes_no_void_on_no_winners),
            payout_service=PayoutService(),
            notification_service=self._services["notification"],
            activity_service=self._services["activity"],
            max_attempts=self.config.settlement_max_attempts,
            retry_delay_seconds=self.config.settlement_retry_delay_seconds,
        )
        self._services["ledger"] = LedgerService(self._repos.ledger)

    # --- Accessors ---

    def _get_service(self, name: str):
        if not self._initialized:
            raise RuntimeError("ServiceContainer not initialized. Call initialize() first.")
        return self._services.get(name)

    @property
    def database(self) -> Database | None:
        return self._database

    @property
    def repos(self) -> RepositoryContainer:
        return self._repos

    @property
    def bet_service(self):
        return self._get_service("bet")

    @property
    def pick_service(self):
        return self._get_service("pick")

    @property
    def settlement_service(self):
        return self._get_service("settlement")

    @property
    def ledger_service(self):
        return self._get_service("ledger")

    @property
    def notification_service(self):
        return self._get_service("notification")

    @property
    def activity_service(self):
        return self._get_service("activity")
