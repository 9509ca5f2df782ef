"""
Habit engine coordinator.

Wraps the pure core in the load -> mutate -> save cycle: it reads
routines and settings from the store, runs the streak tracker and the
plan builder, writes results back and hands the plan to the delivery
collaborator. One engine instance is the single writer for its store.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

import structlog

from .config.delivery import RetryConfig
from .config.loader import ConfigLoader
from .config.validation import ConfigValidator, normalize_settings
from .delivery.base import BaseNotificationDelivery, DeliveryHandle, DeliveryStatus
from .errors import PermissionDeniedError, RoutineNotFoundError, StorageError
from .models.history import HistoryEntry
from .models.notification import ScheduledNotification
from .models.routine import FrequencyConfig, Routine
from .models.settings import NotificationSettings
from .notifications.planner import NotificationPlanBuilder
from .persistence.backup import export_data, import_data
from .persistence.base import PersistenceStore
from .streaks.lifecycle import new_routine, reset_streaks, update_routine_fields
from .streaks.tracker import StreakTracker, confirm_routine, run_catch_up
from .utils.time import format_date

logger = structlog.get_logger(__name__)


@dataclass
class CycleResult:
    """Outcome of one planning cycle."""
    plan: list[ScheduledNotification]
    routines: list[Routine]
    handles: list[DeliveryHandle] = field(default_factory=list)
    permission_granted: bool = True
    streaks_reset: int = 0


class HabitEngine:
    """
    Main coordinator for routine confirmation and reminder planning.

    Manages the planning pipeline:
    Storage → Catch-up → Settings Validation → Plan Builder → Delivery
    """

    def __init__(
        self,
        store: PersistenceStore,
        delivery: Optional[BaseNotificationDelivery] = None,
        config_loader: Optional[ConfigLoader] = None,
        retry_config: Optional[RetryConfig] = None
    ) -> None:
        """Initialize the habit engine."""
        self.logger = logger
        self.store = store
        self.delivery = delivery
        self.config_loader = config_loader or ConfigLoader.create()
        self.retry_config = retry_config or RetryConfig()

        self.limits = self.config_loader.limit_params()
        self.tracker = StreakTracker()
        self.planner = NotificationPlanBuilder(self.config_loader.escalation_params(), self.limits)

        self.logger.info("Habit engine initialized",
                         delivery=delivery.name if delivery else None)

    def confirm_routine(self, routine_id: str, completed: bool, today: date) -> Routine:
        """
        Confirm or skip a routine for today and persist the result.

        Missed due days are reconciled first so that a completion after a
        gap starts a fresh streak.

        Raises:
            RoutineNotFoundError: Unknown routine id
            AlreadyConfirmedError: Already handled today; nothing is saved
            StorageError: Propagated from the store
        """
        routines = run_catch_up(self.store.load_routines(), today, self.tracker)
        updated = confirm_routine(routines, routine_id, completed, today, self.tracker)
        before = next(r for r in routines if r.id == routine_id)

        self.store.save_routines([updated if r.id == routine_id else r for r in routines])

        try:
            self.store.record_history(HistoryEntry(
                routine_id=updated.id,
                routine_name=updated.name,
                day=today,
                completed=completed,
                streak_before=before.streak,
                streak_after=updated.streak,
            ))
        except StorageError as e:
            self.logger.warning("Failed to record history entry", routine_id=routine_id, error=str(e))

        self.logger.info(
            "Routine confirmed",
            routine_id=routine_id,
            completed=completed,
            streak=updated.streak,
            day=format_date(today)
        )
        return updated

    def current_settings(self) -> NotificationSettings:
        """Stored settings, seeded from configuration on first use, normalized."""
        raw = self.store.load_settings()

        if raw is None:
            mapping = self.config_loader.notification_mapping()
            for error in ConfigValidator.validate_settings(mapping, self.limits):
                self.logger.warning(
                    "Notification settings repaired",
                    field=error.field,
                    message=error.message,
                    value=error.value
                )
            raw = NotificationSettings.from_dict(mapping)
            self.store.save_settings(raw)
            self.logger.info("Seeded notification settings from configuration")

        return normalize_settings(raw, self.limits)

    def update_settings(self, raw: NotificationSettings) -> NotificationSettings:
        """Normalize and persist new settings; returns what was stored."""
        settings = normalize_settings(raw, self.limits)
        self.store.save_settings(settings)
        return settings

    def get_routine(self, routine_id: str) -> Routine:
        """
        Stored routine by identifier.

        Raises:
            RoutineNotFoundError: Unknown routine id
        """
        return self._find(self.store.load_routines(), routine_id)

    def create_routine(
        self,
        name: str,
        today: date,
        frequency: Optional[FrequencyConfig] = None,
        description: Optional[str] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
        initial_streak: Any = 0
    ) -> Routine:
        """
        Validate and append a new routine.

        Raises:
            InvalidRoutineError: Bad name, description or initial streak
            InvalidFrequencyConfig: Frequency that can never be due
        """
        routine = new_routine(name, today, frequency=frequency, description=description,
                              color=color, icon=icon, initial_streak=initial_streak)

        routines = self.store.load_routines()
        routines.append(routine)
        self.store.save_routines(routines)

        self.logger.info("Routine created", routine_id=routine.id, streak=routine.streak)
        return routine

    def update_routine(self, routine_id: str, **changes: Any) -> Routine:
        """
        Apply a partial edit (name, description, color, icon, is_active,
        frequency) to a stored routine.

        Raises:
            RoutineNotFoundError: Unknown routine id
            InvalidRoutineError: Bad name or description
            InvalidFrequencyConfig: Frequency that can never be due
        """
        routines = self.store.load_routines()
        updated = update_routine_fields(self._find(routines, routine_id), **changes)

        self.store.save_routines([updated if r.id == routine_id else r for r in routines])
        self.logger.info("Routine updated", routine_id=routine_id, fields=sorted(changes))
        return updated

    def delete_routine(self, routine_id: str) -> None:
        """
        Remove a routine.

        Raises:
            RoutineNotFoundError: Unknown routine id
        """
        routines = self.store.load_routines()
        self._find(routines, routine_id)

        self.store.save_routines([r for r in routines if r.id != routine_id])
        self.logger.info("Routine deleted", routine_id=routine_id)

    def reset_all_streaks(self) -> list[Routine]:
        """Zero every streak and persist the result."""
        routines = reset_streaks(self.store.load_routines())
        self.store.save_routines(routines)
        return routines

    def export_data(self, exported_at: datetime) -> dict[str, Any]:
        """Backup mapping of stored routines and settings."""
        return export_data(self.store, exported_at)

    def import_data(self, data: Any) -> int:
        """
        Restore a backup mapping; returns the number of routines restored.

        Raises:
            ImportDataError: Payload has the wrong shape; nothing is saved
        """
        return import_data(self.store, data)

    def run_daily_cycle(self, today: date) -> CycleResult:
        """
        Reconcile streaks and reschedule today's reminders.

        Storage errors propagate before any delivery call is made.
        Permission denial only disables delivery.
        """
        loaded = self.store.load_routines()
        routines = run_catch_up(loaded, today, self.tracker)

        streaks_reset = sum(1 for old, new in zip(loaded, routines) if old != new)
        if streaks_reset:
            self.store.save_routines(routines)

        settings = self.current_settings()
        plan = self.planner.build(settings, routines, today)
        result = CycleResult(plan=plan, routines=routines, streaks_reset=streaks_reset)

        if self.delivery is None:
            return result

        self.delivery.cancel_all()
        if not plan:
            return result

        try:
            self._ensure_permission()
        except PermissionDeniedError as e:
            self.logger.warning("Notification delivery disabled", error=str(e),
                                delivery=self.delivery.name)
            result.permission_granted = False
            return result

        deliveries = self.delivery.deliver_plan(
            plan,
            max_retries=self.retry_config.max_retries,
            retry_delay=self.retry_config.retry_delay_seconds
        )
        result.handles = [d.handle for d in deliveries if d.status == DeliveryStatus.SUCCESS]

        failed = len(deliveries) - len(result.handles)
        if failed:
            self.logger.error("Some notifications could not be scheduled",
                              failed=failed, scheduled=len(result.handles))

        self.logger.info(
            "Daily cycle complete",
            day=format_date(today),
            planned=len(plan),
            scheduled=len(result.handles),
            streaks_reset=streaks_reset
        )
        return result

    def _ensure_permission(self) -> None:
        if not self.delivery.request_permission():
            raise PermissionDeniedError(
                "Notification permission not granted",
                delivery_method=self.delivery.name
            )

    def _find(self, routines: list[Routine], routine_id: str) -> Routine:
        for routine in routines:
            if routine.id == routine_id:
                return routine
        raise RoutineNotFoundError(f"Routine with id {routine_id} not found", routine_id=routine_id)
