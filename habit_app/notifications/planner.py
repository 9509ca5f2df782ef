"""
Notification plan builder.

Combines normalized settings with today's routine state to produce the
reminder plan handed to the delivery collaborator. The builder is
deterministic: it never reads the clock, and identical inputs always
produce an identical plan.
"""

from datetime import date, time
from typing import Iterable, Optional

from ..config.defaults import EscalationParams, LimitParams
from ..config.validation import normalize_settings
from ..logging.config import get_planner_logger, log_plan_decision
from ..models.notification import (
    NotificationPayload,
    PayloadKind,
    RoutineRef,
    ScheduledNotification,
)
from ..models.routine import Routine
from ..models.settings import NotificationSettings
from ..streaks.frequency import is_valid_frequency
from ..streaks.tracker import CompletionStatus
from ..utils.time import format_date, format_time_of_day, time_of_day_bucket
from .content import render_content
from .escalation import escalate

planner_logger = get_planner_logger(__name__)


def _refs(routines: Iterable[Routine]) -> tuple:
    return tuple(RoutineRef(id=r.id, name=r.name, streak=r.streak) for r in routines)


class NotificationPlanBuilder:
    """Builds the daily reminder plan."""

    def __init__(self, escalation_params: Optional[EscalationParams] = None,
                 limits: Optional[LimitParams] = None, logger=None):
        self.escalation_params = escalation_params or EscalationParams()
        self.limits = limits or LimitParams()
        self.logger = logger or planner_logger

    def build(self, settings: NotificationSettings, routines: list[Routine],
              today: date) -> list[ScheduledNotification]:
        """
        Build today's reminder plan.

        Args:
            settings: Notification settings (normalized again here, which
                is a no-op for already normalized settings)
            routines: Current routine snapshots
            today: Calendar date being planned

        Returns:
            Reminders sorted by time, at most ``max_notifications_per_day``
        """
        settings = normalize_settings(settings, self.limits)
        day = format_date(today)

        if not settings.enabled:
            log_plan_decision(self.logger, "enabled_check", "empty_plan",
                              "Notifications disabled", {"day": day})
            return []

        for routine in routines:
            if routine.is_active and not is_valid_frequency(routine.frequency):
                self.logger.warning(
                    "Invalid frequency config, routine is never due",
                    routine_id=routine.id,
                    frequency=routine.frequency.to_dict()
                )

        status = CompletionStatus.from_routines(routines, today)

        if not status.has_due_routines:
            log_plan_decision(self.logger, "due_filter", "empty_plan",
                              "No routines due today", {"day": day})
            return []

        if settings.only_if_incomplete and status.all_handled:
            log_plan_decision(self.logger, "only_if_incomplete", "empty_plan",
                              "All due routines already handled",
                              {"day": day, "due": len(status.due)})
            return []

        base = list(settings.reminder_times)
        cap = settings.max_notifications_per_day

        instants = base
        if settings.escalating_reminders and status.remaining:
            instants = escalate(base, cap, self.escalation_params)
            log_plan_decision(self.logger, "escalation", "escalated",
                              "Escalating reminders enabled",
                              {"base_count": len(base), "total_count": len(instants)})

        # Keep the earliest instants when over the cap
        instants = sorted(set(instants))[:cap]

        at_risk_instant: Optional[time] = None
        if settings.streak_protection and status.at_risk:
            at_risk_instant = instants[-1]
            log_plan_decision(self.logger, "streak_protection", "at_risk_marked",
                              "Streaks would reset if not confirmed today",
                              {"time": format_time_of_day(at_risk_instant),
                               "routines": [r.id for r in status.at_risk]})

        plan = self._to_notifications(instants, set(base), at_risk_instant, status, today)

        self.logger.info(
            "Notification plan built",
            day=day,
            count=len(plan),
            times=[format_time_of_day(n.time_of_day) for n in plan],
            remaining=len(status.remaining),
        )
        return plan

    def _to_notifications(self, instants: list[time], base: set, at_risk_instant: Optional[time],
                          status: CompletionStatus, today: date) -> list[ScheduledNotification]:
        incomplete = _refs(status.remaining)
        notifications = []
        escalation_level = 0

        for instant in instants:
            if instant in base:
                kind, level = PayloadKind.REMINDER, 0
            else:
                escalation_level += 1
                kind, level = PayloadKind.ESCALATION, escalation_level

            at_risk = ()
            if instant == at_risk_instant:
                kind = PayloadKind.STREAK_AT_RISK
                at_risk = _refs(status.at_risk)

            bucket = time_of_day_bucket(instant)
            title, body = render_content(kind, bucket, status, level)

            notifications.append(ScheduledNotification(
                time_of_day=instant,
                title=title,
                body=body,
                payload=NotificationPayload(
                    kind=kind,
                    day=today,
                    time_of_day=bucket,
                    incomplete_routines=incomplete,
                    at_risk_routines=at_risk,
                    escalation_level=level,
                ),
            ))

        return notifications


def build_notification_plan(
    settings: NotificationSettings,
    routines: list[Routine],
    today: date,
    escalation_params: Optional[EscalationParams] = None,
    limits: Optional[LimitParams] = None
) -> list[ScheduledNotification]:
    """Build today's reminder plan with a default builder."""
    return NotificationPlanBuilder(escalation_params, limits).build(settings, routines, today)
