"""
Ledger Repository (SQLAlchemy adapter)
======================================

DB-facing adapter for point balances, the reward catalog, redemptions,
award events, notifications, collection/report status rows and the
per-day analytics rollups.

Every method only flushes. The caller owns the transaction (see
`app.db.atomic`), so any combination of these calls commits or rolls back
as one unit of work.

Balance writes are single SQL statements (`points = points + n`), so
concurrent awards commute and the guarded decrement can never drive a
balance below zero, whatever the caller read earlier.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import DuplicateAward, NotFound
from app.models.analytics_rollup import AnalyticsRollup
from app.models.award_event import AwardEvent
from app.models.collection import Collection
from app.models.notification import Notification
from app.models.redemption import Redemption
from app.models.report import Report
from app.models.reward import Reward
from app.models.schedule import Schedule
from app.models.user import User


logger = logging.getLogger(__name__)


_ROLLUP_COUNTERS = (
    "total_collections",
    "completed_collections",
    "recycling_weight",
    "general_waste_weight",
    "co2_saved",
)


class LedgerRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    # -----------------------------
    # Users / balances
    # -----------------------------
    def get_user(self, user_id: UUID, *, for_update: bool = False) -> Optional[User]:
        q = self.db.query(User).filter(User.id == user_id)
        if for_update:
            q = q.with_for_update().populate_existing()
        return q.first()

    def get_points(self, user_id: UUID) -> Optional[int]:
        row = self.db.query(User.points).filter(User.id == user_id).first()
        if row is None:
            return None
        return int(row[0] or 0)

    def increment_points(self, user_id: UUID, points: int) -> int:
        if points < 0:
            raise ValueError("increment_points expects a non-negative amount")

        matched = (
            self.db.query(User)
            .filter(User.id == user_id)
            .update({User.points: User.points + points}, synchronize_session="fetch")
        )
        if not matched:
            raise NotFound("User", user_id)

        self.db.flush()
        return self.get_points(user_id)

    def decrement_points(self, user_id: UUID, points: int) -> bool:
        """
        Subtract `points` only if the stored balance covers it.

        Returns False (and changes nothing) when the balance is short at
        write time, even if an earlier read said otherwise.
        """
        if points < 0:
            raise ValueError("decrement_points expects a non-negative amount")

        matched = (
            self.db.query(User)
            .filter(User.id == user_id, User.points >= points)
            .update({User.points: User.points - points}, synchronize_session="fetch")
        )
        self.db.flush()
        return bool(matched)

    def list_user_ids_by_role(self, role: str) -> List[UUID]:
        rows = self.db.query(User.id).filter(User.role == role).all()
        return [r[0] for r in rows]

    # -----------------------------
    # Reward catalog
    # -----------------------------
    def get_reward(self, reward_id: UUID) -> Optional[Reward]:
        return self.db.query(Reward).filter(Reward.id == reward_id).first()

    def list_active_rewards(self) -> List[Reward]:
        return (
            self.db.query(Reward)
            .filter(Reward.is_active.is_(True))
            .order_by(Reward.points_cost.asc(), Reward.name.asc())
            .all()
        )

    # -----------------------------
    # Redemptions
    # -----------------------------
    def code_exists(self, code: str) -> bool:
        return self.db.query(Redemption.id).filter(Redemption.code == code).first() is not None

    def insert_redemption(
        self,
        *,
        user_id: UUID,
        reward_id: UUID,
        points_spent: int,
        code: str,
    ) -> Optional[Redemption]:
        """
        Insert a redemption row inside a savepoint.

        Returns None when `code` is already taken so the caller can retry with
        a fresh code; any other integrity failure propagates.
        """
        if self.code_exists(code):
            return None

        redemption = Redemption(
            user_id=user_id,
            reward_id=reward_id,
            points_spent=points_spent,
            code=code,
        )
        try:
            with self.db.begin_nested():
                self.db.add(redemption)
                self.db.flush()
        except IntegrityError:
            if self.code_exists(code):
                logger.warning("redemption code collision", extra={"code": code})
                return None
            raise

        return redemption

    def list_redemptions(self, user_id: UUID) -> List[Redemption]:
        return (
            self.db.query(Redemption)
            .filter(Redemption.user_id == user_id)
            .order_by(Redemption.created_at.desc())
            .all()
        )

    # -----------------------------
    # Award events (idempotency)
    # -----------------------------
    def find_award_event(self, source_entity_id: UUID, kind: str) -> Optional[AwardEvent]:
        return (
            self.db.query(AwardEvent)
            .filter(AwardEvent.source_entity_id == source_entity_id)
            .filter(AwardEvent.kind == kind)
            .first()
        )

    def record_award_event(
        self,
        *,
        user_id: UUID,
        kind: str,
        points: int,
        source_entity_id: UUID,
        reason: str | None = None,
    ) -> AwardEvent:
        if self.find_award_event(source_entity_id, kind) is not None:
            raise DuplicateAward(source_entity_id, kind)

        event = AwardEvent(
            user_id=user_id,
            kind=kind,
            points=points,
            reason=reason,
            source_entity_id=source_entity_id,
        )
        # the unique constraint settles races the lookup above cannot see
        try:
            with self.db.begin_nested():
                self.db.add(event)
                self.db.flush()
        except IntegrityError as e:
            raise DuplicateAward(source_entity_id, kind) from e

        return event

    # -----------------------------
    # Notifications
    # -----------------------------
    def insert_notification(
        self,
        *,
        user_id: UUID,
        type: str,
        title: str,
        message: str,
        link: str | None = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            link=link,
        )
        self.db.add(notification)
        self.db.flush()
        return notification

    # -----------------------------
    # Collections / reports
    # -----------------------------
    def get_collection(self, collection_id: UUID, *, for_update: bool = False) -> Optional[Collection]:
        q = self.db.query(Collection).filter(Collection.id == collection_id)
        if for_update:
            q = q.with_for_update().populate_existing()
        return q.first()

    def get_report(self, report_id: UUID, *, for_update: bool = False) -> Optional[Report]:
        q = self.db.query(Report).filter(Report.id == report_id)
        if for_update:
            q = q.with_for_update().populate_existing()
        return q.first()

    def add(self, obj):
        self.db.add(obj)
        self.db.flush()
        return obj

    def delete(self, obj) -> None:
        self.db.delete(obj)
        self.db.flush()

    # -----------------------------
    # Schedules
    # -----------------------------
    def list_schedules(self, *, zone: str | None = None, waste_type: str | None = None) -> List[Schedule]:
        q = self.db.query(Schedule).filter(Schedule.is_active.is_(True))
        if zone:
            q = q.filter(Schedule.zone == zone)
        if waste_type:
            q = q.filter(Schedule.waste_type == waste_type)
        return q.order_by(Schedule.day_of_week.asc(), Schedule.time_slot.asc()).all()

    # -----------------------------
    # Analytics rollups
    # -----------------------------
    def get_rollup(self, on_date: date, zone: str) -> Optional[AnalyticsRollup]:
        return (
            self.db.query(AnalyticsRollup)
            .filter(AnalyticsRollup.date == on_date, AnalyticsRollup.zone == zone)
            .first()
        )

    def upsert_rollup(self, on_date: date, zone: str, **increments) -> AnalyticsRollup:
        """
        Create the (date, zone) row on first touch, then add `increments`.

        Keyword names are rollup counters; values are added in SQL so two
        writers never overwrite each other's increments.
        """
        unknown = set(increments) - set(_ROLLUP_COUNTERS)
        if unknown:
            raise ValueError(f"Unknown rollup counters: {sorted(unknown)}")
        if any(v < 0 for v in increments.values()):
            raise ValueError("rollup counters only accept non-negative increments")

        if self.get_rollup(on_date, zone) is None:
            try:
                with self.db.begin_nested():
                    self.db.add(AnalyticsRollup(date=on_date, zone=zone))
                    self.db.flush()
            except IntegrityError:
                # created concurrently; fall through to the increment
                logger.debug("analytics rollup already exists", extra={"date": on_date.isoformat(), "zone": zone})

        values = {
            getattr(AnalyticsRollup, name): getattr(AnalyticsRollup, name) + amount
            for name, amount in increments.items()
            if amount
        }
        if values:
            (
                self.db.query(AnalyticsRollup)
                .filter(AnalyticsRollup.date == on_date, AnalyticsRollup.zone == zone)
                .update(values, synchronize_session="fetch")
            )
            self.db.flush()

        rollup = self.get_rollup(on_date, zone)
        self.db.refresh(rollup)
        return rollup

    def list_rollups(
        self,
        *,
        zone: str | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> List[AnalyticsRollup]:
        q = self._rollup_query(self.db.query(AnalyticsRollup), zone=zone, start=start, end=end)
        return q.order_by(AnalyticsRollup.date.desc(), AnalyticsRollup.zone.asc()).all()

    def sum_rollups(
        self,
        *,
        zone: str | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> dict:
        q = self.db.query(
            *[func.coalesce(func.sum(getattr(AnalyticsRollup, name)), 0) for name in _ROLLUP_COUNTERS]
        )
        row = self._rollup_query(q, zone=zone, start=start, end=end).one()
        return dict(zip(_ROLLUP_COUNTERS, row))

    @staticmethod
    def _rollup_query(q, *, zone, start, end):
        if zone:
            q = q.filter(AnalyticsRollup.zone == zone)
        if start:
            q = q.filter(AnalyticsRollup.date >= start)
        if end:
            q = q.filter(AnalyticsRollup.date <= end)
        return q
