"""Subscription and usage repositories."""

from datetime import date, datetime

from sqlalchemy import func

from core.models import STATUS_TRIALING, USAGE_COLUMNS, Subscription, UsageRecord

from .base import BaseRepository


class SubscriptionRepository(BaseRepository[Subscription]):
    """One subscription row per user."""

    model = Subscription

    def get_by_user_id(self, user_id: str) -> Subscription | None:
        return self.session.query(Subscription).filter(Subscription.user_id == user_id).first()

    def upsert(self, user_id: str, **values) -> Subscription:
        subscription = self.get_by_user_id(user_id)
        if subscription is None:
            subscription = Subscription(user_id=user_id, **values)
            self.session.add(subscription)
        else:
            for key, value in values.items():
                setattr(subscription, key, value)
        self.session.flush()
        return subscription

    def trialing_ending_before(self, cutoff: datetime) -> list[Subscription]:
        return (
            self.session.query(Subscription)
            .filter(
                Subscription.status == STATUS_TRIALING,
                Subscription.current_period_end.isnot(None),
                Subscription.current_period_end < cutoff,
            )
            .all()
        )

    def trialing_ending_between(self, start: datetime, end: datetime) -> list[Subscription]:
        return (
            self.session.query(Subscription)
            .filter(
                Subscription.status == STATUS_TRIALING,
                Subscription.current_period_end >= start,
                Subscription.current_period_end <= end,
            )
            .all()
        )


class UsageRepository(BaseRepository[UsageRecord]):
    """Daily usage counters."""

    model = UsageRecord

    def get_for_day(self, user_id: str, day: date) -> UsageRecord | None:
        return (
            self.session.query(UsageRecord)
            .filter(UsageRecord.user_id == user_id, UsageRecord.date == day)
            .first()
        )

    def increment(self, user_id: str, day: date, usage_type: str, amount: int = 1) -> UsageRecord:
        record = self.get_for_day(user_id, day)
        if record is None:
            record = UsageRecord(
                user_id=user_id, date=day, searches=0, ai_searches=0, exports=0, comparisons=0
            )
            self.session.add(record)
        column = USAGE_COLUMNS[usage_type]
        setattr(record, column, (getattr(record, column) or 0) + amount)
        self.session.flush()
        return record

    def history(self, user_id: str, since: date) -> list[UsageRecord]:
        return (
            self.session.query(UsageRecord)
            .filter(UsageRecord.user_id == user_id, UsageRecord.date >= since)
            .order_by(UsageRecord.date.asc())
            .all()
        )

    def totals_since(self, since: date) -> dict:
        """Sums across all users, plus the number of distinct active users."""
        row = (
            self.session.query(
                func.coalesce(func.sum(UsageRecord.searches), 0),
                func.coalesce(func.sum(UsageRecord.ai_searches), 0),
                func.coalesce(func.sum(UsageRecord.exports), 0),
                func.coalesce(func.sum(UsageRecord.comparisons), 0),
                func.count(func.distinct(UsageRecord.user_id)),
            )
            .filter(UsageRecord.date >= since)
            .one()
        )
        return {
            "searches": int(row[0]),
            "aiSearches": int(row[1]),
            "exports": int(row[2]),
            "comparisons": int(row[3]),
            "activeUsers": int(row[4]),
        }
