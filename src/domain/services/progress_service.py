"""Goal progress and category insights for the dashboard.

Goals are weekly targets. For a reporting period the goal is scaled by
``days / 7`` and compared against the minutes logged inside the window.
The total across categories is measured against the daily allocation cap
(``DAILY_HOUR_CAP`` hours per day in the period).
"""

from datetime import datetime, timedelta
from typing import Callable, List, Optional
from uuid import UUID

from core.cache import CacheTTL, QueryCache, query_cache, user_tag
from core.exceptions import CategoryNotFoundError
from domain.entities.progress import (
    DAILY_HOUR_CAP,
    CategoryInsight,
    CategoryProgress,
    Period,
    ProgressReport,
    ProgressTotal,
)
from domain.repositories.unit_of_work import IUnitOfWork

INSIGHT_SAMPLE_SIZE = 20
INACTIVITY_DAYS = 7


def calculate_progress(current_hours: float, goal_hours: float) -> int:
    """Whole-number percent of goal reached. 0 when no goal is set."""
    if goal_hours <= 0:
        return 0
    return round(current_hours / goal_hours * 100)


def period_window(period: Period, now: datetime) -> tuple[datetime, datetime]:
    """Start of the first day in the period up to ``now``."""
    start_of_today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start_of_today - timedelta(days=period.days - 1), now


def build_total(categories: List[CategoryProgress], period: Period) -> ProgressTotal:
    capacity = float(DAILY_HOUR_CAP * period.days)
    goal = sum(c.goal_hours for c in categories)
    current = round(sum(c.current_hours for c in categories), 2)
    return ProgressTotal(
        goal_hours=round(min(goal, capacity), 2),
        current_hours=current,
        capacity_hours=capacity,
        progress_percent=calculate_progress(current, capacity),
        over_capacity=current > capacity,
    )


class ProgressService:
    """Aggregates entries and goals into dashboard chart data."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        cache: QueryCache = query_cache,
    ) -> None:
        self._uow_factory = uow_factory
        self._cache = cache

    async def get_progress(
        self,
        user_id: UUID,
        period: Period = Period.WEEKLY,
        now: Optional[datetime] = None,
    ) -> ProgressReport:
        """Per-category progress toward goals plus the capped total."""
        now = now or datetime.utcnow()
        start, end = period_window(period, now)

        async def load() -> ProgressReport:
            async with self._uow_factory() as uow:
                categories = await uow.categories.get_visible_to_user(user_id)
                goals = await uow.goals.get_all_for_user(user_id)
                totals = await uow.entries.sum_minutes_by_category(
                    user_id, start=start, end=end
                )

            goal_by_category = {goal.category_id: goal.goal_hours for goal in goals}
            rows: List[CategoryProgress] = []
            for category in categories:
                if not category.is_active:
                    continue
                goal_hours = round(
                    goal_by_category.get(category.id, 0.0) * period.days / 7, 2
                )
                minutes, _ = totals.get(category.id, (0, 0))
                current_hours = round(minutes / 60, 2)
                rows.append(
                    CategoryProgress(
                        category_id=category.id,
                        name=category.name,
                        color=category.color,
                        icon=category.icon,
                        goal_hours=goal_hours,
                        current_hours=current_hours,
                        progress_percent=calculate_progress(current_hours, goal_hours),
                    )
                )

            return ProgressReport(period=period, categories=rows, total=build_total(rows, period))

        return await self._cache.get_or_load(  # type: ignore[no-any-return]
            f"dashboard:progress:{user_id}:{period.value}:{start.date()}",
            load,
            ttl=CacheTTL.SHORT,
            tags=[user_tag("dashboard", user_id)],
        )

    async def get_category_insight(
        self,
        user_id: UUID,
        category_id: UUID,
        now: Optional[datetime] = None,
    ) -> CategoryInsight:
        """Advice derived from the latest entries of a category and its goal."""
        now = now or datetime.utcnow()

        async with self._uow_factory() as uow:
            category = await uow.categories.get(category_id)
            if not category or not category.is_visible_to(user_id):
                raise CategoryNotFoundError(str(category_id))
            entries = await uow.entries.get_for_user(
                user_id, category_id=category_id, limit=INSIGHT_SAMPLE_SIZE
            )
            goal = await uow.goals.get_for_category(user_id, category_id)

        name = category.name
        topic = name.lower()

        if not entries:
            return CategoryInsight(
                category_id=category.id,
                category_name=name,
                insight=(
                    f"You haven't logged any {topic} activities yet. "
                    "Start tracking to get personalized insights."
                ),
                recommendations=[
                    f"Schedule regular {topic} sessions in your calendar",
                    f"Start with small, achievable goals for {topic}",
                    f"Find a {topic} buddy to keep you accountable",
                ],
            )

        average = sum(e.duration for e in entries) / len(entries)
        days_since = (now - entries[0].logged_at).days

        if days_since > INACTIVITY_DAYS:
            return CategoryInsight(
                category_id=category.id,
                category_name=name,
                insight=(
                    f"It's been {days_since} days since your last {topic} activity. "
                    "Consider getting back into your routine."
                ),
                recommendations=[
                    f"Schedule your next {topic} session",
                    "Start with a shorter session to ease back in",
                    f"Set a reminder for regular {topic} activities",
                ],
                entry_count=len(entries),
                average_minutes=round(average, 1),
                days_since_last_entry=days_since,
            )

        insight = (
            f"You've been consistent with your {topic} activities! "
            f"Your average session is {round(average)} minutes."
        )
        recommendations = [
            f"Keep your {topic} streak going",
            "Review your goal once a week",
            f"Try adding variety to your {topic} routine",
        ]

        if goal:
            week_ago = now - timedelta(days=7)
            weekly_minutes = sum(e.duration for e in entries if e.logged_at > week_ago)
            if weekly_minutes >= goal.goal_minutes:
                insight += f" You've reached your weekly goal of {goal.goal_hours:g} hours!"
                recommendations = [
                    "Consider increasing your goal for an extra challenge",
                    f"Try adding variety to your {topic} routine",
                    "Share your success with friends or community",
                ]
            else:
                remaining = goal.goal_minutes - weekly_minutes
                sessions = -(-int(remaining) // 30)
                insight += (
                    f" You need {round(remaining)} more minutes to reach your weekly goal."
                )
                recommendations = [
                    f"Schedule {sessions} more 30-minute sessions this week",
                    "Try to increase your session duration slightly",
                    f"Set reminders for your {topic} activities",
                ]

        return CategoryInsight(
            category_id=category.id,
            category_name=name,
            insight=insight,
            recommendations=recommendations,
            entry_count=len(entries),
            average_minutes=round(average, 1),
            days_since_last_entry=days_since,
        )
