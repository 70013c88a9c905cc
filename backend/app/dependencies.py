"""
Process-wide service instances and their FastAPI dependency providers.
"""

from app.services.dashboard import DashboardComposer
from app.services.match_events import MatchEventService
from app.services.stat_cache import StatCacheWriter, create_stat_cache_store
from app.services.statistics import StatisticsService
from app.services.store import RecordStore
from app.utils.config import settings

records = RecordStore()
stat_cache_store = create_stat_cache_store(settings)
stat_cache_writer = StatCacheWriter(
    records,
    stat_cache_store,
    mode=settings.STAT_CACHE_MODE,
    match_duration=settings.MATCH_DURATION_MINUTES,
)

match_event_service = MatchEventService(records, stat_cache_writer, lock_completed=settings.LOCK_COMPLETED_MATCHES)
statistics_service = StatisticsService(
    records,
    stat_cache_writer,
    form_size=settings.RECENT_FORM_SIZE,
    match_duration=settings.MATCH_DURATION_MINUTES,
)
dashboard_composer = DashboardComposer(
    records,
    form_size=settings.RECENT_FORM_SIZE,
    match_duration=settings.MATCH_DURATION_MINUTES,
)


def get_match_event_service() -> MatchEventService:
    return match_event_service


def get_statistics_service() -> StatisticsService:
    return statistics_service


def get_dashboard_composer() -> DashboardComposer:
    return dashboard_composer
