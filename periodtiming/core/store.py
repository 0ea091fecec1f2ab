"""
Profile store — persistence boundary for a school's period template.

The whole ScheduleConfig is fetched and replaced in one call; there are no
partial updates. Every store runs check_persistable before writing.

Usage:
    store = get_profile_store()
    config = store.fetch_schedule(school_id)
    saved = store.save_schedule(school_id, config)
"""

import copy
import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Dict, Optional

import httpx
from postgrest.exceptions import APIError

from periodtiming.core.config import settings
from periodtiming.core.database import get_supabase
from periodtiming.core.exceptions import ScheduleStoreError
from periodtiming.core.schedule import check_persistable
from periodtiming.schemas.schedule import ScheduleConfig

logger = logging.getLogger(__name__)


def default_schedule() -> ScheduleConfig:
    """What a school without a saved template starts from: no periods yet."""
    return ScheduleConfig(
        day_start_time=settings.DEFAULT_DAY_START_TIME,
        assembly_duration_minutes=settings.DEFAULT_ASSEMBLY_DURATION_MINUTES,
        total_periods_per_day=settings.DEFAULT_TOTAL_PERIODS_PER_DAY,
        default_period_duration_minutes=settings.DEFAULT_PERIOD_DURATION_MINUTES,
    )


class ProfileStore(ABC):
    def fetch_schedule(self, school_id: str) -> ScheduleConfig:
        config = self._read(school_id)
        if config is None:
            logger.info("No period timing stored for school %s, using defaults", school_id)
            return default_schedule()
        return config

    def save_schedule(self, school_id: str, config: ScheduleConfig) -> ScheduleConfig:
        check_persistable(config)
        saved = self._replace(school_id, config)
        logger.info(
            "Saved period timing for school %s (%d periods, %d breaks)",
            school_id, len(saved.period_definitions), len(saved.break_periods),
        )
        return saved

    @abstractmethod
    def _read(self, school_id: str) -> Optional[ScheduleConfig]:
        ...

    @abstractmethod
    def _replace(self, school_id: str, config: ScheduleConfig) -> ScheduleConfig:
        ...


class InMemoryProfileStore(ProfileStore):
    def __init__(self):
        self._records: Dict[str, dict] = {}

    def _read(self, school_id: str) -> Optional[ScheduleConfig]:
        record = self._records.get(school_id)
        if record is None:
            return None
        return ScheduleConfig.model_validate(copy.deepcopy(record))

    def _replace(self, school_id: str, config: ScheduleConfig) -> ScheduleConfig:
        self._records[school_id] = config.model_dump(mode="json")
        return self._read(school_id)


class SupabaseProfileStore(ProfileStore):
    """One row per school; the two lists live in JSON columns."""

    def __init__(self, table: str = settings.PERIOD_TIMING_TABLE):
        self.table = table

    def _read(self, school_id: str) -> Optional[ScheduleConfig]:
        try:
            result = (
                get_supabase().table(self.table)
                .select("*")
                .eq("school_id", school_id)
                .limit(1)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            logger.exception("Failed to fetch period timing for school %s", school_id)
            raise ScheduleStoreError(f"Failed to fetch period timing configuration: {e}")

        if not result.data:
            return None
        return self._to_config(result.data[0])

    def _replace(self, school_id: str, config: ScheduleConfig) -> ScheduleConfig:
        record = {**config.model_dump(mode="json"), "school_id": school_id}
        try:
            result = (
                get_supabase().table(self.table)
                .upsert(record, on_conflict="school_id")
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            logger.exception("Failed to save period timing for school %s", school_id)
            raise ScheduleStoreError(f"Failed to update period timing: {e}")

        if not result.data:
            raise ScheduleStoreError("Period timing was not saved")
        return self._to_config(result.data[0])

    @staticmethod
    def _to_config(row: dict) -> ScheduleConfig:
        return ScheduleConfig.model_validate({
            "day_start_time": row.get("day_start_time") or settings.DEFAULT_DAY_START_TIME,
            "assembly_duration_minutes": (
                row.get("assembly_duration_minutes") or settings.DEFAULT_ASSEMBLY_DURATION_MINUTES
            ),
            "total_periods_per_day": row.get("total_periods_per_day") or settings.DEFAULT_TOTAL_PERIODS_PER_DAY,
            "default_period_duration_minutes": (
                row.get("default_period_duration_minutes") or settings.DEFAULT_PERIOD_DURATION_MINUTES
            ),
            "period_definitions": row.get("period_definitions") or [],
            "break_periods": row.get("break_periods") or [],
        })


@lru_cache
def get_profile_store() -> ProfileStore:
    if settings.STORE_MODE == "supabase":
        return SupabaseProfileStore()
    return InMemoryProfileStore()
