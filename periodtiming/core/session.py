"""
Editing sessions — a school's period template held in memory between load and save.

A session is LOADED right after it mirrors the store and DIRTY after any
successful edit. Only a successful save returns it to LOADED; a failed save
keeps every local edit so the user can retry.
"""

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Callable, Dict, Optional

from periodtiming.core.exceptions import DuplicatePeriodNumber
from periodtiming.core.schedule import PeriodScheduleModel, check_persistable
from periodtiming.core.store import ProfileStore
from periodtiming.schemas.schedule import CheckStatus, ScheduleConfig, ScheduleState

logger = logging.getLogger(__name__)


@dataclass
class SaveResult:
    config: ScheduleConfig
    renumbered: Optional[DuplicatePeriodNumber] = None

    @property
    def message(self) -> str:
        if self.renumbered:
            return f"Period timing updated. {self.renumbered.message}"
        return "Period timing updated"


@dataclass
class ScheduleSession:
    school_id: str
    model: PeriodScheduleModel = field(default_factory=PeriodScheduleModel)
    state: ScheduleState = ScheduleState.LOADED

    @property
    def config(self) -> ScheduleConfig:
        return self.model.config

    def load(self, store: ProfileStore) -> ScheduleConfig:
        self.model = PeriodScheduleModel(store.fetch_schedule(self.school_id))
        self.state = ScheduleState.LOADED
        return self.config

    discard = load

    def apply(self, operation: Callable[..., Any], *args, **kwargs) -> Any:
        """Run a model edit; the session only turns DIRTY when it succeeds."""
        result = operation(*args, **kwargs)
        self.mark_dirty()
        return result

    def mark_dirty(self) -> None:
        self.state = ScheduleState.DIRTY

    def replace(self, config: ScheduleConfig) -> None:
        self.model = PeriodScheduleModel(config)
        self.state = ScheduleState.DIRTY

    def save(self, store: ProfileStore) -> SaveResult:
        check = self.model.validate()
        renumbered = None
        if check.status is CheckStatus.FIXED:
            renumbered = DuplicatePeriodNumber(check.duplicates)
            self.mark_dirty()
            logger.info("School %s: %s", self.school_id, renumbered.message)

        try:
            check_persistable(self.config)
            saved = store.save_schedule(self.school_id, self.config)
        except Exception:
            logger.warning("School %s: save rejected, keeping local edits", self.school_id)
            raise

        self.model = PeriodScheduleModel(saved)
        self.state = ScheduleState.LOADED
        return SaveResult(config=saved, renumbered=renumbered)


class DraftRegistry:
    """One editing session per school, created from the store on first use."""

    def __init__(self):
        self._sessions: Dict[str, ScheduleSession] = {}

    def get(self, school_id: str, store: ProfileStore) -> ScheduleSession:
        """A LOADED session is refreshed so it keeps mirroring the store."""
        session = self._sessions.get(school_id)
        if session is None:
            session = ScheduleSession(school_id=school_id)
            self._sessions[school_id] = session
        if session.state is ScheduleState.LOADED:
            session.load(store)
        return session

    def drop(self, school_id: str) -> None:
        self._sessions.pop(school_id, None)

    def __contains__(self, school_id: str) -> bool:
        return school_id in self._sessions


@lru_cache
def get_draft_registry() -> DraftRegistry:
    return DraftRegistry()
