"""
Period schedule model — the ordered period definitions that make up one school day.

Structural edits (add, remove, move, update, reorder) check their input before
touching the lists, so a rejected call leaves the schedule exactly as it was.
Clock times and summaries are derived by the pure functions at the bottom.

Usage:
    model = PeriodScheduleModel(config)
    model.add_period(PeriodKind.ASSEMBLY, "Assembly", 60)
    model.reorder()
    info = model.timing_info()
"""

import logging
from collections import Counter
from typing import Any, List, Optional, Sequence, Set, Tuple

from periodtiming.core.exceptions import IndexOutOfRange, InvalidValue, DuplicateNameError
from periodtiming.schemas.schedule import (
    BreakClockTime,
    BreakDefinition,
    CheckStatus,
    ClockTime,
    MoveDirection,
    PeriodDefinition,
    PeriodKind,
    PeriodNumberCheck,
    ScheduleConfig,
    ScheduleSummary,
    ScheduleTimingInfo,
    ScheduleValidation,
    parse_clock,
)

logger = logging.getLogger(__name__)

DEFAULT_NAMES = {
    PeriodKind.CLASS: "Custom Period",
    PeriodKind.ASSEMBLY: "Assembly Period",
    PeriodKind.BREAK: "Break Period",
}
DEFAULT_BREAK_DURATION = 15

FIELD_ALIASES = {"duration": "duration_minutes", "type": "kind"}
PERIOD_FIELDS = ("period", "duration_minutes", "name", "kind")
BREAK_FIELDS = ("period", "duration_minutes", "name")


# ---------------------------------------------------------------------------
# Input coercion
# ---------------------------------------------------------------------------
def _to_int(field: str, value: Any, minimum: int, maximum: Optional[int] = None) -> int:
    if isinstance(value, bool):
        raise InvalidValue(field, value, "expected a whole number")
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and value.strip():
        try:
            number = int(value.strip())
        except ValueError:
            raise InvalidValue(field, value, "expected a whole number")
    else:
        raise InvalidValue(field, value, "expected a whole number")

    if number < minimum:
        raise InvalidValue(field, value, f"must be at least {minimum}")
    if maximum is not None and number > maximum:
        raise InvalidValue(field, value, f"must be at most {maximum}")
    return number


def _to_name(field: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidValue(field, value, "must be a non-empty string")
    return value


def _to_kind(value: Any) -> PeriodKind:
    try:
        return PeriodKind(value)
    except ValueError:
        allowed = ", ".join(k.value for k in PeriodKind)
        raise InvalidValue("kind", value, f"expected one of {allowed}")


def _to_direction(value: Any) -> MoveDirection:
    try:
        return MoveDirection(value)
    except ValueError:
        raise InvalidValue("direction", value, "expected 'up' or 'down'")


def _coerce(field: str, value: Any, allowed: Sequence[str], max_period: int) -> Tuple[str, Any]:
    canonical = FIELD_ALIASES.get(field, field)
    if canonical not in allowed:
        raise InvalidValue("field", field, f"expected one of {', '.join(allowed)}")
    if canonical == "period":
        return canonical, _to_int(canonical, value, 1, max_period)
    if canonical == "duration_minutes":
        return canonical, _to_int(canonical, value, 1)
    if canonical == "name":
        return canonical, _to_name(canonical, value)
    return canonical, _to_kind(value)


def _check_index(index: Any, items: list) -> int:
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(items):
        raise IndexOutOfRange(index, len(items))
    return index


# ---------------------------------------------------------------------------
# The model
# ---------------------------------------------------------------------------
class PeriodScheduleModel:
    """Owns one ScheduleConfig and keeps its period list consistent under edits."""

    def __init__(self, config: Optional[ScheduleConfig] = None):
        self.config = config if config is not None else ScheduleConfig()

    @property
    def periods(self) -> List[PeriodDefinition]:
        return self.config.period_definitions

    @property
    def breaks(self) -> List[BreakDefinition]:
        return self.config.break_periods

    def __len__(self) -> int:
        return len(self.periods)

    @property
    def max_period(self) -> int:
        """Highest period number an edit may type in."""
        return max(self.config.total_periods_per_day, len(self.periods))

    # ---- Period list edits ----
    def add_period(self, kind: Any = PeriodKind.CLASS, name: Optional[str] = None,
                   duration: Optional[Any] = None) -> int:
        """Append a period numbered count + 1 and return its index."""
        kind = _to_kind(kind)
        name = DEFAULT_NAMES[kind] if name is None else _to_name("name", name)
        if duration is None:
            duration = self.config.default_period_duration_minutes
        else:
            duration = _to_int("duration_minutes", duration, 1)

        self.periods.append(
            PeriodDefinition(period=len(self.periods) + 1, duration_minutes=duration, name=name, kind=kind)
        )
        return len(self.periods) - 1

    def add_periods(self, count: Any, kind: Any = PeriodKind.CLASS, duration: Optional[Any] = None,
                    name: Optional[str] = None) -> List[int]:
        """Quick setup: count periods of one kind, all with the default name."""
        count = _to_int("count", count, 1)
        kind = _to_kind(kind)
        if name is not None and count > 1:
            raise InvalidValue("name", name, "a single name cannot be given to several periods")
        if duration is not None:
            duration = _to_int("duration_minutes", duration, 1)
        return [self.add_period(kind, name, duration) for _ in range(count)]

    def remove_period(self, index: int) -> PeriodDefinition:
        """Drop the entry at index. Remaining entries keep their numbers."""
        _check_index(index, self.periods)
        return self.periods.pop(index)

    def move_period(self, index: int, direction: Any) -> bool:
        """
        Swap the entry with its neighbour. Both swapped entries take their new
        position + 1 as period number. Returns False at the list boundary.
        """
        direction = _to_direction(direction)
        _check_index(index, self.periods)
        target = index - 1 if direction is MoveDirection.UP else index + 1
        if not 0 <= target < len(self.periods):
            return False

        items = self.periods
        items[index], items[target] = items[target], items[index]
        items[index].period = index + 1
        items[target].period = target + 1
        return True

    def update_field(self, index: int, field: str, value: Any) -> PeriodDefinition:
        _check_index(index, self.periods)
        field, value = _coerce(field, value, PERIOD_FIELDS, self.max_period)
        entry = self.periods[index]
        setattr(entry, field, value)
        return entry

    def reorder(self) -> None:
        for position, entry in enumerate(self.periods, start=1):
            if entry.period != position:
                entry.period = position

    def validate(self) -> PeriodNumberCheck:
        """Renumber sequentially when period numbers collide. Never raises."""
        duplicates = find_duplicate_periods(self.periods)
        if not duplicates:
            return PeriodNumberCheck(status=CheckStatus.CLEAN)

        # list.sort is stable: ties keep their current order
        self.periods.sort(key=lambda entry: entry.period)
        self.reorder()
        logger.info("Renumbered periods after duplicate numbers %s", duplicates)
        return PeriodNumberCheck(status=CheckStatus.FIXED, duplicates=duplicates)

    def validate_names(self) -> Set[str]:
        return find_duplicate_names(self.periods)

    def ensure_unique_names(self) -> None:
        duplicates = self.validate_names()
        if duplicates:
            raise DuplicateNameError(duplicates)

    # ---- Break list edits ----
    def add_break(self, period: Optional[Any] = None, duration: Any = DEFAULT_BREAK_DURATION,
                  name: str = DEFAULT_NAMES[PeriodKind.BREAK]) -> int:
        period = len(self.breaks) + 1 if period is None else _to_int("period", period, 1, self.max_period)
        duration = _to_int("duration_minutes", duration, 1)
        name = _to_name("name", name)
        self.breaks.append(BreakDefinition(period=period, duration_minutes=duration, name=name))
        return len(self.breaks) - 1

    def remove_break(self, index: int) -> BreakDefinition:
        _check_index(index, self.breaks)
        return self.breaks.pop(index)

    def update_break(self, index: int, field: str, value: Any) -> BreakDefinition:
        _check_index(index, self.breaks)
        field, value = _coerce(field, value, BREAK_FIELDS, self.max_period)
        entry = self.breaks[index]
        setattr(entry, field, value)
        return entry

    # ---- Read-only views ----
    def validation_report(self) -> ScheduleValidation:
        """Same checks as the save flow, without repairing anything."""
        duplicates = find_duplicate_periods(self.periods)
        names = sorted(self.validate_names())
        check = PeriodNumberCheck(
            status=CheckStatus.FIXED if duplicates else CheckStatus.CLEAN,
            duplicates=duplicates,
        )
        return ScheduleValidation(
            period_numbers=check,
            duplicate_names=names,
            can_save=bool(self.periods) and not names,
        )

    def timing_info(self) -> ScheduleTimingInfo:
        start = self.config.day_start_time
        return ScheduleTimingInfo(
            period_times=compute_clock_times(start, self.periods),
            break_times=compute_break_times(start, self.periods, self.breaks),
            summary=summarize(self.periods),
        )


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------
def find_duplicate_periods(periods: Sequence[PeriodDefinition]) -> List[int]:
    counts = Counter(entry.period for entry in periods)
    return sorted(number for number, seen in counts.items() if seen > 1)


def find_duplicate_names(periods: Sequence[PeriodDefinition]) -> Set[str]:
    counts = Counter(entry.name for entry in periods)
    return {name for name, seen in counts.items() if seen > 1}


def _format_minute(minute: int) -> str:
    return f"{(minute // 60) % 24:02d}:{minute % 60:02d}"


def _start_minute(day_start: Any) -> int:
    try:
        start = parse_clock(day_start)
    except ValueError:
        raise InvalidValue("day_start_time", day_start, "expected 'HH:MM'")
    return start.hour * 60 + start.minute


def compute_clock_times(day_start: Any, periods: Sequence[PeriodDefinition]) -> List[ClockTime]:
    """Walk forward from day_start; each period starts where the previous one ended."""
    cursor = _start_minute(day_start)
    times = []
    for entry in periods:
        end = cursor + entry.duration_minutes
        times.append(
            ClockTime(
                period=entry.period,
                name=entry.name,
                kind=entry.kind,
                start_time=_format_minute(cursor),
                end_time=_format_minute(end),
                start_minute=cursor,
                end_minute=end,
            )
        )
        cursor = end
    return times


def compute_break_times(day_start: Any, periods: Sequence[PeriodDefinition],
                        breaks: Sequence[BreakDefinition]) -> List[BreakClockTime]:
    """
    Place each break on the clock interval of the first period definition with
    the same number. Breaks without a matching period get no times.
    """
    by_number = {}
    for clock in compute_clock_times(day_start, periods):
        by_number.setdefault(clock.period, clock)

    result = []
    for entry in breaks:
        clock = by_number.get(entry.period)
        result.append(
            BreakClockTime(
                period=entry.period,
                name=entry.name,
                duration_minutes=entry.duration_minutes,
                start_time=clock.start_time if clock else None,
                end_time=clock.end_time if clock else None,
            )
        )
    return result


def summarize(periods: Sequence[PeriodDefinition]) -> ScheduleSummary:
    counts = {kind: 0 for kind in PeriodKind}
    for entry in periods:
        counts[entry.kind] += 1
    return ScheduleSummary(
        total=len(periods),
        count_by_kind=counts,
        total_duration_minutes=sum(entry.duration_minutes for entry in periods),
    )


def check_persistable(config: ScheduleConfig) -> None:
    """
    Gate run before anything is written to the profile store.
    Raises InvalidValue or DuplicateNameError.
    """
    if not config.period_definitions:
        raise InvalidValue("period_definitions", [], "add at least one period before saving")

    for entry in [*config.period_definitions, *config.break_periods]:
        if entry.duration_minutes <= 0:
            raise InvalidValue("duration_minutes", entry.duration_minutes, f"'{entry.name}' must be positive")

    duplicates = find_duplicate_names(config.period_definitions)
    if duplicates:
        raise DuplicateNameError(duplicates)
