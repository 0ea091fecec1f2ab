import pytest

from conftest import make_period
from periodtiming.core.exceptions import IndexOutOfRange, InvalidValue, DuplicateNameError
from periodtiming.core.schedule import PeriodScheduleModel
from periodtiming.schemas.schedule import CheckStatus, PeriodKind, ScheduleConfig


def snapshot(model):
    return [entry.model_dump() for entry in model.periods]


# ---- add / remove ----
def test_add_period_uses_next_number_and_defaults(model):
    index = model.add_period(PeriodKind.CLASS)

    assert index == 4
    added = model.periods[index]
    assert added.period == 5
    assert added.name == "Custom Period"
    assert added.duration_minutes == model.config.default_period_duration_minutes
    assert added.kind is PeriodKind.CLASS


def test_add_period_kind_specific_default_names():
    model = PeriodScheduleModel()
    model.add_period("assembly")
    model.add_period("break")

    assert [p.name for p in model.periods] == ["Assembly Period", "Break Period"]
    assert [p.period for p in model.periods] == [1, 2]


def test_add_period_with_explicit_name_and_duration():
    model = PeriodScheduleModel()
    model.add_period(PeriodKind.ASSEMBLY, "Morning Assembly", 60)

    assert model.periods[0].name == "Morning Assembly"
    assert model.periods[0].duration_minutes == 60


def test_add_period_rejects_bad_explicit_duration(model):
    before = snapshot(model)
    with pytest.raises(InvalidValue):
        model.add_period(PeriodKind.CLASS, "Extra", 0)
    assert snapshot(model) == before


def test_add_periods_quick_setup():
    model = PeriodScheduleModel()
    indices = model.add_periods(5)

    assert indices == [0, 1, 2, 3, 4]
    assert [p.period for p in model.periods] == [1, 2, 3, 4, 5]
    # every quick-setup period shares the default name until renamed
    assert model.validate_names() == {"Custom Period"}


def test_add_periods_passes_duration_to_every_period():
    model = PeriodScheduleModel()
    model.add_periods(3, kind="class", duration="30")

    assert [p.duration_minutes for p in model.periods] == [30, 30, 30]


def test_add_periods_rejects_one_name_for_several():
    model = PeriodScheduleModel()
    with pytest.raises(InvalidValue):
        model.add_periods(2, name="Math")
    assert model.periods == []

    model.add_periods(1, name="Math")
    assert [p.name for p in model.periods] == ["Math"]


def test_add_then_remove_restores_prior_state(model):
    before = snapshot(model)
    index = model.add_period(kind="class")
    model.remove_period(index)

    assert snapshot(model) == before


def test_remove_period_does_not_renumber(model):
    removed = model.remove_period(1)

    assert removed.name == "Period 1"
    assert [p.period for p in model.periods] == [1, 3, 4]


@pytest.mark.parametrize("index", [-1, 4, 10])
def test_remove_period_out_of_range(model, index):
    before = snapshot(model)
    with pytest.raises(IndexOutOfRange):
        model.remove_period(index)
    assert snapshot(model) == before


# ---- move ----
def test_move_up_swaps_and_renumbers_both(model):
    assert model.move_period(2, "up") is True

    assert [p.name for p in model.periods] == ["Assembly", "Period 2", "Period 1", "Period 3"]
    assert [p.period for p in model.periods] == [1, 2, 3, 4]


def test_move_down_only_renumbers_swapped_entries():
    model = PeriodScheduleModel(ScheduleConfig(period_definitions=[
        make_period(7, "A"), make_period(9, "B"), make_period(12, "C"),
    ]))
    model.move_period(0, "down")

    assert [p.name for p in model.periods] == ["B", "A", "C"]
    assert [p.period for p in model.periods] == [1, 2, 12]


def test_move_up_then_down_restores_order(model):
    before = snapshot(model)
    model.move_period(3, "up")
    model.move_period(2, "down")

    assert snapshot(model) == before


def test_boundary_moves_are_noops(model):
    before = snapshot(model)

    assert model.move_period(0, "up") is False
    assert model.move_period(len(model) - 1, "down") is False
    assert snapshot(model) == before


def test_move_rejects_bad_index_and_direction(model):
    with pytest.raises(IndexOutOfRange):
        model.move_period(4, "up")
    with pytest.raises(InvalidValue):
        model.move_period(1, "sideways")


# ---- update_field ----
@pytest.mark.parametrize("field,value,expected", [
    ("duration_minutes", "50", 50),
    ("duration", 30, 30),
    ("period", " 6 ", 6),
    ("period", 2.0, 2),
])
def test_update_numeric_fields_parse_integers(model, field, value, expected):
    entry = model.update_field(1, field, value)
    attribute = "duration_minutes" if field == "duration" else field
    assert getattr(entry, attribute) == expected


@pytest.mark.parametrize("field,value", [
    ("duration_minutes", ""),
    ("duration_minutes", "abc"),
    ("duration_minutes", 0),
    ("duration_minutes", "4.5"),
    ("period", None),
    ("period", 0),
    ("period", True),
    ("name", ""),
    ("name", "   "),
    ("kind", "lunch"),
    ("colour", "red"),
])
def test_update_field_rejects_invalid_values(model, field, value):
    before = snapshot(model)
    with pytest.raises(InvalidValue):
        model.update_field(1, field, value)
    assert snapshot(model) == before


def test_period_number_bounded_by_periods_per_day(model):
    assert model.config.total_periods_per_day == 8
    model.update_field(0, "period", 8)

    with pytest.raises(InvalidValue):
        model.update_field(0, "period", 9)
    with pytest.raises(InvalidValue):
        model.add_break(period=9)
    assert model.periods[0].period == 8


def test_update_field_kind_and_name(model):
    model.update_field(2, "type", "break")
    model.update_field(2, "name", "Lunch Break")

    assert model.periods[2].kind is PeriodKind.BREAK
    assert model.periods[2].name == "Lunch Break"


def test_update_field_allows_temporary_duplicate_names(model):
    model.update_field(1, "name", "Period 2")

    assert model.validate_names() == {"Period 2"}
    with pytest.raises(DuplicateNameError) as excinfo:
        model.ensure_unique_names()
    assert excinfo.value.names == ["Period 2"]


def test_update_field_out_of_range(model):
    with pytest.raises(IndexOutOfRange):
        model.update_field(9, "name", "Nope")


# ---- reorder / validate ----
def test_reorder_normalises_and_is_idempotent():
    model = PeriodScheduleModel(ScheduleConfig(period_definitions=[
        make_period(5, "A"), make_period(5, "B"), make_period(1, "C"), make_period(9, "D"),
    ]))
    model.reorder()
    first = snapshot(model)
    model.reorder()

    assert [p.period for p in model.periods] == [1, 2, 3, 4]
    assert [p.name for p in model.periods] == ["A", "B", "C", "D"]
    assert snapshot(model) == first


def test_validate_fixes_duplicates_with_stable_sort():
    model = PeriodScheduleModel(ScheduleConfig(period_definitions=[
        make_period(2, "A"), make_period(1, "B"), make_period(2, "C"),
    ]))
    check = model.validate()

    assert check.status is CheckStatus.FIXED
    assert check.duplicates == [2]
    assert [p.name for p in model.periods] == ["B", "A", "C"]
    assert [p.period for p in model.periods] == [1, 2, 3]


def test_validate_clean_leaves_gaps_alone():
    model = PeriodScheduleModel(ScheduleConfig(period_definitions=[
        make_period(3, "A"), make_period(1, "B"),
    ]))
    check = model.validate()

    assert check.status is CheckStatus.CLEAN
    assert [p.period for p in model.periods] == [3, 1]


def test_validate_names_is_case_sensitive():
    model = PeriodScheduleModel(ScheduleConfig(period_definitions=[
        make_period(1, "Period 1"), make_period(2, "period 1"), make_period(3, "Period 1"),
    ]))

    assert model.validate_names() == {"Period 1"}


# ---- breaks ----
def test_break_list_is_edited_independently(model):
    model.add_break()
    model.add_break(period=3, duration="30", name="Lunch Break")
    model.update_break(0, "duration", "20")

    assert [(b.period, b.duration_minutes, b.name) for b in model.breaks] == [
        (1, 20, "Break Period"),
        (3, 30, "Lunch Break"),
    ]
    assert len(model) == 4

    model.remove_break(0)
    assert [b.name for b in model.breaks] == ["Lunch Break"]


def test_break_edits_reject_bad_input(model):
    model.add_break()
    with pytest.raises(IndexOutOfRange):
        model.remove_break(3)
    with pytest.raises(InvalidValue):
        model.update_break(0, "kind", "class")
    with pytest.raises(InvalidValue):
        model.add_break(duration=-5)
    assert len(model.breaks) == 1
