import pytest
from fastapi.testclient import TestClient

from periodtiming.core.schedule import PeriodScheduleModel
from periodtiming.core.session import DraftRegistry, get_draft_registry
from periodtiming.core.store import InMemoryProfileStore, get_profile_store
from periodtiming.main import app
from periodtiming.schemas.schedule import PeriodDefinition, PeriodKind, ScheduleConfig

ADMIN = {"Authorization": "Bearer demo-admin-token"}
TEACHER = {"Authorization": "Bearer demo-teacher-token"}


def make_period(period, name, duration=45, kind=PeriodKind.CLASS):
    return PeriodDefinition(period=period, name=name, duration_minutes=duration, kind=kind)


@pytest.fixture
def model():
    """Four aligned periods: Assembly, Period 1, Period 2, Period 3."""
    config = ScheduleConfig(
        day_start_time="08:00",
        period_definitions=[
            make_period(1, "Assembly", 15, PeriodKind.ASSEMBLY),
            make_period(2, "Period 1"),
            make_period(3, "Period 2"),
            make_period(4, "Period 3"),
        ],
    )
    return PeriodScheduleModel(config)


@pytest.fixture
def store():
    return InMemoryProfileStore()


@pytest.fixture
def drafts():
    return DraftRegistry()


@pytest.fixture
def client(store, drafts):
    app.dependency_overrides[get_profile_store] = lambda: store
    app.dependency_overrides[get_draft_registry] = lambda: drafts
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
