import pytest

from apps.goals.adapters.memory_repositories import InMemoryGoalRepository
from apps.goals.application.progress_coordinator import ProgressUpdateCoordinator
from tests.factories import BUDDY, CREATOR, RecordingSink, StaticProfiles


@pytest.fixture
def repo():
    return InMemoryGoalRepository()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def profiles():
    return StaticProfiles({CREATOR: "Alice", BUDDY: "Bob"})


@pytest.fixture
def coordinator(repo, sink, profiles):
    return ProgressUpdateCoordinator(repository=repo, notification_sink=sink, profiles=profiles)
