from typing import Callable

import pytest

from github_fakes import FakeGitHub, InMemoryRedis
from statusboard.repositories.settings_repository import SettingsRepository
from statusboard.services.github.github_client import GitHubClient
from statusboard.services.settings_service import SettingsStore


@pytest.fixture
def redis_client() -> InMemoryRedis:
    return InMemoryRedis()


@pytest.fixture
def settings_store(redis_client) -> SettingsStore:
    return SettingsStore(SettingsRepository(redis_client, key_prefix="test:"))


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def client_factory(fake_github) -> Callable[[str], GitHubClient]:
    return lambda token: fake_github.client(token)
