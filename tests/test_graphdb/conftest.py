"""Shared fixtures: a repository reference and a recording stub executor."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.graphdb.config import RepositoryRef


@pytest.fixture
def repo_ref() -> RepositoryRef:
    return RepositoryRef(endpoint="http://localhost:7200", repository="movies")


@pytest.fixture
def stub_executor(repo_ref):
    """Executor double whose ``execute`` records every query it receives.

    Tests set ``execute.side_effect`` to a list of results / exceptions,
    consumed in call order.
    """
    executor = MagicMock()
    executor.repository = repo_ref
    executor.execute = AsyncMock()
    executor.execute_raw = AsyncMock()
    return executor
