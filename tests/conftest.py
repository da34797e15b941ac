"""
Shared fixtures for stackctl tests.
"""

import pytest
from unittest.mock import Mock

from stackctl.dispatcher import Dispatcher
from stackctl.runner import CommandRunner
from stackctl.settings import DatabaseCredentials


@pytest.fixture
def runner():
    """Runner double that records commands and reports success."""
    mock_runner = Mock(spec=CommandRunner)
    mock_runner.run.return_value = 0
    mock_runner.stream.return_value = 0
    return mock_runner


@pytest.fixture
def dispatcher(runner):
    return Dispatcher(runner=runner)


@pytest.fixture
def credentials():
    return DatabaseCredentials(username="root", password="s3cr3t-pw", database="appdb")
