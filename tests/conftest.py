"""The pytest configuration for OpenKM MCP testing.

Log files go to a temporary directory and metrics stay off. Fixtures provide
settings pointing at a fake OpenKM, and a dispatcher wired to it.
"""

import os
import tempfile

os.environ.setdefault("OKM_MCP_LOG_DIR", tempfile.mkdtemp(prefix="openkm-mcp-logs-"))
os.environ.setdefault("MCP_METRICS_ENABLED", "false")

import pytest  # noqa: E402

from openkm_mcp.repository import RepositoryClient  # noqa: E402
from openkm_mcp.server import create_dispatcher  # noqa: E402

from .shared.fake_openkm import FakeOpenKM  # noqa: E402
from .shared.fake_openkm import make_settings  # noqa: E402


@pytest.fixture
def settings():
    """Settings for the full tool catalog against the fake repository."""
    return make_settings()


@pytest.fixture
def fake_openkm():
    return FakeOpenKM()


@pytest.fixture
def repository_client(settings, fake_openkm):
    return RepositoryClient(settings, transport=fake_openkm.transport)


@pytest.fixture
def dispatcher(settings, fake_openkm):
    return create_dispatcher(settings, transport=fake_openkm.transport)


@pytest.fixture
def dispatcher_factory(fake_openkm):
    """Build a dispatcher with settings overrides (variant, fallback policy...)."""

    def _create(**overrides):
        return create_dispatcher(make_settings(**overrides), transport=fake_openkm.transport)

    return _create


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "integration: end-to-end MCP tests against a fake repository")
