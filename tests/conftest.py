from pathlib import Path
from typing import Dict

import pytest

from adapters.html_session import StaticHtmlSession
from tests.helpers.fixtures import DummyTracer, paris_site


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fixtures_dir(project_root: Path) -> Path:
    """Return the fixtures directory path."""
    return project_root / "tests" / "fixtures"


@pytest.fixture
def site_pages() -> Dict[str, str]:
    """Pages of a small in-memory ratings site."""
    return paris_site()


@pytest.fixture
def site_session(site_pages: Dict[str, str]) -> StaticHtmlSession:
    """Static session serving the in-memory site."""
    return StaticHtmlSession(pages=site_pages)


@pytest.fixture
def dummy_tracer() -> DummyTracer:
    """Provides a DummyTracer instance for tests."""
    return DummyTracer()
