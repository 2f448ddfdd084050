import pytest

from postboard.core.logging import setup_logging

from postboard.tests.test_fixtures.settings_fixtures import make_test_settings


@pytest.fixture(autouse=True)
def restore_logging():
    """Tests here install their own dictConfig; put the suite's config back afterwards."""
    yield
    setup_logging(make_test_settings())
