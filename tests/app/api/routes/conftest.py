import pytest

from practice_starter.app.core.auth import get_current_user


@pytest.fixture
def current_user(make_user):
    """Fixture for the user making authenticated API calls."""
    return make_user(email="admin@example.com", name="Admin", password="admin-pass")


@pytest.fixture
def authenticated_client(app, client, current_user):
    """Fixture for a test client whose bearer token is always accepted."""
    app.dependency_overrides[get_current_user] = lambda: current_user
    return client
