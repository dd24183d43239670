import pytest
from app import create_app
from services.settings import ChangeLogSettings


@pytest.fixture
def settings():
    """Fixture for settings pinned to a fixed zone so day boundaries are predictable."""
    return ChangeLogSettings(
        api_base="https://reports.example.test",
        report_timezone="America/Denver",
        auth_bearer="Bearer secret-token",
        auth_cookie="session=abc123",
    )


@pytest.fixture
def app(settings):
    """Fixture for the Flask app wired to the test settings."""
    app = create_app('Testing', settings=settings)
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()
