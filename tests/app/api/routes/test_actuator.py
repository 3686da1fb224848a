from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from practice_starter.app.core.config import get_settings
from practice_starter.app.database.database import get_db


def test_health_up(client):
    response = client.get("/actuator/health")
    assert response.status_code == 200
    assert response.json() == {"status": "UP"}


def test_health_down(app, client):
    broken_db = MagicMock()
    broken_db.execute.side_effect = OperationalError("SELECT 1", {}, Exception("gone"))

    def get_broken_db():
        yield broken_db

    app.dependency_overrides[get_db] = get_broken_db

    response = client.get("/actuator/health")

    assert response.status_code == 503
    assert response.json() == {"status": "DOWN"}


def test_info(client):
    settings = get_settings()
    response = client.get("/actuator/info")
    assert response.status_code == 200
    assert response.json() == {
        "app": {"name": settings.app_name, "version": settings.project_version},
    }


def test_info_does_not_require_authentication(client):
    assert client.get("/actuator/info").status_code == 200
