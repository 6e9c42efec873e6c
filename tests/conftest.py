from __future__ import annotations

from typing import Dict, List, Tuple

import pytest

pytest.importorskip("httpx", reason="httpx requis pour les tests client FastAPI")

from fastapi.testclient import TestClient

from eulark.config.settings import Settings
from eulark.main import create_app
from eulark.services.mailer import MailerError


class FakeMailer:
    """Mailer factice : mémorise les envois au lieu d'appeler Resend."""

    def __init__(self) -> None:
        self.codes: Dict[str, str] = {}
        self.reset_links: Dict[str, str] = {}
        self.sent: List[Tuple[str, str]] = []
        self.fail = False

    def send_verification_code(self, to: str, player_name: str, code: str) -> str:
        if self.fail:
            raise MailerError("provider down")
        self.codes[to] = code
        self.sent.append(("verification", to))
        return "fake-id"

    def send_password_reset(self, to: str, link: str) -> str:
        if self.fail:
            raise MailerError("provider down")
        self.reset_links[to] = link
        self.sent.append(("reset", to))
        return "fake-id"


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        JWT_SECRET="test-secret",
        BCRYPT_ROUNDS=4,
        SITE_URL="https://eulark.test",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def app(test_settings, mailer):
    return create_app(test_settings, mailer=mailer)


@pytest.fixture
def services(app):
    return app.state.services


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def register_player(client: TestClient, mailer: FakeMailer, name: str, email: str, password: str) -> dict:
    resp = client.post("/api/register", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 200, resp.text
    verified = client.post("/api/verify-email", json={"email": email, "code": mailer.codes[email.lower()]})
    assert verified.status_code == 201, verified.text
    return verified.json()["player"]


def player_headers(client: TestClient, identifier: str, password: str) -> Dict[str, str]:
    resp = client.post("/api/login", json={"identifier": identifier, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def admin_headers(client, services) -> Dict[str, str]:
    services.auth.provision_admin("root", "admin-pw")
    resp = client.post("/api/admin/login", json={"username": "root", "password": "admin-pw"})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}
