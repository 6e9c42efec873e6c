from types import SimpleNamespace
from unittest.mock import Mock

import pytest
import requests

from eulark.services.mailer import MailerError, ResendMailer
from eulark.services.server_status import ServerStatusClient, ServerStatusError


def _response(payload, status=200):
    resp = Mock()
    resp.json.return_value = payload
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status}")
    return resp


def test_mailer_posts_to_resend():
    session = SimpleNamespace(post=Mock(return_value=_response({"id": "email_123"})))
    mailer = ResendMailer("re_key", "Eulark <m@x.com>", session=session)

    assert mailer.send_verification_code("a@x.com", "alice", "123456") == "email_123"

    session.post.assert_called_once()
    kwargs = session.post.call_args.kwargs
    assert kwargs["json"]["to"] == ["a@x.com"]
    assert "123456" in kwargs["json"]["html"]
    assert kwargs["headers"]["Authorization"] == "Bearer re_key"
    assert kwargs["headers"]["Idempotency-Key"]


def test_mailer_escapes_player_name():
    session = SimpleNamespace(post=Mock(return_value=_response({"id": "x"})))
    ResendMailer("re_key", "from", session=session).send_verification_code("a@x.com", "<b>al</b>", "1")
    assert "<b>al</b>" not in session.post.call_args.kwargs["json"]["html"]


def test_mailer_wraps_http_errors():
    session = SimpleNamespace(post=Mock(return_value=_response({}, status=422)))
    with pytest.raises(MailerError):
        ResendMailer("re_key", "from", session=session).send("a@x.com", "s", "b")


def test_mailer_without_key_refuses():
    session = SimpleNamespace(post=Mock())
    with pytest.raises(MailerError):
        ResendMailer("", "from", session=session).send("a@x.com", "s", "b")
    session.post.assert_not_called()


def test_server_status_online():
    payload = {
        "online": True,
        "players": {"online": 3, "max": 20},
        "version": "1.21",
        "motd": {"clean": ["Eulark", "survival"]},
    }
    session = SimpleNamespace(get=Mock(return_value=_response(payload)))
    client = ServerStatusClient("https://api.mcsrvstat.us/3/", "play.test", session=session)

    status = client.fetch()

    session.get.assert_called_once()
    assert session.get.call_args.args[0] == "https://api.mcsrvstat.us/3/play.test"
    assert status["online"] is True
    assert status["players_online"] == 3
    assert status["players_max"] == 20
    assert status["motd"] == "Eulark survival"


def test_server_status_offline():
    session = SimpleNamespace(get=Mock(return_value=_response({"online": False})))
    status = ServerStatusClient("https://api", "play.test", session=session).fetch()
    assert status["online"] is False
    assert status["players_online"] == 0


def test_server_status_route_reports_failure(test_settings, mailer):
    from fastapi.testclient import TestClient

    from eulark.main import create_app

    session = SimpleNamespace(get=Mock(side_effect=requests.ConnectionError("down")))
    stub = ServerStatusClient("https://api", "play.test", session=session)
    with TestClient(create_app(test_settings, mailer=mailer, status_client=stub)) as client:
        resp = client.get("/api/server-status")
    assert resp.status_code == 200
    assert resp.json()["ok"] is False
    assert resp.json()["online"] is False

    with pytest.raises(ServerStatusError):
        stub.fetch()
