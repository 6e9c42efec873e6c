def test_health(client, test_settings):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "service": test_settings.APP_NAME}


def test_health_db(client):
    resp = client.get("/health/db")
    assert resp.status_code == 200
    assert resp.json()["ok"] is True


def test_create_admin_script(test_settings, monkeypatch, capsys):
    from eulark.scripts import create_admin

    monkeypatch.setattr(create_admin, "settings", test_settings)
    assert create_admin.main(["root", "--password", "pw"]) == 0
    assert "username=root" in capsys.readouterr().out
    assert create_admin.main(["root", "--password", "pw"]) == 1


def test_create_admin_script_rejects_long_password(test_settings, monkeypatch, capsys):
    from eulark.scripts import create_admin

    monkeypatch.setattr(create_admin, "settings", test_settings)
    assert create_admin.main(["root", "--password", "x" * 73]) == 1
    assert "72" in capsys.readouterr().err


def test_registered_routes_listed_at_startup(app):
    from eulark.main import _describe_routes

    described = _describe_routes(app)
    assert "['GET'] /" in described
