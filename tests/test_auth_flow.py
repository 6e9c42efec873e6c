from conftest import player_headers, register_player


def test_register_verify_login_ticket_and_admin_delete(client, mailer, services):
    # Inscription + vérification
    resp = client.post("/api/register", json={"name": "alice", "email": "a@x.com", "password": "pw123"})
    assert resp.status_code == 200
    code = mailer.codes["a@x.com"]
    assert len(code) == 6 and code.isdigit()

    verified = client.post("/api/verify-email", json={"email": "a@x.com", "code": code})
    assert verified.status_code == 201
    assert verified.json()["player"]["player_name"] == "alice"
    assert services.store.pending("a@x.com") is None

    # Connexion
    login = client.post("/api/login", json={"identifier": "alice", "password": "pw123"})
    assert login.status_code == 200
    body = login.json()
    assert body["token"]
    assert body["user"]["username"] == "alice"
    headers = {"Authorization": f"Bearer {body['token']}"}

    # Ticket : l'e-mail vient de la fiche joueur
    ticket = client.post("/api/contact", json={"message": "help", "email": "spoof@evil.com"}, headers=headers)
    assert ticket.status_code == 201
    data = ticket.json()["data"]
    assert data["email"] == "a@x.com"
    assert data["player_name"] == "alice"
    assert data["status"] == "open"

    # Suppression sans jeton → 403
    denied = client.delete(f"/api/admin/messages/{data['id']}")
    assert denied.status_code == 403

    # Admin connecté → 200
    services.auth.provision_admin("root", "admin-pw")
    admin = client.post("/api/admin/login", json={"username": "root", "password": "admin-pw"})
    assert admin.status_code == 200
    admin_headers = {"Authorization": f"Bearer {admin.json()['token']}"}
    deleted = client.delete(f"/api/admin/messages/{data['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    assert client.get("/api/admin/messages", headers=admin_headers).json() == []


def test_register_missing_field_is_400(client):
    resp = client.post("/api/register", json={"name": "bob", "email": "b@x.com"})
    assert resp.status_code == 400


def test_register_accepts_player_name_alias(client, mailer):
    resp = client.post("/api/register", json={"player_name": "bob", "email": "b@x.com", "password": "pw"})
    assert resp.status_code == 200
    assert "b@x.com" in mailer.codes


def test_register_with_verified_email_conflicts(client, mailer):
    register_player(client, mailer, "alice", "a@x.com", "pw123")
    again = client.post("/api/register", json={"name": "alice2", "email": "a@x.com", "password": "pw"})
    assert again.status_code == 409


def test_verification_code_accepted_once(client, mailer):
    client.post("/api/register", json={"name": "alice", "email": "a@x.com", "password": "pw123"})
    payload = {"email": "a@x.com", "code": mailer.codes["a@x.com"]}
    assert client.post("/api/verify-email", json=payload).status_code == 201
    assert client.post("/api/verify-email", json=payload).status_code == 404


def test_wrong_code_is_400_and_keeps_pending(client, mailer, services):
    client.post("/api/register", json={"name": "alice", "email": "a@x.com", "password": "pw123"})
    real = mailer.codes["a@x.com"]
    wrong = "000000" if real != "000000" else "111111"
    resp = client.post("/api/verify-email", json={"email": "a@x.com", "code": wrong})
    assert resp.status_code == 400
    assert services.store.pending("a@x.com") is not None


def test_reregister_replaces_pending_code(client, mailer, services):
    client.post("/api/register", json={"name": "alice", "email": "a@x.com", "password": "pw123"})
    client.post("/api/register", json={"name": "alicia", "email": "a@x.com", "password": "pw456"})
    pending = services.store.pending("a@x.com")
    assert pending.player_name == "alicia"
    assert pending.verification_code == mailer.codes["a@x.com"]


def test_login_failures_are_indistinguishable(client, mailer):
    register_player(client, mailer, "alice", "a@x.com", "pw123")
    wrong_pw = client.post("/api/login", json={"identifier": "alice", "password": "nope"})
    unknown = client.post("/api/login", json={"identifier": "nobody", "password": "nope"})
    assert wrong_pw.status_code == unknown.status_code == 401
    assert wrong_pw.json() == unknown.json()


def test_login_by_email(client, mailer):
    register_player(client, mailer, "alice", "a@x.com", "pw123")
    resp = client.post("/api/login", json={"identifier": "a@x.com", "password": "pw123"})
    assert resp.status_code == 200
    assert resp.json()["user"]["username"] == "alice"


def test_login_by_email_is_case_insensitive(client, mailer):
    register_player(client, mailer, "carol", "Carol@X.com", "pw123")
    for identifier in ("Carol@X.com", "carol@x.com", "CAROL@X.COM"):
        resp = client.post("/api/login", json={"identifier": identifier, "password": "pw123"})
        assert resp.status_code == 200, identifier
        assert resp.json()["user"]["username"] == "carol"
    # le nom de joueur reste sensible à la casse
    assert client.post("/api/login", json={"identifier": "Carol", "password": "pw123"}).status_code == 401


def test_register_rejects_password_over_72_bytes(client, mailer):
    long_pw = "é" * 37  # 74 octets en UTF-8
    resp = client.post(
        "/api/register",
        json={"name": "alice", "email": "a@x.com", "password": long_pw, "confirm_password": long_pw},
    )
    assert resp.status_code == 400
    assert "72" in resp.json()["detail"]
    assert "a@x.com" not in mailer.codes

    ok_pw = "x" * 72
    register_player(client, mailer, "alice", "a@x.com", ok_pw)
    assert client.post("/api/login", json={"identifier": "alice", "password": ok_pw}).status_code == 200


def test_admin_login_invalid_credentials(client, services):
    services.auth.provision_admin("root", "admin-pw")
    bad = client.post("/api/admin/login", json={"username": "root", "password": "x"})
    unknown = client.post("/api/admin/login", json={"username": "ghost", "password": "x"})
    assert bad.status_code == unknown.status_code == 401
    assert bad.json() == unknown.json()


def test_forgot_password_same_message_for_unknown_email(client, mailer):
    register_player(client, mailer, "alice", "a@x.com", "pw123")
    known = client.post("/api/forgot-password", json={"email": "a@x.com"})
    unknown = client.post("/api/forgot-password", json={"email": "ghost@x.com"})
    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()
    assert "ghost@x.com" not in mailer.reset_links
    assert mailer.reset_links["a@x.com"].startswith("https://eulark.test/reset-password.html?token=")


def test_reset_token_is_single_use(client, mailer):
    register_player(client, mailer, "alice", "a@x.com", "pw123")
    client.post("/api/forgot-password", json={"email": "a@x.com"})
    token = mailer.reset_links["a@x.com"].split("token=", 1)[1]

    payload = {"token": token, "password": "newpw", "confirm": "newpw"}
    assert client.post("/api/reset-password", json=payload).status_code == 200
    reused = client.post("/api/reset-password", json=payload)
    assert reused.status_code == 400

    assert client.post("/api/login", json={"identifier": "alice", "password": "pw123"}).status_code == 401
    assert client.post("/api/login", json={"identifier": "alice", "password": "newpw"}).status_code == 200


def test_reset_password_mismatch(client, mailer):
    register_player(client, mailer, "alice", "a@x.com", "pw123")
    client.post("/api/forgot-password", json={"email": "a@x.com"})
    token = mailer.reset_links["a@x.com"].split("token=", 1)[1]
    resp = client.post("/api/reset-password", json={"token": token, "password": "a", "confirm": "b"})
    assert resp.status_code == 400
    # le jeton reste utilisable après une confirmation ratée
    ok = client.post("/api/reset-password", json={"token": token, "password": "a", "confirm": "a"})
    assert ok.status_code == 200


def test_reset_password_rejects_password_over_72_bytes(client, mailer):
    register_player(client, mailer, "alice", "a@x.com", "pw123")
    client.post("/api/forgot-password", json={"email": "a@x.com"})
    token = mailer.reset_links["a@x.com"].split("token=", 1)[1]
    long_pw = "x" * 73
    resp = client.post("/api/reset-password", json={"token": token, "password": long_pw, "confirm": long_pw})
    assert resp.status_code == 400
    assert "72" in resp.json()["detail"]
    # ni jeton consommé, ni mot de passe changé
    assert client.post("/api/login", json={"identifier": "alice", "password": "pw123"}).status_code == 200
    ok = client.post("/api/reset-password", json={"token": token, "password": "newpw", "confirm": "newpw"})
    assert ok.status_code == 200


def test_player_token_rejected_on_admin_routes(client, mailer):
    register_player(client, mailer, "alice", "a@x.com", "pw123")
    headers = player_headers(client, "alice", "pw123")
    assert client.post("/api/admin/rules", json={"category": "c", "description": "d"}, headers=headers).status_code == 403
    assert client.delete("/api/admin/rules/1", headers=headers).status_code == 403
    assert client.patch("/api/admin/messages/1", json={"status": "read"}, headers=headers).status_code == 403
    assert client.get("/api/admin/messages", headers=headers).status_code == 403


def test_garbage_token_is_401(client):
    resp = client.post("/api/contact", json={"message": "hi"}, headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_missing_token_is_403(client):
    assert client.post("/api/contact", json={"message": "hi"}).status_code == 403
