import uuid

from hospital_admin.core.security import create_access_token, decode_token
from hospital_admin.models.user import RevokedToken, StaffRole

from tests.conftest import API, TEST_PASSWORD

AUTH = f"{API}/auth"


def _login(client, email, password=TEST_PASSWORD):
    return client.post(f"{AUTH}/login", data={"username": email, "password": password})


def test_login_returns_bearer_token(client, nurse):
    resp = _login(client, nurse.email)

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["token_type"] == "bearer"
    claims = decode_token(body["access_token"])
    assert claims["sub"] == str(nurse.id)
    assert claims["role"] == "nurse"
    assert claims["jti"]


def test_login_is_case_insensitive_on_email(client, nurse):
    assert _login(client, nurse.email.upper()).status_code == 200


def test_wrong_password_is_rejected(client, nurse):
    resp = _login(client, nurse.email, "not-the-password")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid email or password"


def test_unknown_email_is_rejected(client):
    assert _login(client, "nobody@hospital.org").status_code == 401


def test_deactivated_user_cannot_sign_in(client, make_user):
    user = make_user(StaffRole.CASHIER, is_active=False)
    resp = _login(client, user.email)
    assert resp.status_code == 401
    assert "deactivated" in resp.json()["detail"]


def test_me_returns_signed_in_user(client, doctor, auth_headers):
    resp = client.get(f"{AUTH}/me", headers=auth_headers(doctor))

    assert resp.status_code == 200
    assert resp.json() == {
        "user_id": str(doctor.id),
        "email": doctor.email,
        "full_name": doctor.full_name,
        "role": "doctor",
    }


def test_logout_revokes_the_token(client, db, doctor, auth_headers):
    headers = auth_headers(doctor)

    resp = client.post(f"{AUTH}/logout", headers=headers)
    assert resp.status_code == 204
    assert db.query(RevokedToken).count() == 1

    resp = client.get(f"{AUTH}/me", headers=headers)
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Session has ended. Please log in again."


def test_logout_leaves_other_sessions_alone(client, doctor, auth_headers):
    first, second = auth_headers(doctor), auth_headers(doctor)
    client.post(f"{AUTH}/logout", headers=first)
    assert client.get(f"{AUTH}/me", headers=second).status_code == 200


def test_token_of_deactivated_user_is_forbidden(client, db, nurse, auth_headers):
    headers = auth_headers(nurse)
    nurse.is_active = False
    db.commit()

    resp = client.get(f"{AUTH}/me", headers=headers)
    assert resp.status_code == 403


def test_expired_token_is_rejected(client, nurse):
    token = create_access_token(subject=str(nurse.id), role="nurse", expires_delta_minutes=-1)
    resp = client.get(f"{AUTH}/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Token has expired. Please log in again."


def test_garbage_token_is_rejected(client):
    resp = client.get(f"{AUTH}/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_token_for_missing_user_is_rejected(client):
    token = create_access_token(subject=str(uuid.uuid4()), role="admin")
    resp = client.get(f"{AUTH}/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
