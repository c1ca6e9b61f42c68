from sqlalchemy import select, func

from app.database import AsyncSessionLocal
from app.models.session_log import SessionLog
from app.models.user import User
from tests.conftest import auth_headers, fetch, signup_citizen


async def test_signup_creates_user_and_record(client):
    response = await client.post(
        "/api/v1/auth/signup",
        json={
            "aadhaarNumber": "999988887777",
            "email": "a@b.com",
            "phone": "+911234567890",
            "password": "secret1",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["user"]["id"]
    assert body["user"]["email"] == "a@b.com"
    assert body["aadhaarRecord"]["id"]
    assert body["aadhaarRecord"]["aadhaar_number"] == "999988887777"
    assert body["aadhaarRecord"]["email_verified"] is False
    assert body["aadhaarRecord"]["mobile_verified"] is False


async def test_signup_duplicate_aadhaar_number(client, citizen):
    response = await client.post(
        "/api/v1/auth/signup",
        json={
            "aadhaarNumber": citizen["aadhaar_number"],
            "email": "other@aadhaar-mail.in",
            "phone": "+910000000001",
            "password": "secret1",
        },
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Aadhaar number already registered"}


async def test_signup_duplicate_email(client, citizen):
    response = await client.post(
        "/api/v1/auth/signup",
        json={
            "aadhaarNumber": "111122223333",
            "email": citizen["email"],
            "phone": "+910000000001",
            "password": "secret1",
        },
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Email already registered"}


async def test_signup_duplicate_phone_writes_nothing(client, citizen):
    response = await client.post(
        "/api/v1/auth/signup",
        json={
            "aadhaarNumber": "111122223333",
            "email": "other@aadhaar-mail.in",
            "phone": citizen["phone"],
            "password": "secret1",
        },
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Phone number already registered"}
    async with AsyncSessionLocal() as session:
        users = await session.scalar(select(func.count(User.id)))
    assert users == 1


async def test_signup_rejects_malformed_aadhaar_number(client):
    response = await client.post(
        "/api/v1/auth/signup",
        json={"aadhaarNumber": "12345", "email": "a@b.com", "phone": "+911234567890", "password": "secret1"},
    )

    assert response.status_code == 400
    assert "aadhaarNumber" in response.json()["error"]


async def test_signup_requires_fields(client):
    response = await client.post("/api/v1/auth/signup", json={"aadhaarNumber": "999988887777"})

    assert response.status_code == 400
    assert set(response.json()) == {"error"}


async def test_login_returns_tokens_and_record(client, citizen):
    response = await client.post(
        "/api/v1/auth/login",
        json={"aadhaarNumber": citizen["aadhaar_number"], "password": "password123"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["access_token"]
    assert body["refresh_token"]
    assert body["token_type"] == "bearer"
    assert body["user"]["id"] == citizen["user_id"]
    assert body["user"]["role"] == "citizen"
    assert body["aadhaarRecord"]["id"] == citizen["record_id"]

    user = await fetch(User, citizen["user_id"])
    assert user.last_login is not None


async def test_login_wrong_password(client, citizen):
    response = await client.post(
        "/api/v1/auth/login",
        json={"aadhaarNumber": citizen["aadhaar_number"], "password": "wrong-password"},
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid credentials"}


async def test_login_unknown_aadhaar_number(client):
    response = await client.post(
        "/api/v1/auth/login",
        json={"aadhaarNumber": "000000000000", "password": "password123"},
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid credentials"}


async def test_login_inactive_account(client, citizen):
    async with AsyncSessionLocal() as db:
        user = await db.get(User, citizen["user_id"])
        user.is_active = False
        await db.commit()

    response = await client.post(
        "/api/v1/auth/login",
        json={"aadhaarNumber": citizen["aadhaar_number"], "password": "password123"},
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Account is inactive"}


async def test_login_is_recorded_in_session_log(client, citizen):
    async with AsyncSessionLocal() as db:
        result = await db.execute(
            select(func.count(SessionLog.id)).where(
                SessionLog.user_id == citizen["user_id"],
                SessionLog.action == "login",
            )
        )
        assert result.scalar() == 1


async def test_me_requires_token(client):
    response = await client.get("/api/v1/auth/me")

    assert response.status_code == 401
    assert response.json() == {"error": "Could not validate credentials"}


async def test_me_returns_current_user(client, citizen):
    response = await client.get("/api/v1/auth/me", headers=citizen["headers"])

    assert response.status_code == 200
    assert response.json()["aadhaar_record_id"] == citizen["record_id"]


async def test_refresh_issues_new_tokens(client, citizen):
    response = await client.post(
        "/api/v1/auth/login",
        json={"aadhaarNumber": citizen["aadhaar_number"], "password": "password123"},
    )
    refresh_token = response.json()["refresh_token"]

    response = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
    assert response.status_code == 200

    me = await client.get("/api/v1/auth/me", headers=auth_headers(response.json()["access_token"]))
    assert me.status_code == 200


async def test_refresh_rejects_access_token(client, citizen):
    token = citizen["headers"]["Authorization"].split(" ", 1)[1]

    response = await client.post("/api/v1/auth/refresh", json={"refresh_token": token})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid refresh token"}


async def test_user_lookup_is_limited_to_self(client, citizen):
    other = await signup_citizen(client, "555566667777", "other@aadhaar-mail.in", "+910000000002")

    own = await client.get(f"/api/v1/auth/user/{citizen['user_id']}", headers=citizen["headers"])
    foreign = await client.get(f"/api/v1/auth/user/{other['user_id']}", headers=citizen["headers"])

    assert own.status_code == 200
    assert foreign.status_code == 403


async def test_change_password(client, citizen):
    response = await client.post(
        "/api/v1/auth/change-password",
        json={"current_password": "password123", "new_password": "newpass456"},
        headers=citizen["headers"],
    )
    assert response.status_code == 200

    response = await client.post(
        "/api/v1/auth/login",
        json={"aadhaarNumber": citizen["aadhaar_number"], "password": "newpass456"},
    )
    assert response.status_code == 200


async def test_change_password_wrong_current(client, citizen):
    response = await client.post(
        "/api/v1/auth/change-password",
        json={"current_password": "nope", "new_password": "newpass456"},
        headers=citizen["headers"],
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Current password is incorrect"}
