import os
import tempfile
from datetime import date, time, timedelta

_db_dir = tempfile.mkdtemp(prefix="aadhaar-advance-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["OTP_EXPOSE_IN_RESPONSE"] = "true"
os.environ["SMTP_HOST"] = ""
os.environ["TWILIO_ACCOUNT_SID"] = ""

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app import models  # noqa: E402,F401
from app.core.security import create_access_token, get_password_hash  # noqa: E402
from app.database import AsyncSessionLocal, Base, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models.center import Center  # noqa: E402
from app.models.time_slot import TimeSlot  # noqa: E402
from app.models.update_type import UpdateType  # noqa: E402
from app.models.user import User, UserRole  # noqa: E402

SLOT_DATE = date.today() + timedelta(days=1)


@pytest_asyncio.fixture(autouse=True)
async def database():
    """Fresh schema for every test"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest_asyncio.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def add_all(*objects):
    """Persist objects in a short-lived session so no lock outlives the call"""
    async with AsyncSessionLocal() as db:
        db.add_all(objects)
        await db.commit()
    return objects[0] if len(objects) == 1 else objects


async def fetch(model, object_id: str):
    async with AsyncSessionLocal() as db:
        return await db.get(model, object_id)


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def admin():
    return await add_all(
        User(
            email="admin@aadhaar-advance.in",
            phone="+919999900001",
            password_hash=get_password_hash("admin123"),
            role=UserRole.ADMIN,
            is_active=True,
        )
    )


@pytest.fixture
def admin_headers(admin):
    return auth_headers(create_access_token(data={"sub": admin.id}))


async def signup_citizen(
    client: AsyncClient,
    aadhaar_number: str = "123456789012",
    email: str = "citizen@aadhaar-mail.in",
    phone: str = "+919876543210",
    password: str = "password123",
) -> dict:
    """Sign up and log in a citizen, returning ids and auth headers"""
    response = await client.post(
        "/api/v1/auth/signup",
        json={
            "aadhaarNumber": aadhaar_number,
            "email": email,
            "phone": phone,
            "password": password,
            "personalInfo": {"fullName": "Test Citizen", "state": "Delhi", "pincode": "110001"},
        },
    )
    assert response.status_code == 201, response.text
    body = response.json()

    response = await client.post(
        "/api/v1/auth/login",
        json={"aadhaarNumber": aadhaar_number, "password": password},
    )
    assert response.status_code == 200, response.text

    return {
        "user_id": body["user"]["id"],
        "record_id": body["aadhaarRecord"]["id"],
        "aadhaar_number": aadhaar_number,
        "email": email,
        "phone": phone,
        "headers": auth_headers(response.json()["access_token"]),
    }


@pytest_asyncio.fixture
async def citizen(client):
    return await signup_citizen(client)


@pytest_asyncio.fixture
async def center():
    return await add_all(
        Center(
            name="Delhi Central Aadhaar Center",
            city="New Delhi",
            state="Delhi",
            pincode="110001",
            address="Connaught Place, New Delhi",
            capacity=50,
            latitude=28.6315,
            longitude=77.2167,
            is_active=True,
        )
    )


@pytest_asyncio.fixture
async def update_type():
    return await add_all(
        UpdateType(
            name="Address Update",
            description="Update residential address",
            risk_level="low",
            requires_verification=True,
            requires_biometric=False,
            can_do_online=True,
            estimated_time_minutes=15,
            is_active=True,
        )
    )


@pytest.fixture
def make_slot(center):
    async def _make_slot(total_capacity: int = 5, available_slots: int = None, start: time = time(9, 0)):
        return await add_all(
            TimeSlot(
                center_id=center.id,
                date=SLOT_DATE,
                start_time=start,
                end_time=time(start.hour + 1, 0),
                total_capacity=total_capacity,
                available_slots=total_capacity if available_slots is None else available_slots,
                is_active=True,
            )
        )

    return _make_slot


async def slot_availability(slot_id: str) -> int:
    slot = await fetch(TimeSlot, slot_id)
    return slot.available_slots
