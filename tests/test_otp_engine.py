from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy import select, update

from app.config import get_settings
from app.core.exceptions import OtpExhausted, OtpExpired, OtpInvalid, OtpNotFound
from app.core.otp_engine import OtpEngine
from app.database import AsyncSessionLocal
from app.models.aadhaar_record import AadhaarRecord
from app.models.otp_verification import OtpType, OtpVerification
from tests.conftest import add_all

AADHAAR_NUMBER = "123412341234"


@pytest_asyncio.fixture
async def db():
    async with AsyncSessionLocal() as session:
        yield session


async def otp_rows(db, otp_type=None):
    query = select(OtpVerification).where(OtpVerification.aadhaar_number == AADHAAR_NUMBER)
    if otp_type:
        query = query.where(OtpVerification.type == otp_type)
    result = await db.execute(query.execution_options(populate_existing=True))
    return result.scalars().all()


def wrong_code(otp: str) -> str:
    return "111111" if otp != "111111" else "222222"


async def test_generated_code_is_six_digits_without_leading_zero():
    for _ in range(200):
        code = OtpEngine.generate_otp()
        assert len(code) == 6
        assert code.isdigit()
        assert code[0] != "0"


async def test_issue_replaces_previous_otp_of_same_type(db):
    engine = OtpEngine(db)
    first = await engine.issue(AADHAAR_NUMBER, OtpType.LOGIN.value)
    await db.commit()
    second = await engine.issue(AADHAAR_NUMBER, OtpType.LOGIN.value)
    await db.commit()

    rows = await otp_rows(db, OtpType.LOGIN.value)
    assert [row.id for row in rows] == [second.id]
    assert first.id != second.id
    assert rows[0].attempts == 0
    assert rows[0].used is False


async def test_issue_keeps_other_types(db):
    engine = OtpEngine(db)
    await engine.issue(AADHAAR_NUMBER, OtpType.LOGIN.value)
    await engine.issue(AADHAAR_NUMBER, OtpType.PASSWORD_RESET.value)
    await db.commit()

    assert len(await otp_rows(db)) == 2


async def test_issue_sets_expiry_window(db):
    before = datetime.now(timezone.utc)
    record = await OtpEngine(db).issue(AADHAAR_NUMBER)
    expected = timedelta(minutes=get_settings().OTP_EXPIRE_MINUTES)

    assert before + expected <= record.expires_at <= datetime.now(timezone.utc) + expected


async def test_verify_consumes_otp_once(db):
    engine = OtpEngine(db)
    record = await engine.issue(AADHAAR_NUMBER)
    await db.commit()

    verified = await engine.verify(AADHAAR_NUMBER, record.otp)
    assert verified.id == record.id

    rows = await otp_rows(db)
    assert rows[0].used is True
    assert rows[0].verified_at is not None

    with pytest.raises(OtpNotFound):
        await engine.verify(AADHAAR_NUMBER, record.otp)


async def test_verify_wrong_code_counts_attempt(db):
    engine = OtpEngine(db)
    record = await engine.issue(AADHAAR_NUMBER)
    await db.commit()

    with pytest.raises(OtpInvalid):
        await engine.verify(AADHAAR_NUMBER, wrong_code(record.otp))
    with pytest.raises(OtpInvalid):
        await engine.verify(AADHAAR_NUMBER, wrong_code(record.otp))

    rows = await otp_rows(db)
    assert rows[0].attempts == 2
    assert rows[0].used is False

    # The right code still works while no attempt limit is configured
    await engine.verify(AADHAAR_NUMBER, record.otp)


async def test_verify_expired_otp(db):
    engine = OtpEngine(db)
    record = await engine.issue(AADHAAR_NUMBER)
    await db.commit()
    await db.execute(
        update(OtpVerification)
        .where(OtpVerification.id == record.id)
        .values(expires_at=datetime.now(timezone.utc) - timedelta(seconds=1))
    )
    await db.commit()

    with pytest.raises(OtpExpired):
        await engine.verify(AADHAAR_NUMBER, record.otp)


async def test_verify_without_issued_otp(db):
    with pytest.raises(OtpNotFound):
        await OtpEngine(db).verify(AADHAAR_NUMBER, "123456")


async def test_attempt_limit_locks_otp(db, monkeypatch):
    monkeypatch.setattr(get_settings(), "OTP_MAX_ATTEMPTS", 2)
    engine = OtpEngine(db)
    record = await engine.issue(AADHAAR_NUMBER)
    await db.commit()

    for _ in range(2):
        with pytest.raises(OtpInvalid):
            await engine.verify(AADHAAR_NUMBER, wrong_code(record.otp))

    with pytest.raises(OtpExhausted):
        await engine.verify(AADHAAR_NUMBER, record.otp)


async def test_type_fallback_accepts_otp_of_other_type(db):
    engine = OtpEngine(db)
    record = await engine.issue(AADHAAR_NUMBER, OtpType.LOGIN.value)
    await db.commit()

    verified = await engine.verify(AADHAAR_NUMBER, record.otp, otp_type=OtpType.SIGNUP.value)

    assert verified.type == OtpType.LOGIN.value


async def test_type_fallback_disabled(db, monkeypatch):
    monkeypatch.setattr(get_settings(), "OTP_TYPE_FALLBACK", False)
    engine = OtpEngine(db)
    record = await engine.issue(AADHAAR_NUMBER, OtpType.LOGIN.value)
    await db.commit()

    with pytest.raises(OtpNotFound):
        await engine.verify(AADHAAR_NUMBER, record.otp, otp_type=OtpType.SIGNUP.value)


async def test_email_verification_marks_record(db):
    await add_all(AadhaarRecord(aadhaar_number=AADHAAR_NUMBER, full_name="Asha", address="Pune", state="MH", pincode="411001"))
    engine = OtpEngine(db)
    record = await engine.issue(AADHAAR_NUMBER, OtpType.EMAIL_VERIFICATION.value)
    await db.commit()

    await engine.verify(AADHAAR_NUMBER, record.otp, otp_type=OtpType.EMAIL_VERIFICATION.value)

    result = await db.execute(
        select(AadhaarRecord.email_verified).where(AadhaarRecord.aadhaar_number == AADHAAR_NUMBER)
    )
    assert result.scalar_one() is True


async def test_send_without_citizen_has_no_channel(db):
    dispatch = await OtpEngine(db).send(AADHAAR_NUMBER, method="sms", otp_type=OtpType.SIGNUP.value)

    assert dispatch.channel == "none"
    assert dispatch.recipient is None
    assert len(dispatch.otp) == 6
