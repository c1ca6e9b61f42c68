import aiohttp
import pytest

from app.core import notifications


class FakeSMTP:
    sent = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.calls = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(("login", user))

    def sendmail(self, sender, recipients, body):
        FakeSMTP.sent.append({"host": self.host, "from": sender, "to": recipients, "body": body, "calls": self.calls})


class FailingSMTP(FakeSMTP):
    def sendmail(self, sender, recipients, body):
        raise OSError("connection refused")


class FakeResponse:
    def __init__(self, status, payload):
        self.status = status
        self.payload = payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def json(self, content_type=None):
        return self.payload


def fake_twilio(status, payload, requests):
    class FakeSession:
        def __init__(self, timeout=None):
            self.timeout = timeout

        async def __aenter__(self):
            return self

        async def __aexit__(self, *exc):
            return False

        def post(self, url, data=None, auth=None):
            requests.append({"url": url, "data": data, "auth": auth})
            return FakeResponse(status, payload)

    return FakeSession


@pytest.fixture
def smtp_configured(monkeypatch):
    FakeSMTP.sent = []
    monkeypatch.setattr(notifications.settings, "SMTP_HOST", "smtp.aadhaar-mail.in")
    monkeypatch.setattr(notifications.settings, "SMTP_USER", "mailer")
    monkeypatch.setattr(notifications.settings, "SMTP_PASS", "secret")
    monkeypatch.setattr(notifications.settings, "SMTP_USE_TLS", True)
    monkeypatch.setattr(notifications.smtplib, "SMTP", FakeSMTP)


@pytest.fixture
def twilio_configured(monkeypatch):
    monkeypatch.setattr(notifications.settings, "TWILIO_ACCOUNT_SID", "AC123")
    monkeypatch.setattr(notifications.settings, "TWILIO_AUTH_TOKEN", "token")
    monkeypatch.setattr(notifications.settings, "TWILIO_PHONE_NUMBER", "+15550000000")


async def test_email_goes_through_smtp(smtp_configured):
    result = await notifications.send_otp_email("citizen@aadhaar-mail.in", "482913", purpose="password_reset")

    assert result["success"] is True
    assert result["message_id"]
    [message] = FakeSMTP.sent
    assert message["host"] == "smtp.aadhaar-mail.in"
    assert message["to"] == ["citizen@aadhaar-mail.in"]
    assert message["calls"] == ["starttls", ("login", "mailer")]
    assert "Password Reset OTP" in message["body"]


async def test_smtp_failure_is_reported_not_raised(smtp_configured, monkeypatch):
    monkeypatch.setattr(notifications.smtplib, "SMTP", FailingSMTP)

    result = await notifications.send_email("citizen@aadhaar-mail.in", "Subject", "<p>Hi</p>")

    assert result == {"success": False, "error": "connection refused"}


async def test_email_without_recipient():
    result = await notifications.send_email("", "Subject", "<p>Hi</p>")

    assert result == {"success": False, "error": "Missing recipient email"}


async def test_sms_goes_through_twilio(twilio_configured, monkeypatch):
    requests = []
    monkeypatch.setattr(aiohttp, "ClientSession", fake_twilio(201, {"sid": "SM42"}, requests))

    result = await notifications.send_otp_sms("+919876543210", "482913")

    assert result == {"success": True, "sid": "SM42"}
    [request] = requests
    assert request["url"].endswith("/Accounts/AC123/Messages.json")
    assert request["data"]["To"] == "+919876543210"
    assert request["data"]["From"] == "+15550000000"
    assert "482913" in request["data"]["Body"]
    assert request["auth"].login == "AC123"


async def test_twilio_error_is_reported(twilio_configured, monkeypatch):
    requests = []
    monkeypatch.setattr(
        aiohttp, "ClientSession", fake_twilio(400, {"message": "The 'To' number is not valid"}, requests)
    )

    result = await notifications.send_sms("+910000", "hello")

    assert result == {"success": False, "error": "The 'To' number is not valid"}


async def test_unconfigured_providers_only_log():
    email = await notifications.send_email("citizen@aadhaar-mail.in", "Subject", "<p>Hi</p>")
    sms = await notifications.send_sms("+919876543210", "hello")

    assert email["success"] is True
    assert email["message_id"].startswith("dev-")
    assert sms["success"] is True
    assert sms["sid"].startswith("dev-")
