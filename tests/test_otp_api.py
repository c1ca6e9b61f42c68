async def send_otp(client, aadhaar_number, otp_type="login", method="email"):
    response = await client.post(
        "/api/v1/auth/send-otp",
        json={"aadhaarNumber": aadhaar_number, "type": otp_type, "method": method},
    )
    assert response.status_code == 200, response.text
    return response.json()


async def test_send_otp_uses_requested_channel(client, citizen):
    email = await send_otp(client, citizen["aadhaar_number"], method="email")
    sms = await send_otp(client, citizen["aadhaar_number"], method="sms")

    assert email["message"] == "OTP sent successfully"
    assert email["channel"] == "email"
    assert sms["channel"] == "sms"
    assert len(sms["otp"]) == 6


async def test_send_otp_for_unknown_number_during_signup(client):
    body = await send_otp(client, "999988887777", otp_type="signup")

    assert body["channel"] == "none"


async def test_send_otp_rejects_bad_method(client):
    response = await client.post(
        "/api/v1/auth/send-otp",
        json={"aadhaarNumber": "999988887777", "method": "fax"},
    )

    assert response.status_code == 400
    assert "method" in response.json()["error"]


async def test_verify_otp_succeeds_once(client, citizen):
    otp = (await send_otp(client, citizen["aadhaar_number"]))["otp"]
    payload = {"aadhaarNumber": citizen["aadhaar_number"], "otp": otp, "type": "login"}

    first = await client.post("/api/v1/auth/verify-otp", json=payload)
    second = await client.post("/api/v1/auth/verify-otp", json=payload)

    assert first.status_code == 200
    assert first.json() == {"valid": True, "message": "OTP verified successfully", "type": "login"}
    assert second.status_code == 400
    assert second.json() == {"error": "OTP not found or already used"}


async def test_verify_otp_wrong_code(client, citizen):
    otp = (await send_otp(client, citizen["aadhaar_number"]))["otp"]
    wrong = "111111" if otp != "111111" else "222222"

    response = await client.post(
        "/api/v1/auth/verify-otp",
        json={"aadhaarNumber": citizen["aadhaar_number"], "otp": wrong},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid OTP"}


async def test_resend_invalidates_previous_code(client, citizen):
    first = (await send_otp(client, citizen["aadhaar_number"]))["otp"]
    second = (await send_otp(client, citizen["aadhaar_number"]))["otp"]

    if first != second:
        stale = await client.post(
            "/api/v1/auth/verify-otp",
            json={"aadhaarNumber": citizen["aadhaar_number"], "otp": first},
        )
        assert stale.status_code == 400

    fresh = await client.post(
        "/api/v1/auth/verify-otp",
        json={"aadhaarNumber": citizen["aadhaar_number"], "otp": second},
    )
    assert fresh.status_code == 200


async def test_email_verification_flow(client, citizen):
    response = await client.post("/api/v1/otp/send-email", json={"email": citizen["email"]})
    assert response.status_code == 200
    body = response.json()
    assert body["email"] == citizen["email"]
    assert body["channel"] == "email"

    response = await client.post(
        "/api/v1/auth/verify-otp",
        json={"aadhaarNumber": citizen["aadhaar_number"], "otp": body["otp"], "type": "email_verification"},
    )
    assert response.status_code == 200

    record = await client.get(f"/api/v1/aadhaar-records/{citizen['record_id']}", headers=citizen["headers"])
    assert record.json()["email_verified"] is True


async def test_email_otp_for_unknown_address(client):
    response = await client.post("/api/v1/otp/send-email", json={"email": "nobody@aadhaar-mail.in"})

    assert response.status_code == 404
    assert response.json() == {"error": "Email not registered"}


async def test_password_reset_flow(client, citizen):
    response = await client.post("/api/v1/otp/send-password-reset", json={"email": citizen["email"]})
    assert response.status_code == 200
    otp = response.json()["otp"]

    response = await client.post(
        "/api/v1/auth/reset-password",
        json={"aadhaarNumber": citizen["aadhaar_number"], "otp": otp, "newPassword": "brandnew1"},
    )
    assert response.status_code == 200
    assert response.json() == {"message": "Password reset successfully"}

    response = await client.post(
        "/api/v1/auth/login",
        json={"aadhaarNumber": citizen["aadhaar_number"], "password": "brandnew1"},
    )
    assert response.status_code == 200


async def test_password_reset_with_wrong_otp_keeps_password(client, citizen):
    otp = (await client.post("/api/v1/otp/send-password-reset", json={"email": citizen["email"]})).json()["otp"]
    wrong = "111111" if otp != "111111" else "222222"

    response = await client.post(
        "/api/v1/auth/reset-password",
        json={"aadhaarNumber": citizen["aadhaar_number"], "otp": wrong, "newPassword": "brandnew1"},
    )
    assert response.status_code == 400

    response = await client.post(
        "/api/v1/auth/login",
        json={"aadhaarNumber": citizen["aadhaar_number"], "password": "password123"},
    )
    assert response.status_code == 200


async def test_get_phone_masks_contact_details(client, citizen):
    response = await client.get("/api/v1/get-phone", params={"aadhaarNumber": citizen["aadhaar_number"]})

    assert response.status_code == 200
    body = response.json()
    assert body["exists"] is True
    assert body["phone"].endswith(citizen["phone"][-3:])
    assert body["phone"].startswith("*")
    assert body["email"] == "ci****@aadhaar-mail.in"


async def test_get_phone_unknown_number(client):
    response = await client.get("/api/v1/get-phone", params={"aadhaarNumber": "000011112222"})

    assert response.status_code == 404
    assert response.json() == {"error": "Aadhaar number not found"}
