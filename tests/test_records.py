from app.models.aadhaar_record import AadhaarRecord
from app.models.update_history import UpdateHistory, UpdateHistoryStatus
from tests.conftest import add_all, fetch, signup_citizen


async def test_owner_reads_record(client, citizen):
    response = await client.get(f"/api/v1/aadhaar-records/{citizen['record_id']}", headers=citizen["headers"])

    assert response.status_code == 200
    body = response.json()
    assert body["aadhaar_number"] == citizen["aadhaar_number"]
    assert body["full_name"] == "Test Citizen"
    assert body["phone"] == citizen["phone"]


async def test_record_by_number(client, citizen):
    response = await client.get(
        f"/api/v1/aadhaar-records/number/{citizen['aadhaar_number']}",
        headers=citizen["headers"],
    )

    assert response.status_code == 200
    assert response.json()["id"] == citizen["record_id"]


async def test_other_citizen_cannot_read_record(client, citizen):
    other = await signup_citizen(client, "555566667777", "other@aadhaar-mail.in", "+910000000002")

    response = await client.get(f"/api/v1/aadhaar-records/{citizen['record_id']}", headers=other["headers"])

    assert response.status_code == 403
    assert response.json() == {"error": "Not allowed to access this record"}


async def test_admin_reads_any_record(client, admin_headers, citizen):
    response = await client.get(f"/api/v1/aadhaar-records/{citizen['record_id']}", headers=admin_headers)

    assert response.status_code == 200


async def test_partial_update(client, citizen):
    response = await client.put(
        f"/api/v1/aadhaar-records/{citizen['record_id']}",
        json={"city": "Gurugram", "district": "Gurugram"},
        headers=citizen["headers"],
    )

    assert response.status_code == 200
    body = response.json()
    assert body["city"] == "Gurugram"
    assert body["full_name"] == "Test Citizen"


async def test_empty_update_is_rejected(client, citizen):
    response = await client.put(
        f"/api/v1/aadhaar-records/{citizen['record_id']}",
        json={},
        headers=citizen["headers"],
    )

    assert response.status_code == 400
    assert response.json() == {"error": "No fields to update"}


async def test_verifying_record_stamps_date(client, admin_headers, citizen):
    response = await client.put(
        f"/api/v1/aadhaar-records/{citizen['record_id']}",
        json={"is_verified": True},
        headers=admin_headers,
    )

    assert response.json()["is_verified"] is True
    assert response.json()["verification_date"] is not None


async def test_approved_history_is_applied_with_urn(client, admin_headers, citizen, update_type):
    response = await client.post(
        f"/api/v1/aadhaar-records/{citizen['record_id']}/history",
        json={
            "update_type_id": update_type.id,
            "field_name": "address",
            "old_value": "",
            "new_value": "12 MG Road, Bengaluru",
        },
        headers=citizen["headers"],
    )
    assert response.status_code == 201
    entry = response.json()
    assert entry["status"] == "pending"
    assert entry["update_type_name"] == update_type.name

    response = await client.put(
        f"/api/v1/aadhaar-records/{citizen['record_id']}/history/{entry['id']}",
        json={"status": "approved"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    reviewed = response.json()
    assert reviewed["status"] == "approved"
    assert reviewed["urn"].startswith("URN")
    assert len(reviewed["urn"]) == 17

    record = await client.get(f"/api/v1/aadhaar-records/{citizen['record_id']}", headers=citizen["headers"])
    assert record.json()["address"] == "12 MG Road, Bengaluru"

    history = await client.get(f"/api/v1/aadhaar-records/{citizen['record_id']}/history", headers=citizen["headers"])
    assert [h["id"] for h in history.json()] == [entry["id"]]


async def test_rejected_history_keeps_record(client, admin_headers, citizen, update_type):
    entry = (await client.post(
        f"/api/v1/aadhaar-records/{citizen['record_id']}/history",
        json={"update_type_id": update_type.id, "field_name": "city", "new_value": "Nowhere"},
        headers=citizen["headers"],
    )).json()
    url = f"/api/v1/aadhaar-records/{citizen['record_id']}/history/{entry['id']}"

    response = await client.put(url, json={"status": "rejected", "rejection_reason": "Proof missing"}, headers=admin_headers)
    assert response.json()["rejection_reason"] == "Proof missing"
    assert response.json()["urn"] is None

    again = await client.put(url, json={"status": "approved"}, headers=admin_headers)
    assert again.status_code == 400
    assert again.json() == {"error": "Update request already reviewed"}

    record = await client.get(f"/api/v1/aadhaar-records/{citizen['record_id']}", headers=citizen["headers"])
    assert record.json()["city"] is None


async def test_citizen_cannot_review_history(client, citizen, update_type):
    entry = (await client.post(
        f"/api/v1/aadhaar-records/{citizen['record_id']}/history",
        json={"update_type_id": update_type.id, "field_name": "city", "new_value": "Agra"},
        headers=citizen["headers"],
    )).json()

    response = await client.put(
        f"/api/v1/aadhaar-records/{citizen['record_id']}/history/{entry['id']}",
        json={"status": "approved"},
        headers=citizen["headers"],
    )

    assert response.status_code == 403


async def test_required_field_cannot_be_cleared(client, citizen):
    response = await client.put(
        f"/api/v1/aadhaar-records/{citizen['record_id']}",
        json={"full_name": None},
        headers=citizen["headers"],
    )

    assert response.status_code == 400
    assert response.json() == {"error": "full_name cannot be empty"}

    record = await client.get(f"/api/v1/aadhaar-records/{citizen['record_id']}", headers=citizen["headers"])
    assert record.json()["full_name"] == "Test Citizen"


async def test_history_without_value_for_required_field_is_rejected(client, citizen, update_type):
    response = await client.post(
        f"/api/v1/aadhaar-records/{citizen['record_id']}/history",
        json={"update_type_id": update_type.id, "field_name": "full_name"},
        headers=citizen["headers"],
    )

    assert response.status_code == 400
    assert response.json() == {"error": "full_name cannot be empty"}


async def test_approving_history_without_value_keeps_record(client, admin_headers, citizen, update_type):
    entry = UpdateHistory(
        aadhaar_record_id=citizen["record_id"],
        update_type_id=update_type.id,
        field_name="pincode",
        new_value=None,
        status=UpdateHistoryStatus.PENDING.value,
    )
    await add_all(entry)

    response = await client.put(
        f"/api/v1/aadhaar-records/{citizen['record_id']}/history/{entry.id}",
        json={"status": "approved"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json() == {"error": "pincode cannot be empty"}
    stored = await fetch(UpdateHistory, entry.id)
    assert stored.status == UpdateHistoryStatus.PENDING.value
    record = await fetch(AadhaarRecord, citizen["record_id"])
    assert record.pincode == "110001"


async def test_citizen_cannot_set_verification_flags(client, citizen):
    response = await client.put(
        f"/api/v1/aadhaar-records/{citizen['record_id']}",
        json={"email_verified": True, "is_verified": True},
        headers=citizen["headers"],
    )

    assert response.status_code == 403
    assert response.json() == {"error": "Only admins can change email_verified, is_verified"}

    record = await fetch(AadhaarRecord, citizen["record_id"])
    assert record.email_verified is False
    assert record.is_verified is False
