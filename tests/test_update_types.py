BIOMETRIC = {
    "name": "Biometric Update",
    "description": "Update fingerprints and iris scan",
    "risk_level": "high",
    "requires_verification": True,
    "requires_biometric": True,
    "can_do_online": False,
    "estimated_time_minutes": 30,
}


async def test_list_and_filter_update_types(client, admin_headers, update_type):
    await client.post("/api/v1/update-types", json=BIOMETRIC, headers=admin_headers)

    everything = await client.get("/api/v1/update-types")
    online = await client.get("/api/v1/update-types", params={"online_only": "true"})
    biometric = await client.get("/api/v1/update-types/biometric/required")

    assert [t["name"] for t in everything.json()] == ["Address Update", "Biometric Update"]
    assert [t["name"] for t in online.json()] == ["Address Update"]
    assert [t["name"] for t in biometric.json()] == ["Biometric Update"]


async def test_duplicate_name_is_rejected(client, admin_headers, update_type):
    response = await client.post(
        "/api/v1/update-types",
        json={**BIOMETRIC, "name": update_type.name},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Update type with this name already exists"}


async def test_risk_level_is_validated(client, admin_headers):
    response = await client.post(
        "/api/v1/update-types",
        json={**BIOMETRIC, "risk_level": "extreme"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert "risk_level" in response.json()["error"]


async def test_update_and_delete_update_type(client, admin_headers, update_type):
    response = await client.put(
        f"/api/v1/update-types/{update_type.id}",
        json={"estimated_time_minutes": 20},
        headers=admin_headers,
    )
    assert response.json()["estimated_time_minutes"] == 20

    response = await client.delete(f"/api/v1/update-types/{update_type.id}", headers=admin_headers)
    assert response.status_code == 200

    response = await client.get(f"/api/v1/update-types/{update_type.id}")
    assert response.status_code == 404
    assert response.json() == {"error": "Update type not found"}


async def test_citizen_cannot_manage_update_types(client, citizen):
    response = await client.post("/api/v1/update-types", json=BIOMETRIC, headers=citizen["headers"])

    assert response.status_code == 403
