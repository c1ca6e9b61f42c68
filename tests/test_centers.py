from datetime import time

from tests.conftest import SLOT_DATE, slot_availability

SLOT_START_FULL = time(14, 0)

CENTER = {
    "name": "Mumbai Andheri Center",
    "city": "Mumbai",
    "state": "Maharashtra",
    "pincode": "400053",
    "address": "Andheri West, Mumbai",
    "capacity": 40,
    "latitude": 19.1364,
    "longitude": 72.8296,
}


async def test_admin_creates_center(client, admin_headers):
    response = await client.post("/api/v1/centers", json=CENTER, headers=admin_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["id"]
    assert body["is_active"] is True
    assert body["latitude"] == CENTER["latitude"]


async def test_citizen_cannot_create_center(client, citizen):
    response = await client.post("/api/v1/centers", json=CENTER, headers=citizen["headers"])

    assert response.status_code == 403


async def test_list_centers_filters_by_city(client, admin_headers, center):
    await client.post("/api/v1/centers", json=CENTER, headers=admin_headers)

    all_centers = await client.get("/api/v1/centers")
    mumbai = await client.get("/api/v1/centers", params={"city": "mumb"})

    assert len(all_centers.json()) == 2
    assert [c["name"] for c in mumbai.json()] == [CENTER["name"]]


async def test_inactive_centers_are_hidden(client, admin_headers, center):
    await client.put(f"/api/v1/centers/{center.id}", json={"is_active": False}, headers=admin_headers)

    response = await client.get("/api/v1/centers")

    assert response.json() == []


async def test_nearby_centers_sorted_by_distance(client, admin_headers, center):
    await client.post("/api/v1/centers", json=CENTER, headers=admin_headers)
    near = {**CENTER, "name": "Delhi Karol Bagh Center", "latitude": 28.6519, "longitude": 77.1909}
    await client.post("/api/v1/centers", json=near, headers=admin_headers)

    response = await client.get("/api/v1/centers/nearby", params={"lat": 28.6315, "lng": 77.2167, "radius": 10})

    assert response.status_code == 200
    names = [c["name"] for c in response.json()]
    assert names == [center.name, "Delhi Karol Bagh Center"]
    assert response.json()[0]["distance_km"] == 0
    assert 0 < response.json()[1]["distance_km"] < 10


async def test_get_unknown_center(client):
    response = await client.get("/api/v1/centers/missing")

    assert response.status_code == 404
    assert response.json() == {"error": "Center not found"}


async def test_update_and_delete_center(client, admin_headers, center):
    response = await client.put(f"/api/v1/centers/{center.id}", json={"capacity": 75}, headers=admin_headers)
    assert response.json()["capacity"] == 75
    assert response.json()["name"] == center.name

    response = await client.delete(f"/api/v1/centers/{center.id}", headers=admin_headers)
    assert response.status_code == 200

    response = await client.get(f"/api/v1/centers/{center.id}")
    assert response.status_code == 404


async def test_admin_creates_slot_with_full_availability(client, admin_headers, center):
    response = await client.post(
        "/api/v1/time-slots",
        json={
            "center_id": center.id,
            "date": SLOT_DATE.isoformat(),
            "start_time": "10:00:00",
            "end_time": "11:00:00",
            "total_capacity": 8,
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    assert response.json()["available_slots"] == 8


async def test_slot_end_must_follow_start(client, admin_headers, center):
    response = await client.post(
        "/api/v1/time-slots",
        json={
            "center_id": center.id,
            "date": SLOT_DATE.isoformat(),
            "start_time": "11:00:00",
            "end_time": "10:00:00",
            "total_capacity": 8,
        },
        headers=admin_headers,
    )

    assert response.status_code == 400


async def test_duplicate_slot_start_is_rejected(client, admin_headers, center, make_slot):
    await make_slot()

    response = await client.post(
        "/api/v1/time-slots",
        json={
            "center_id": center.id,
            "date": SLOT_DATE.isoformat(),
            "start_time": "09:00:00",
            "end_time": "10:00:00",
            "total_capacity": 8,
        },
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json() == {"error": "A slot already starts at this time for the center"}


async def test_available_slots_skip_full_ones(client, center, make_slot):
    open_slot = await make_slot(total_capacity=3)
    await make_slot(total_capacity=3, available_slots=0, start=SLOT_START_FULL)

    response = await client.get(
        "/api/v1/time-slots/available",
        params={"center_id": center.id, "date": SLOT_DATE.isoformat()},
    )

    assert [s["id"] for s in response.json()] == [open_slot.id]


async def test_slots_for_center_on_date(client, center, make_slot):
    await make_slot()
    await make_slot(start=SLOT_START_FULL)

    response = await client.get(f"/api/v1/time-slots/center/{center.id}", params={"date": SLOT_DATE.isoformat()})

    assert [s["start_time"] for s in response.json()] == ["09:00:00", "14:00:00"]


async def test_capacity_change_keeps_booked_places(client, admin_headers, make_slot):
    slot = await make_slot(total_capacity=5, available_slots=2)

    response = await client.put(f"/api/v1/time-slots/{slot.id}", json={"total_capacity": 8}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["total_capacity"] == 8
    assert response.json()["available_slots"] == 5
    assert await slot_availability(slot.id) == 5


async def test_capacity_below_booked_places_is_rejected(client, admin_headers, make_slot):
    slot = await make_slot(total_capacity=5, available_slots=2)

    response = await client.put(f"/api/v1/time-slots/{slot.id}", json={"total_capacity": 2}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "Capacity cannot be lower than booked appointments"}
    assert await slot_availability(slot.id) == 2


async def test_delete_slot(client, admin_headers, make_slot):
    slot = await make_slot()

    response = await client.delete(f"/api/v1/time-slots/{slot.id}", headers=admin_headers)
    assert response.status_code == 200

    response = await client.get(f"/api/v1/time-slots/{slot.id}")
    assert response.status_code == 404
    assert response.json() == {"error": "Time slot not found"}

