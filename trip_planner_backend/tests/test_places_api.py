"""
HTTP tests for the place and category endpoints.
"""

import pytest
from sqlalchemy import update

from trip_planner_backend.app.models.place import Place

PLACES_URL = "/v1/app/places"
DISTRICT_1 = {"latitude": 10.7769, "longitude": 106.7009}


@pytest.fixture
async def saigon(make_place, make_category):
    food = await make_category("Food")
    sights = await make_category("Sights")
    market = await make_place(
        name="Ben Thanh Market", address="Le Loi, District 1",
        latitude=10.7725, longitude=106.6980, price=0.0, category_ids=(food.id, sights.id),
    )
    cathedral = await make_place(
        name="Notre Dame Cathedral", address="Cong Xa Paris, District 1",
        latitude=10.7798, longitude=106.6990, price=0.0, category_ids=(sights.id,),
    )
    tunnels = await make_place(
        name="Cu Chi Tunnels", address="Phu Hiep, Cu Chi",
        latitude=11.1418, longitude=106.4626, price=5.0, category_ids=(sights.id,),
    )
    return {"food": food, "sights": sights, "market": market, "cathedral": cathedral, "tunnels": tunnels}


@pytest.mark.asyncio
async def test_list_places(client, owner_headers, saigon):
    response = await client.get(PLACES_URL, headers=owner_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    assert {place["name"] for place in body["places"]} == {
        "Ben Thanh Market", "Notre Dame Cathedral", "Cu Chi Tunnels"
    }


@pytest.mark.asyncio
async def test_list_places_by_keyword_is_case_insensitive(client, owner_headers, saigon):
    response = await client.get(PLACES_URL, params={"keyword": "MARKET"}, headers=owner_headers)

    assert [place["name"] for place in response.json()["places"]] == ["Ben Thanh Market"]


@pytest.mark.asyncio
async def test_keyword_matches_address(client, owner_headers, saigon):
    response = await client.get(PLACES_URL, params={"keyword": "district 1"}, headers=owner_headers)

    assert response.json()["total"] == 2


@pytest.mark.asyncio
async def test_list_places_by_category(client, owner_headers, saigon):
    response = await client.get(
        PLACES_URL, params={"category_id": saigon["food"].id}, headers=owner_headers
    )

    body = response.json()
    assert body["total"] == 1
    assert body["places"][0]["id"] == saigon["market"].id
    assert body["places"][0]["categories"] == sorted([saigon["food"].id, saigon["sights"].id])


@pytest.mark.asyncio
async def test_list_places_pagination(client, owner_headers, saigon):
    response = await client.get(PLACES_URL, params={"page": 2, "page_size": 2}, headers=owner_headers)

    body = response.json()
    assert body["total"] == 3
    assert len(body["places"]) == 1


@pytest.mark.asyncio
async def test_get_place(client, owner_headers, saigon):
    tunnels = saigon["tunnels"]

    response = await client.get(f"{PLACES_URL}/{tunnels.id}", headers=owner_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Cu Chi Tunnels"
    assert body["price"] == 5.0
    assert body["images"] == ["https://img.example/1.jpg"]
    assert body["categories"] == [saigon["sights"].id]


@pytest.mark.asyncio
async def test_get_missing_place(client, owner_headers):
    response = await client.get(f"{PLACES_URL}/999", headers=owner_headers)

    assert response.status_code == 404
    assert response.json()["error_code"] == "ERR_NOT_FOUND_PLACE"


@pytest.mark.asyncio
async def test_malformed_images_are_an_internal_error(client, owner_headers, make_place, db_session):
    place = await make_place()
    await db_session.execute(update(Place).where(Place.id == place.id).values(images="|a.jpg|b.jpg|"))
    await db_session.commit()

    response = await client.get(f"{PLACES_URL}/{place.id}", headers=owner_headers)

    assert response.status_code == 500
    assert response.json()["error_code"] == "ERR_INTERNAL_SERVER"
    assert "a.jpg" not in response.text


@pytest.mark.asyncio
async def test_nearby_places_nearest_first(client, owner_headers, saigon):
    response = await client.get(
        f"{PLACES_URL}/nearby", params={**DISTRICT_1, "radius_km": 5}, headers=owner_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["radius_km"] == 5
    names = [match["place"]["name"] for match in body["places"]]
    assert names == ["Notre Dame Cathedral", "Ben Thanh Market"]
    distances = [match["distance"] for match in body["places"]]
    assert distances == sorted(distances)
    assert all(distance <= 5 for distance in distances)


@pytest.mark.asyncio
async def test_nearby_places_wider_radius_and_limit(client, owner_headers, saigon):
    wide = await client.get(
        f"{PLACES_URL}/nearby", params={**DISTRICT_1, "radius_km": 100}, headers=owner_headers
    )
    limited = await client.get(
        f"{PLACES_URL}/nearby", params={**DISTRICT_1, "radius_km": 100, "limit": 1}, headers=owner_headers
    )

    assert len(wide.json()["places"]) == 3
    assert wide.json()["places"][-1]["place"]["name"] == "Cu Chi Tunnels"
    assert [match["place"]["name"] for match in limited.json()["places"]] == ["Notre Dame Cathedral"]


@pytest.mark.asyncio
async def test_nearby_places_at_high_latitude(client, owner_headers, make_place):
    far_north = await make_place(name="Far North Station", latitude=85.0, longitude=60.0)
    await make_place(name="Too Far", latitude=85.0, longitude=120.0)

    response = await client.get(
        f"{PLACES_URL}/nearby",
        params={"latitude": 80.0, "longitude": 0.0, "radius_km": 1000},
        headers=owner_headers,
    )

    assert response.status_code == 200
    matches = response.json()["places"]
    assert [match["place"]["id"] for match in matches] == [far_north.id]
    assert matches[0]["distance"] == pytest.approx(961.8, abs=1.0)


@pytest.mark.asyncio
async def test_nearby_places_across_the_pole(client, owner_headers, make_place):
    other_side = await make_place(name="Other Side", latitude=89.5, longitude=180.0)

    response = await client.get(
        f"{PLACES_URL}/nearby",
        params={"latitude": 89.5, "longitude": 0.0, "radius_km": 200},
        headers=owner_headers,
    )

    assert [match["place"]["id"] for match in response.json()["places"]] == [other_side.id]


@pytest.mark.asyncio
async def test_nearby_places_requires_reference_point(client, owner_headers):
    response = await client.get(f"{PLACES_URL}/nearby", params={"latitude": 10.0}, headers=owner_headers)

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_LOCATION_REQUIRED"


@pytest.mark.asyncio
async def test_list_categories(client, owner_headers, saigon):
    response = await client.get("/v1/app/categories", headers=owner_headers)

    assert response.status_code == 200
    assert [category["name"] for category in response.json()] == ["Food", "Sights"]
    assert response.json()[0]["icon"] == "Food.svg"


@pytest.mark.asyncio
async def test_places_require_authentication(client):
    response = await client.get(PLACES_URL)

    assert response.status_code == 401
