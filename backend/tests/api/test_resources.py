"""Resource Routes — the HTTP CRUD surface for /coffee and /beer.

Tests cover:
    - Full create → list → update → delete scenario with exact wire shapes
    - Decoding failures: 400 for unparsable JSON or identifiers, 415 for a
      non-JSON content type, 422 for wrong shape
    - Failed requests leave the store unchanged
    - Missing records surface as 500 with the store's message
    - Racing deletes: exactly one succeeds, the other sees a missing record
"""

import asyncio

import pytest

CREATED = {"brand": "Acme", "size": 12, "time": "2024-01-01T00:00:00Z"}
UPDATED = {"brand": "Acme", "size": 16, "time": "2024-01-01T00:00:01Z"}


async def _only_id(client, kind):
    res = await client.get(f"/{kind}/list")
    items = res.json()[f"{kind}s"]
    assert len(items) == 1
    return items[0]["id"]


async def test_coffee_lifecycle(client):
    res = await client.post("/coffee/create", json=CREATED)
    assert res.status_code == 200
    assert res.content == b""

    res = await client.get("/coffee/list")
    assert res.status_code == 200
    body = res.json()
    assert len(body["coffees"]) == 1
    coffee_id = body["coffees"][0]["id"]
    assert body == {"coffees": [{"id": coffee_id, "coffee": CREATED}]}

    res = await client.post(f"/coffee/update/{coffee_id}", json=UPDATED)
    assert res.status_code == 200
    assert res.content == b""

    res = await client.get("/coffee/list")
    assert res.json() == {"coffees": [{"id": coffee_id, "coffee": UPDATED}]}

    res = await client.delete(f"/coffee/delete/{coffee_id}")
    assert res.status_code == 200
    assert res.content == b""

    res = await client.get("/coffee/list")
    assert res.json() == {"coffees": []}


async def test_beer_routes_mirror_coffee(client):
    res = await client.post("/beer/create", json=CREATED)
    assert res.status_code == 200
    beer_id = await _only_id(client, "beer")
    assert beer_id.startswith("Beer@")

    res = await client.get("/beer/list")
    assert res.json() == {"beers": [{"id": beer_id, "beer": CREATED}]}
    assert (await client.get("/coffee/list")).json() == {"coffees": []}


async def test_list_of_undefined_kind_is_empty(client):
    res = await client.get("/beer/list")
    assert res.status_code == 200
    assert res.json() == {"beers": []}


async def test_update_with_malformed_id_is_client_error(client):
    res = await client.post("/beer/update/not-an-id", json=CREATED)
    assert res.status_code == 400
    assert "Failed to parse identifier 'not-an-id'" in res.json()["message"]
    assert (await client.get("/beer/list")).json() == {"beers": []}


async def test_delete_with_malformed_id_is_client_error(client):
    await client.post("/coffee/create", json=CREATED)
    res = await client.delete("/coffee/delete/Coffee@123")
    assert res.status_code == 400
    assert set(res.json()) == {"message"}
    assert len((await client.get("/coffee/list")).json()["coffees"]) == 1


async def test_identifier_of_other_kind_is_client_error(client):
    await client.post("/beer/create", json=CREATED)
    beer_id = await _only_id(client, "beer")

    res = await client.delete(f"/coffee/delete/{beer_id}")

    assert res.status_code == 400
    assert "Beer record" in res.json()["message"]
    assert await _only_id(client, "beer") == beer_id


async def test_create_with_unparsable_json_is_400(client):
    res = await client.post(
        "/coffee/create",
        content=b'{"brand": "Acme", "size": ',
        headers={"content-type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["message"].startswith(
        "Failed to parse the request body as JSON",
    )
    assert (await client.get("/coffee/list")).json() == {"coffees": []}


@pytest.mark.parametrize("body, field", [
    ({"brand": "Acme", "size": "12", "time": "t"}, "size"),
    ({"brand": "Acme", "size": -1, "time": "t"}, "size"),
    ({"brand": "Acme", "size": 2**32, "time": "t"}, "size"),
    ({"brand": "Acme", "size": 12}, "time"),
    ({"brand": 7, "size": 12, "time": "t"}, "brand"),
])
async def test_create_with_wrong_shape_is_422(client, body, field):
    res = await client.post("/coffee/create", json=body)
    assert res.status_code == 422
    message = res.json()["message"]
    assert message.startswith("Failed to deserialize the JSON body into the target type")
    assert f"{field}:" in message
    assert (await client.get("/coffee/list")).json() == {"coffees": []}


async def test_create_with_non_json_content_type_is_415(client):
    res = await client.post(
        "/coffee/create",
        content=b'{"brand": "Acme", "size": 12, "time": "t"}',
        headers={"content-type": "text/plain"},
    )
    assert res.status_code == 415
    assert set(res.json()) == {"message"}
    assert (await client.get("/coffee/list")).json() == {"coffees": []}


async def test_create_accepts_max_uint32(client):
    res = await client.post("/coffee/create", json={**CREATED, "size": 2**32 - 1})
    assert res.status_code == 200
    items = (await client.get("/coffee/list")).json()["coffees"]
    assert items[0]["coffee"]["size"] == 2**32 - 1


async def test_update_with_wrong_shape_leaves_record(client):
    await client.post("/coffee/create", json=CREATED)
    coffee_id = await _only_id(client, "coffee")

    res = await client.post(f"/coffee/update/{coffee_id}", json={"brand": "Acme"})

    assert res.status_code == 422
    items = (await client.get("/coffee/list")).json()["coffees"]
    assert items == [{"id": coffee_id, "coffee": CREATED}]


async def test_delete_twice_is_store_failure(client):
    await client.post("/coffee/create", json=CREATED)
    coffee_id = await _only_id(client, "coffee")
    assert (await client.delete(f"/coffee/delete/{coffee_id}")).status_code == 200

    res = await client.delete(f"/coffee/delete/{coffee_id}")

    assert res.status_code == 500
    assert res.json() == {"message": f"record '{coffee_id}' not found"}


async def test_update_after_delete_is_store_failure(client):
    await client.post("/coffee/create", json=CREATED)
    coffee_id = await _only_id(client, "coffee")
    await client.delete(f"/coffee/delete/{coffee_id}")

    res = await client.post(f"/coffee/update/{coffee_id}", json=UPDATED)

    assert res.status_code == 500
    assert "not found" in res.json()["message"]
    assert (await client.get("/coffee/list")).json() == {"coffees": []}


async def test_concurrent_deletes_only_one_succeeds(client):
    await client.post("/coffee/create", json=CREATED)
    coffee_id = await _only_id(client, "coffee")

    first, second = await asyncio.gather(
        client.delete(f"/coffee/delete/{coffee_id}"),
        client.delete(f"/coffee/delete/{coffee_id}"),
    )

    assert sorted([first.status_code, second.status_code]) == [200, 500]
    assert (await client.get("/coffee/list")).json() == {"coffees": []}


async def test_unchanged_update_racing_delete_never_revives_record(client):
    await client.post("/coffee/create", json=CREATED)
    coffee_id = await _only_id(client, "coffee")

    deleted, updated = await asyncio.gather(
        client.delete(f"/coffee/delete/{coffee_id}"),
        client.post(f"/coffee/update/{coffee_id}", json=CREATED),
    )

    assert deleted.status_code == 200
    assert (await client.get("/coffee/list")).json() == {"coffees": []}
    assert updated.status_code == 200 or updated.json() == {
        "message": f"record '{coffee_id}' not found",
    }


async def test_wrong_method_is_rejected(client):
    res = await client.get("/coffee/create")
    assert res.status_code == 405
    assert res.json() == {"message": "Method Not Allowed"}


async def test_unknown_route_uses_error_envelope(client):
    res = await client.get("/tea/list")
    assert res.status_code == 404
    assert res.json() == {"message": "Not Found"}
