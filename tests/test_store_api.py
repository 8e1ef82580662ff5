"""Integration tests for the roster store API."""
import pytest
from httpx import AsyncClient

from diarias_api.websocket_manager import RosterFeed, roster_feed

EMPLOYEE = {
    "name": "Ana Souza",
    "artisticName": "Palhaça Pipoca",
    "level": "Recreador(a)",
    "dailyRate": 100.0,
    "partyRate": 150.0,
    "extraHourRate": 20.0,
}


class FakeSocket:
    """Stands in for a connected subscriber."""

    def __init__(self) -> None:
        self.messages: list[dict] = []

    async def accept(self) -> None:
        pass

    async def send_json(self, payload: dict) -> None:
        self.messages.append(payload)


@pytest.mark.asyncio
async def test_register_login_and_employee_flow(client: AsyncClient, make_user) -> None:
    """A user can register, log in, create an employee, and list the roster."""

    user = await make_user()

    create_response = await client.post("/employees/", json=EMPLOYEE, headers=user["headers"])
    assert create_response.status_code == 201
    created = create_response.json()
    assert created["id"]
    assert created["artisticName"] == "Palhaça Pipoca"
    assert created["workDays"] == []

    list_response = await client.get("/employees/", headers=user["headers"])
    assert list_response.status_code == 200
    employees = list_response.json()
    assert len(employees) == 1
    assert employees[0]["name"] == "Ana Souza"


@pytest.mark.asyncio
async def test_patch_merges_scalar_fields_and_keeps_work_days(client: AsyncClient, make_user) -> None:
    user = await make_user()
    created = (await client.post("/employees/", json=EMPLOYEE, headers=user["headers"])).json()
    work_days = [{"id": "2024-03-05", "date": "2024-03-05", "type": "Dia Comum", "value": 140.0, "extraHours": 2}]
    await client.patch(f"/employees/{created['id']}", json={"workDays": work_days}, headers=user["headers"])

    response = await client.patch(
        f"/employees/{created['id']}", json={"dailyRate": 120.0, "level": "Coordenador(a)"}, headers=user["headers"]
    )

    assert response.status_code == 200
    body = response.json()
    assert body["dailyRate"] == 120.0
    assert body["level"] == "Coordenador(a)"
    assert body["name"] == "Ana Souza"
    assert body["workDays"] == work_days


@pytest.mark.asyncio
async def test_patch_work_days_replaces_whole_array(client: AsyncClient, make_user) -> None:
    user = await make_user()
    created = (await client.post("/employees/", json=EMPLOYEE, headers=user["headers"])).json()
    url = f"/employees/{created['id']}"
    first = [
        {"id": "2024-03-05", "date": "2024-03-05", "type": "Dia Comum", "value": 100.0, "extraHours": 0},
        {"id": "2024-03-06", "date": "2024-03-06", "type": "Dia Comum", "value": 100.0, "extraHours": 0},
    ]
    second = [{"id": "2024-03-20", "date": "2024-03-20", "type": "Dia de Festa", "value": 150.0, "extraHours": 0}]

    await client.patch(url, json={"workDays": first}, headers=user["headers"])
    response = await client.patch(url, json={"workDays": second}, headers=user["headers"])

    assert [wd["id"] for wd in response.json()["workDays"]] == ["2024-03-20"]


@pytest.mark.asyncio
async def test_patch_rejects_two_work_days_on_one_date(client: AsyncClient, make_user) -> None:
    user = await make_user()
    created = (await client.post("/employees/", json=EMPLOYEE, headers=user["headers"])).json()
    duplicated = [
        {"id": "a", "date": "2024-03-05", "type": "Dia Comum", "value": 100.0},
        {"id": "b", "date": "2024-03-05", "type": "Dia de Festa", "value": 150.0},
    ]

    response = await client.patch(
        f"/employees/{created['id']}", json={"workDays": duplicated}, headers=user["headers"]
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_delete_removes_employee(client: AsyncClient, make_user) -> None:
    user = await make_user()
    created = (await client.post("/employees/", json=EMPLOYEE, headers=user["headers"])).json()

    response = await client.delete(f"/employees/{created['id']}", headers=user["headers"])
    assert response.status_code == 204
    assert (await client.get("/employees/", headers=user["headers"])).json() == []

    again = await client.delete(f"/employees/{created['id']}", headers=user["headers"])
    assert again.status_code == 404


@pytest.mark.asyncio
async def test_rosters_are_isolated_per_user(client: AsyncClient, make_user) -> None:
    """Another user's employee behaves as if it did not exist."""

    owner = await make_user("owner")
    other = await make_user("other")
    created = (await client.post("/employees/", json=EMPLOYEE, headers=owner["headers"])).json()

    assert (await client.get("/employees/", headers=other["headers"])).json() == []
    assert (await client.get(f"/employees/{created['id']}", headers=other["headers"])).status_code == 404
    patch = await client.patch(f"/employees/{created['id']}", json={"name": "X"}, headers=other["headers"])
    assert patch.status_code == 404


@pytest.mark.asyncio
async def test_invalid_documents_are_rejected(client: AsyncClient, make_user) -> None:
    user = await make_user()

    bad_level = await client.post("/employees/", json={**EMPLOYEE, "level": "Chefe"}, headers=user["headers"])
    negative = await client.post("/employees/", json={**EMPLOYEE, "partyRate": -1}, headers=user["headers"])
    empty_name = await client.post("/employees/", json={**EMPLOYEE, "name": ""}, headers=user["headers"])
    no_artistic = await client.post("/employees/", json={**EMPLOYEE, "artisticName": ""}, headers=user["headers"])

    assert bad_level.status_code == 422
    assert negative.status_code == 422
    assert empty_name.status_code == 422
    assert no_artistic.status_code == 422


@pytest.mark.asyncio
async def test_requests_without_token_are_unauthorized(client: AsyncClient) -> None:
    assert (await client.get("/employees/")).status_code == 401
    bogus = await client.get("/employees/", headers={"Authorization": "Bearer not-a-jwt"})
    assert bogus.status_code == 401


@pytest.mark.asyncio
async def test_login_rejects_wrong_password(client: AsyncClient, make_user) -> None:
    await make_user("owner", "secret123")

    response = await client.post("/auth/login", json={"username": "owner", "password": "wrong"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_writes_push_full_snapshot_to_subscribers(client: AsyncClient, make_user) -> None:
    """Every committed write sends the owner's whole roster, not a diff."""

    user = await make_user()
    socket = FakeSocket()
    await roster_feed.subscribe(user["id"], socket, [])
    try:
        first = (await client.post("/employees/", json=EMPLOYEE, headers=user["headers"])).json()
        await client.post(
            "/employees/",
            json={**EMPLOYEE, "name": "Bruno", "artisticName": "Mágico Bruno"},
            headers=user["headers"],
        )
        await client.delete(f"/employees/{first['id']}", headers=user["headers"])
    finally:
        await roster_feed.unsubscribe(user["id"], socket)

    assert [m["action"] for m in socket.messages] == ["snapshot"] * 4
    assert [len(m["data"]) for m in socket.messages] == [0, 1, 2, 1]
    assert socket.messages[-1]["data"][0]["name"] == "Bruno"
    assert roster_feed.subscriber_count(user["id"]) == 0


@pytest.mark.asyncio
async def test_snapshot_reaches_only_the_owners_subscribers() -> None:
    feed = RosterFeed()
    mine, theirs = FakeSocket(), FakeSocket()
    await feed.subscribe(1, mine, [])
    await feed.subscribe(2, theirs, [])

    delivered = await feed.publish_snapshot(1, [{"id": "a"}])

    assert delivered == 1
    assert mine.messages[-1] == {"channel": "employees", "action": "snapshot", "data": [{"id": "a"}]}
    assert theirs.messages == [{"channel": "employees", "action": "snapshot", "data": []}]
    await feed.unsubscribe(1, mine)
    assert await feed.publish_snapshot(1, []) == 0


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.json() == {"status": "ok"}
