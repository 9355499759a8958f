"""Script API tests (sandbox replaced by the fake Judge0 transport)"""

import pytest

GREEN = ",".join(["#00FF00"] * 60)


def script_body(**overrides):
    body = {"title": "Green", "description": "All green", "source_code": "print()"}
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_create_and_fetch(client, fake_judge0):
    response = await client.post("/api/scripts", json=script_body(framerate=30))

    assert response.status_code == 201
    created = response.json()
    assert created["success"] is True
    assert created["frame_count"] == 3
    assert created["execution_time"] == "0.05"
    assert created["script"]["created_by"] == "user"
    assert "frames" not in created["script"]

    script = (await client.get(f"/api/scripts/{created['script']['id']}")).json()
    assert script["frames"] == [GREEN] * 3
    assert script["framerate"] == 30
    assert fake_judge0.submissions == ["print()"]


@pytest.mark.asyncio
async def test_list(client):
    await client.post("/api/scripts", json=script_body(title="a"))
    await client.post("/api/scripts", json=script_body(title="b", set_as_active=True))

    body = (await client.get("/api/scripts")).json()

    assert body["count"] == 2
    assert [s["title"] for s in body["scripts"]] == ["b", "a"]
    assert body["active_id"] == body["scripts"][0]["id"]
    assert "frames" not in body["scripts"][0]


@pytest.mark.asyncio
async def test_dry_run_does_not_store(client):
    response = await client.post("/api/scripts/test", json=script_body())

    assert response.status_code == 200
    assert response.json()["frame_count"] == 3
    assert (await client.get("/api/scripts")).json()["count"] == 0


@pytest.mark.asyncio
async def test_missing_title(client):
    response = await client.post("/api/scripts", json=script_body(title="  "))

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Title is required"


@pytest.mark.asyncio
async def test_program_error_is_502(client, fake_judge0):
    fake_judge0.status_id = 6
    fake_judge0.status_description = "Compilation Error"

    response = await client.post("/api/scripts/test", json=script_body(source_code="print("))
    error = response.json()["error"]

    assert response.status_code == 502
    assert error["code"] == "EXTERNAL_SERVICE_ERROR"
    assert error["details"]["service"] == "judge0"


@pytest.mark.asyncio
async def test_invalid_output_names_frame(client, fake_judge0):
    fake_judge0.stdout = GREEN + "\n#00FF00\n"

    response = await client.post("/api/scripts", json=script_body())

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Frame 2: Expected 60 colors, got 1"


@pytest.mark.asyncio
async def test_update(client, fake_judge0):
    script_id = (await client.post("/api/scripts", json=script_body())).json()["script"]["id"]
    fake_judge0.stdout = ",".join(["#FFFFFF"] * 60)

    response = await client.put(f"/api/scripts/{script_id}", json=script_body(title="White"))

    assert response.status_code == 200
    assert response.json()["script"]["title"] == "White"
    assert response.json()["frame_count"] == 1


@pytest.mark.asyncio
async def test_activate_and_delete(client):
    first = (await client.post("/api/scripts", json=script_body(set_as_active=True))).json()["script"]["id"]
    second = (await client.post("/api/scripts", json=script_body())).json()["script"]["id"]

    activated = await client.post(f"/api/scripts/{second}/activate")
    assert activated.json()["is_active"] is True
    assert (await client.get(f"/api/scripts/{first}")).json()["is_active"] is False

    deleted = await client.delete(f"/api/scripts/{second}")
    assert deleted.json() == {"success": True, "script_id": second}
    assert (await client.get("/api/scripts")).json()["active_id"] is None


@pytest.mark.asyncio
@pytest.mark.parametrize("method,path", [
    ("get", "/api/scripts/99"),
    ("delete", "/api/scripts/99"),
    ("post", "/api/scripts/99/activate"),
])
async def test_not_found(client, method, path):
    response = await client.request(method.upper(), path)

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "SCRIPT_NOT_FOUND"


@pytest.mark.asyncio
async def test_from_frames(client):
    response = await client.post("/api/scripts/from-frames", json={
        "title": "Solid", "frames": [GREEN] * 10, "framerate": 20
    })

    assert response.status_code == 201
    assert response.json()["frame_count"] == 10
    assert response.json()["framerate"] == 20
