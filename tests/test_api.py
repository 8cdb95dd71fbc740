import pytest
from httpx import AsyncClient


async def login_admin(client: AsyncClient):
    response = await client.post("/api/auth/admin/login", json={"username": "admin", "password": "admin123"})
    assert response.status_code == 200
    return response


async def add_student(client: AsyncClient, name: str, code: str):
    response = await client.post("/api/students", json={"name": name, "student_code": code})
    assert response.status_code == 200
    return response.json()["id"]


@pytest.mark.asyncio
async def test_read_main(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path",
    [
        ("GET", "/api/students"),
        ("GET", "/api/buttons"),
        ("GET", "/api/weeks"),
        ("GET", "/api/scores/all"),
        ("DELETE", "/api/scores/all"),
        ("POST", "/api/reset-points"),
    ],
)
async def test_admin_routes_require_session(client: AsyncClient, method, path):
    response = await client.request(method, path)
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


@pytest.mark.asyncio
async def test_public_routes_open(client: AsyncClient):
    assert (await client.get("/api/leaderboard")).status_code == 200
    assert (await client.get("/api/weeks/public")).status_code == 200


@pytest.mark.asyncio
async def test_bad_admin_login(client: AsyncClient):
    response = await client.post("/api/auth/admin/login", json={"username": "admin", "password": "nope"})
    assert response.status_code == 401
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_session_and_logout(client: AsyncClient):
    assert (await client.get("/api/auth/session")).json() == {"type": None, "user": None}

    await login_admin(client)
    session = (await client.get("/api/auth/session")).json()
    assert session["type"] == "admin"
    assert session["user"]["username"] == "admin"
    assert (await client.get("/api/auth/check")).json() == {"admin": True, "student": False}

    await client.post("/api/auth/logout")
    assert (await client.get("/api/students")).status_code == 401


@pytest.mark.asyncio
async def test_score_flow(client: AsyncClient):
    await login_admin(client)
    sid = await add_student(client, "An", "S001")
    button = await client.post("/api/buttons", json={"name": "Late", "points": -5, "type": "penalty"})
    bid = button.json()["id"]

    response = await client.post("/api/scores", json={"student_id": sid, "button_id": bid, "points": -5})
    assert response.status_code == 200
    record_id = response.json()["id"]

    board = (await client.get("/api/leaderboard")).json()
    assert board[0]["points"] == 95

    history = (await client.get(f"/api/scores/student/{sid}")).json()
    assert history[0]["button_name"] == "Late"
    assert history[0]["student_code"] == "S001"

    assert (await client.delete(f"/api/scores/{record_id}")).status_code == 200
    board = (await client.get("/api/leaderboard")).json()
    assert board[0]["points"] == 100


@pytest.mark.asyncio
async def test_score_for_unknown_student(client: AsyncClient):
    await login_admin(client)
    response = await client.post("/api/scores", json={"student_id": "nope", "points": 5})
    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_duplicate_student_code(client: AsyncClient):
    await login_admin(client)
    await add_student(client, "An", "S001")
    response = await client.post("/api/students", json={"name": "Other", "student_code": "S001"})
    assert response.status_code == 400
    assert "S001" in response.json()["error"]


@pytest.mark.asyncio
async def test_invalid_button_type(client: AsyncClient):
    await login_admin(client)
    response = await client.post("/api/buttons", json={"name": "Odd", "points": 1, "type": "other"})
    assert response.status_code == 400
    assert (await client.get("/api/buttons/type/other")).status_code == 400


@pytest.mark.asyncio
async def test_malformed_body(client: AsyncClient):
    await login_admin(client)
    response = await client.post("/api/students", json={"name": "An"})
    assert response.status_code == 400
    assert "student_code" in response.json()["error"]


@pytest.mark.asyncio
async def test_points_override_and_reset(client: AsyncClient):
    await login_admin(client)
    sid = await add_student(client, "An", "S001")

    assert (await client.put(f"/api/students/{sid}/points", json={"points": 42})).status_code == 200
    assert (await client.get("/api/leaderboard")).json()[0]["points"] == 42

    response = await client.post("/api/reset-points")
    assert response.json() == {"success": True, "reset": 1}
    assert (await client.get("/api/leaderboard")).json()[0]["points"] == 100


@pytest.mark.asyncio
async def test_student_profile_rank(client: AsyncClient):
    await login_admin(client)
    for name, code, points in [("An", "S001", 100), ("Binh", "S002", 120), ("Chi", "S003", 90)]:
        sid = await add_student(client, name, code)
        await client.put(f"/api/students/{sid}/points", json={"points": points})

    response = await client.post("/api/auth/student/login", json={"studentCode": "S001"})
    assert response.status_code == 200

    profile = (await client.get("/api/user/profile")).json()
    assert profile["student_code"] == "S001"
    assert profile["rank"] == 2
    assert profile["total"] == 3
    # a student session is not an admin session
    assert (await client.get("/api/students")).status_code == 401


@pytest.mark.asyncio
async def test_unknown_student_login(client: AsyncClient):
    response = await client.post("/api/auth/student/login", json={"studentCode": "S999"})
    assert response.status_code == 401
    assert (await client.get("/api/user/profile")).status_code == 401


@pytest.mark.asyncio
async def test_student_history(client: AsyncClient):
    await login_admin(client)
    sid = await add_student(client, "An", "S001")
    await client.post(
        "/api/scores",
        json={"student_id": sid, "points": 5, "note": "helped", "violation_date": "2025-01-15"},
    )

    await client.post("/api/auth/student/login", json={"studentCode": "S001"})
    history = (await client.get("/api/user/history")).json()
    assert len(history) == 1
    assert history[0]["note"] == "helped"
    assert history[0]["violation_date"] == "2025-01-15"


@pytest.mark.asyncio
async def test_deleted_student_loses_session(client: AsyncClient, store):
    sid = store.students.create("An", "S001")
    await client.post("/api/auth/student/login", json={"studentCode": "S001"})
    store.students.delete(sid)

    assert (await client.get("/api/user/profile")).status_code == 401
    assert (await client.get("/api/auth/session")).json() == {"type": None, "user": None}


@pytest.mark.asyncio
async def test_week_overview(client: AsyncClient):
    await login_admin(client)
    sid = await add_student(client, "An", "S001")
    wid = (await client.post("/api/weeks", json={"name": "Tuần 5"})).json()["id"]
    await client.post("/api/scores", json={"student_id": sid, "week_id": wid, "points": 5})

    by_number = (await client.get("/api/overview/5")).json()
    assert by_number["week"]["name"] == "Tuần 5"
    assert len(by_number["records"]) == 1
    assert by_number["records"][0]["student_name"] == "An"

    by_id = (await client.get(f"/api/overview/id/{wid}")).json()
    assert by_id["week"]["week_number"] == 5

    assert (await client.get("/api/overview/42")).json() == {"week": None, "records": []}


@pytest.mark.asyncio
async def test_overview_of_unnumbered_week(client: AsyncClient):
    await login_admin(client)
    sid = await add_student(client, "An", "S001")
    await client.post("/api/weeks", json={"name": "Week 2"})
    midterm = (await client.post("/api/weeks", json={"name": "Midterm"})).json()["id"]
    await client.post("/api/scores", json={"student_id": sid, "week_id": midterm, "points": 5, "note": "midterm"})

    overview = (await client.get(f"/api/overview/id/{midterm}")).json()
    assert overview["week"]["name"] == "Midterm"
    assert [r["note"] for r in overview["records"]] == ["midterm"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path",
    [
        "/api/overview/²",
        "/api/overview/99999999999999999999",
        "/api/overview/id/99999999999999999999",
        "/api/overview/id/nope",
    ],
)
async def test_overview_of_odd_identifiers(client: AsyncClient, path):
    response = await client.get(path)
    assert response.status_code == 200
    assert response.json() == {"week": None, "records": []}


@pytest.mark.asyncio
async def test_active_week(client: AsyncClient):
    await login_admin(client)
    assert (await client.get("/api/weeks/active")).json() is None
    wid = (await client.post("/api/weeks", json={"name": "Week 1"})).json()["id"]

    assert (await client.post(f"/api/weeks/{wid}/activate")).status_code == 200
    assert (await client.get("/api/weeks/active")).json()["id"] == wid


@pytest.mark.asyncio
async def test_wipe_scores(client: AsyncClient):
    await login_admin(client)
    sid = await add_student(client, "An", "S001")
    await client.post("/api/scores", json={"student_id": sid, "points": -5})
    await client.post("/api/scores", json={"student_id": sid, "points": -5})

    response = await client.delete("/api/scores/all")
    assert response.json() == {"success": True, "deleted": 2}
    assert (await client.get("/api/scores/all")).json() == []
    assert (await client.get("/api/leaderboard")).json()[0]["points"] == 100


@pytest.mark.asyncio
async def test_import_students_and_scores(client: AsyncClient):
    await login_admin(client)
    response = await client.post(
        "/api/import/students",
        json={"students": [{"name": "An", "code": "S001"}, {"name": "Binh", "studentCode": "S002"}]},
    )
    assert response.json() == {"success": True, "imported": 2}

    response = await client.post(
        "/api/import/scores",
        json={"records": [{"student_code": "S001", "points": 5}, {"student_code": "S404", "points": 5}]},
    )
    assert response.json() == {"success": True, "imported": 1}

    board = (await client.get("/api/leaderboard")).json()
    assert [s["student_code"] for s in board] == ["S001", "S002"]
    assert board[0]["points"] == 105


@pytest.mark.asyncio
async def test_import_students_file(client: AsyncClient):
    await login_admin(client)
    template = await client.get("/api/import/students/template.csv")
    assert template.status_code == 200
    assert template.headers["content-type"].startswith("text/csv")

    files = {"file": ("students.csv", template.content, "text/csv")}
    response = await client.post("/api/import/students/file", files=files)
    assert response.json() == {"success": True, "imported": 2, "total": 2}

    response = await client.post("/api/import/students/file", files={"file": ("notes.txt", b"x", "text/plain")})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_change_password(client: AsyncClient):
    await login_admin(client)
    response = await client.post("/api/auth/change-password", json={"newPassword": "s3cret"})
    assert response.status_code == 200

    await client.post("/api/auth/logout")
    bad = await client.post("/api/auth/admin/login", json={"username": "admin", "password": "admin123"})
    assert bad.status_code == 401
    good = await client.post("/api/auth/admin/login", json={"username": "admin", "password": "s3cret"})
    assert good.status_code == 200
