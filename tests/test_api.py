"""HTTP surface: routes, auth guard and error bodies."""

from datetime import datetime

from dorm_assignment.seed_db import DEMO_PASSWORD


class TestDorms:
    def test_list_dorms(self, client):
        resp = client.get("/dorms")
        assert resp.status_code == 200
        assert [d["name"] for d in resp.json()] == ["Sunset Hall", "Lakeside Dorm"]
        assert resp.json()[0]["location"] == "West Campus"

    def test_rooms_expose_occupant_names_only(self, client, seeded):
        resp = client.get(f"/dorms/{seeded['sunset_hall']}/rooms")
        assert resp.status_code == 200
        rooms = resp.json()
        assert [r["number"] for r in rooms] == ["101", "102"]
        assert rooms[0]["currentStudents"] == [{"id": seeded["john"], "name": "John Doe"}]
        assert "password_hash" not in resp.text
        assert "john@example.com" not in resp.text

    def test_room_fields_use_camel_case(self, client, seeded):
        room = client.get(f"/dorms/{seeded['sunset_hall']}/rooms").json()[0]
        assert set(room) == {"id", "dormId", "number", "capacity", "currentStudents"}
        assert room["dormId"] == seeded["sunset_hall"]

    def test_rooms_for_unknown_dorm(self, client):
        resp = client.get("/dorms/9999/rooms")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}


class TestLogin:
    def test_login(self, client, seeded):
        resp = client.post("/login", json={"email": "john@example.com", "password": DEMO_PASSWORD})
        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Logged in successfully"
        assert body["tokenType"] == "bearer"
        assert body["student"] == {
            "id": seeded["john"],
            "name": "John Doe",
            "email": "john@example.com",
            "assignedRoom": seeded["room_101"],
        }
        assert "password" not in resp.text

    def test_bad_logins_are_indistinguishable(self, client):
        wrong_password = client.post("/login", json={"email": "john@example.com", "password": "nope"})
        unknown_email = client.post("/login", json={"email": "ghost@example.com", "password": "nope"})

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {
            "error": "InvalidCredentials",
            "message": "Invalid email or password",
        }

    def test_session_cookie_authenticates(self, client, seeded):
        client.post("/login", json={"email": "jane@example.com", "password": DEMO_PASSWORD})

        resp = client.get("/user")
        assert resp.status_code == 200
        assert resp.json()["user"]["id"] == seeded["jane"]

    def test_logout_revokes_token(self, client, login):
        headers = login()
        assert client.post("/logout", headers=headers).json() == {"message": "Logged out successfully"}

        resp = client.get("/user", headers=headers)
        assert resp.status_code == 401
        assert resp.json()["error"] == "Unauthorized"

    def test_check_auth(self, client, login, seeded):
        assert client.get("/check-auth").json() == {"isAuthenticated": False, "user": None}

        headers = login()
        body = client.get("/check-auth", headers=headers).json()
        assert body["isAuthenticated"] is True
        assert body["user"]["id"] == seeded["jane"]

    def test_check_auth_with_garbage_token(self, client):
        resp = client.get("/check-auth", headers={"Authorization": "Bearer garbage"})
        assert resp.status_code == 200
        assert resp.json()["isAuthenticated"] is False


class TestAuthGuard:
    def test_protected_routes_need_session(self, client, seeded):
        for method, path in [
            ("post", f"/rooms/{seeded['room_202']}/assign"),
            ("post", "/rooms/unassign"),
            ("get", "/user"),
            ("post", "/logout"),
            ("get", "/audit-logs/me"),
        ]:
            resp = getattr(client, method)(path)
            assert resp.status_code == 401, path
            assert resp.json() == {"error": "Unauthorized", "message": "Unauthorized"}


class TestRoomRoutes:
    def test_assign_and_unassign(self, client, login, seeded):
        headers = login()

        resp = client.post(f"/rooms/{seeded['room_202']}/assign", headers=headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Room assigned successfully"}
        assert client.get("/user", headers=headers).json()["user"]["assignedRoom"] == seeded["room_202"]

        resp = client.post("/rooms/unassign", headers=headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Successfully unassigned from the room"}
        assert client.get("/user", headers=headers).json()["user"]["assignedRoom"] is None

    def test_full_room(self, client, login, seeded):
        jane = login()
        john = login("john@example.com")
        assert client.post(f"/rooms/{seeded['room_201']}/assign", headers=jane).status_code == 200

        resp = client.post(f"/rooms/{seeded['room_201']}/assign", headers=john)
        assert resp.status_code == 400
        assert resp.json() == {"error": "CapacityExceeded", "message": "Room is already full"}

        rooms = client.get(f"/dorms/{seeded['lakeside_dorm']}/rooms").json()
        single = next(r for r in rooms if r["id"] == seeded["room_201"])
        assert [s["name"] for s in single["currentStudents"]] == ["Jane Smith"]

    def test_reassign_into_own_full_room(self, client, login, seeded):
        jane = login()
        assert client.post(f"/rooms/{seeded['room_201']}/assign", headers=jane).status_code == 200

        resp = client.post(f"/rooms/{seeded['room_201']}/assign", headers=jane)
        assert resp.status_code == 400
        assert resp.json()["error"] == "CapacityExceeded"
        assert client.get("/user", headers=jane).json()["user"]["assignedRoom"] == seeded["room_201"]

    def test_unknown_room(self, client, login):
        resp = client.post("/rooms/9999/assign", headers=login())
        assert resp.status_code == 404
        assert resp.json()["error"] == "NotFound"

    def test_unassign_when_not_assigned(self, client, login):
        resp = client.post("/rooms/unassign", headers=login())
        assert resp.status_code == 400
        assert resp.json() == {
            "error": "NotAssigned",
            "message": "You are not currently assigned to any room",
        }

    def test_history(self, client, login, seeded):
        headers = login()
        client.post(f"/rooms/{seeded['room_202']}/assign", headers=headers)

        logs = client.get("/audit-logs/me", headers=headers).json()
        assert [entry["action"] for entry in logs][:2] == ["room_assigned", "login"]
        assert all(entry["username"] == "jane@example.com" for entry in logs)
        assert logs[0]["resourceType"] == "room"
        assert logs[0]["resourceId"] == seeded["room_202"]
        assert isinstance(datetime.fromisoformat(logs[0]["createdAt"].replace("Z", "+00:00")), datetime)
