"""Tests for User CRUD and auth endpoints."""
from tests.conftest import PASSWORD, create_test_user, signup


class TestAuth:
    """Signup, login and demo login by role."""

    def test_signup_creates_student(self, client):
        data = signup(client, name="Alice")
        assert data["name"] == "Alice"
        assert data["role"] == "STUDENT"
        assert data["joined_club_ids"] == []
        assert "password" not in data and "password_hash" not in data

    def test_signup_ignores_requested_role(self, client):
        resp = client.post("/api/auth/signup", json={
            "name": "Sneaky", "email": "sneaky@college.edu", "password": PASSWORD, "role": "COLLEGE_ADMIN",
        })
        assert resp.status_code == 201
        assert resp.json()["role"] == "STUDENT"

    def test_signup_duplicate_email(self, client):
        signup(client, name="Alice", email="alice@college.edu")
        resp = client.post("/api/auth/signup", json={
            "name": "Alice Again", "email": "ALICE@college.edu", "password": PASSWORD,
        })
        assert resp.status_code == 409

    def test_login(self, client):
        user = signup(client, name="Bob", email="bob@college.edu")
        resp = client.post("/api/auth/login", json={"email": "bob@college.edu", "password": PASSWORD})
        assert resp.status_code == 200
        assert resp.json()["user_id"] == user["user_id"]

    def test_login_wrong_password(self, client):
        signup(client, name="Bob", email="bob@college.edu")
        resp = client.post("/api/auth/login", json={"email": "bob@college.edu", "password": "nope"})
        assert resp.status_code == 401

    def test_demo_login_by_role(self, client, college_admin):
        resp = client.post("/api/auth/demo/college_admin")
        assert resp.status_code == 200
        assert resp.json()["user_id"] == college_admin

    def test_demo_login_unknown_role(self, client):
        assert client.post("/api/auth/demo/janitor").status_code == 400

    def test_demo_login_no_user_with_role(self, client):
        assert client.post("/api/auth/demo/CLUB_ADMIN").status_code == 404


class TestUserCRUD:
    """User create / get / update / list."""

    def test_admin_creates_user_of_any_role(self, client, college_admin):
        data = create_test_user(client, college_admin, name="Carol", role="CLUB_ADMIN")
        assert data["role"] == "CLUB_ADMIN"

    def test_student_cannot_create_users(self, client):
        student = signup(client)
        resp = client.post(f"/api/users/?actor_user_id={student['user_id']}", json={
            "name": "Eve", "email": "eve@college.edu", "password": PASSWORD,
        })
        assert resp.status_code == 403

    def test_invalid_role(self, client, college_admin):
        resp = client.post(f"/api/users/?actor_user_id={college_admin}", json={
            "name": "Eve", "email": "eve@college.edu", "password": PASSWORD, "role": "WIZARD",
        })
        assert resp.status_code == 400

    def test_get_user(self, client):
        user = signup(client, name="Dave")
        resp = client.get(f"/api/users/{user['user_id']}")
        assert resp.status_code == 200
        assert resp.json()["name"] == "Dave"

    def test_get_user_not_found(self, client):
        resp = client.get("/api/users/00000000-0000-0000-0000-000000000000")
        assert resp.status_code == 404

    def test_update_profile(self, client):
        user = signup(client)
        resp = client.patch(f"/api/users/{user['user_id']}?actor_user_id={user['user_id']}", json={
            "bio": "Coffee enthusiast", "year": "3rd Year", "branch": "CSE",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["bio"] == "Coffee enthusiast"
        assert data["year"] == "3rd Year"
        assert data["name"] == user["name"]

    def test_update_someone_elses_profile(self, client):
        user = signup(client, name="Owner")
        other = signup(client, name="Intruder")
        resp = client.patch(f"/api/users/{user['user_id']}?actor_user_id={other['user_id']}", json={
            "bio": "hacked",
        })
        assert resp.status_code == 403
        assert client.get(f"/api/users/{user['user_id']}").json()["bio"] is None

    def test_update_null_name_rejected(self, client):
        user = signup(client)
        url = f"/api/users/{user['user_id']}?actor_user_id={user['user_id']}"
        assert client.patch(url, json={"name": None}).status_code == 422
        assert client.patch(url, json={"bio": None}).status_code == 200

    def test_list_users_by_role(self, client, college_admin):
        signup(client, name="Student One")
        signup(client, name="Student Two")
        resp = client.get("/api/users/?role=STUDENT")
        assert resp.status_code == 200
        assert {u["role"] for u in resp.json()} == {"STUDENT"}
        assert len(resp.json()) == 2

    def test_registrations_empty(self, client):
        user = signup(client)
        resp = client.get(f"/api/users/{user['user_id']}/registrations")
        assert resp.status_code == 200
        assert resp.json() == []
