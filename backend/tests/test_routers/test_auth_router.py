"""
Tests for /api/auth endpoints.
"""

import repositories.db_models as db_models

TEST_PASSWORD = "password123"


class TestRegisterEndpoint:
    def test_register_returns_token(self, client):
        response = client.post(
            "/api/auth/register",
            json={
                "email": "Resident@Example.com",
                "password": "secure-pass",
                "full_name": "New Resident",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["user"]["email"] == "resident@example.com"
        assert data["user"]["role"] == "citizen"

        me = client.get(
            "/api/auth/me",
            headers={"Authorization": f"Bearer {data['access_token']}"},
        )
        assert me.status_code == 200
        assert me.json()["full_name"] == "New Resident"

    def test_duplicate_email_conflicts(self, client, citizen):
        response = client.post(
            "/api/auth/register",
            json={
                "email": "citizen@example.com",
                "password": "secure-pass",
                "full_name": "Copy Cat",
            },
        )
        assert response.status_code == 409
        assert "correlation_id" in response.json()

    def test_short_password(self, client):
        response = client.post(
            "/api/auth/register",
            json={"email": "x@example.com", "password": "abc", "full_name": "X"},
        )
        assert response.status_code == 422

    def test_invalid_email(self, client):
        response = client.post(
            "/api/auth/register",
            json={"email": "not-an-email", "password": "secure-pass", "full_name": "X"},
        )
        assert response.status_code == 422


class TestLoginEndpoint:
    def test_login(self, client, officer):
        response = client.post(
            "/api/auth/login",
            json={"email": "officer@example.com", "password": TEST_PASSWORD},
        )

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["role"] == "officer"
        assert user["department_id"] == officer.department_id

    def test_bad_credentials(self, client, citizen):
        wrong = client.post(
            "/api/auth/login",
            json={"email": "citizen@example.com", "password": "wrong-password"},
        )
        unknown = client.post(
            "/api/auth/login",
            json={"email": "ghost@example.com", "password": TEST_PASSWORD},
        )

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json()["detail"] == unknown.json()["detail"]
        assert wrong.headers["WWW-Authenticate"] == "Bearer"


class TestMeEndpoint:
    def test_requires_token(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401

    def test_rejects_garbage_token(self, client):
        response = client.get(
            "/api/auth/me", headers={"Authorization": "Bearer not.a.jwt"}
        )
        assert response.status_code == 401

    def test_token_of_deleted_user(self, client, db_session, citizen, headers_for):
        headers = headers_for(citizen)
        db_session.delete(citizen)
        db_session.commit()

        assert client.get("/api/auth/me", headers=headers).status_code == 401

    def test_role_comes_from_database(
        self, client, db_session, citizen, public_works, headers_for
    ):
        headers = headers_for(citizen)
        citizen.role = db_models.UserRole.OFFICER
        citizen.department_id = public_works.id
        db_session.commit()

        me = client.get("/api/auth/me", headers=headers).json()
        assert me["role"] == "officer"
        assert me["department_name"] == "Public Works"
