"""
Tests for /api/profile endpoints.
"""

TEST_PASSWORD = "password123"


class TestProfileRouter:
    def test_get_profile(self, client, headers_for, officer):
        data = client.get("/api/profile", headers=headers_for(officer)).json()

        assert data["email"] == "officer@example.com"
        assert data["department_name"] == "Public Works"
        assert data["notification_email"] is True
        assert "hashed_password" not in data

    def test_update_profile(self, client, headers_for, citizen):
        response = client.patch(
            "/api/profile",
            json={"phone": "9876543210", "notification_comments": False},
            headers=headers_for(citizen),
        )

        assert response.status_code == 200
        assert response.json()["phone"] == "9876543210"
        assert response.json()["notification_comments"] is False

    def test_role_cannot_be_changed_here(self, client, headers_for, citizen):
        client.patch(
            "/api/profile", json={"role": "admin"}, headers=headers_for(citizen)
        )
        me = client.get("/api/profile", headers=headers_for(citizen)).json()
        assert me["role"] == "citizen"

    def test_change_password_then_login(self, client, headers_for, citizen):
        response = client.post(
            "/api/profile/change-password",
            json={"current_password": TEST_PASSWORD, "new_password": "fresh-secret"},
            headers=headers_for(citizen),
        )
        assert response.json() == {"message": "Password changed successfully"}

        old = client.post(
            "/api/auth/login",
            json={"email": "citizen@example.com", "password": TEST_PASSWORD},
        )
        new = client.post(
            "/api/auth/login",
            json={"email": "citizen@example.com", "password": "fresh-secret"},
        )
        assert old.status_code == 401
        assert new.status_code == 200

    def test_change_password_wrong_current(self, client, headers_for, citizen):
        response = client.post(
            "/api/profile/change-password",
            json={"current_password": "nope", "new_password": "fresh-secret"},
            headers=headers_for(citizen),
        )
        assert response.status_code == 401

    def test_upload_avatar(self, client, headers_for, citizen, fake_magic, png_bytes):
        response = client.post(
            "/api/profile/avatar",
            files={"file": ("me.png", png_bytes, "image/png")},
            headers=headers_for(citizen),
        )

        assert response.status_code == 200
        avatar_url = response.json()["avatar_url"]
        assert avatar_url.startswith("/uploads/avatars/")
        me = client.get("/api/profile", headers=headers_for(citizen)).json()
        assert me["avatar_url"] == avatar_url

    def test_upload_avatar_rejects_text(self, client, headers_for, citizen, fake_magic):
        response = client.post(
            "/api/profile/avatar",
            files={"file": ("me.png", b"definitely not an image", "image/png")},
            headers=headers_for(citizen),
        )
        assert response.status_code == 422
