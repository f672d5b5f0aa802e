"""
Integration tests for API endpoints.
"""

from unittest.mock import patch

import pytest
from httpx import AsyncClient, ASGITransport

from caterdesk.api.main import create_app

from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD

pytestmark = pytest.mark.asyncio


async def first_row(client, path: str) -> dict:
    response = await client.get(path)
    assert response.status_code == 200
    return response.json()["state"]["rows"][0]


class TestSystemEndpoints:
    """Tests for health and root routing."""

    async def test_health_check(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["auth_gate"] == "unauthenticated"
        assert data["components"]["notifications_pending"] == "0"

    async def test_root_redirects_to_dashboard(self, client):
        response = await client.get("/")

        assert response.status_code == 303
        assert response.headers["location"] == "/api/v1/dashboard"

    async def test_protected_view_redirects_to_login(self, client):
        response = await client.get("/api/v1/reviews")

        assert response.status_code == 303
        assert response.headers["location"] == "/api/v1/auth/login"

    async def test_views_wait_for_gate(self, test_settings):
        """Before the stored session has been read, views report loading."""
        app = create_app(test_settings)
        transport = ASGITransport(app=app)

        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/api/v1/menu")

        assert response.status_code == 503
        assert response.json() == {"status": "initializing"}


class TestAuthEndpoints:
    """Tests for login, logout and the current session."""

    async def test_login_view(self, client):
        response = await client.get("/api/v1/auth/login")

        assert response.status_code == 200
        assert response.json() == {
            "title": "Login | Jagdamba Caterers - Admin Panel",
            "authenticated": False,
        }

    async def test_login_success(self, client, api_admin):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(api_admin["id"])
        assert data["username"] == "owner"
        assert "password_hash" not in data
        assert [n["title"] for n in data["notifications"]] == ["Welcome back!"]

    async def test_welcome_is_not_repeated_on_next_action(self, auth_client):
        response = await auth_client.post(
            "/api/v1/reviews",
            json={"client_name": "Asha", "review_text": "Loved the dal baati", "rating": 5},
        )

        titles = [n["title"] for n in response.json()["notifications"]]
        assert titles == ["Review created successfully"]

    @pytest.mark.parametrize(
        "email,password",
        [
            (ADMIN_EMAIL, "wrong-password"),
            ("nobody@gmail.com", ADMIN_PASSWORD),
            ("", ""),
        ],
    )
    async def test_login_failures_look_alike(self, client, api_admin, email, password):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": email, "password": password},
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"

    async def test_me(self, auth_client):
        response = await auth_client.get("/api/v1/auth/me")

        assert response.status_code == 200
        assert response.json()["email"] == ADMIN_EMAIL

    async def test_login_view_redirects_when_signed_in(self, auth_client):
        response = await auth_client.get("/api/v1/auth/login")

        assert response.status_code == 303
        assert response.headers["location"] == "/api/v1/dashboard"

    async def test_logout(self, auth_client):
        response = await auth_client.post("/api/v1/auth/logout")
        assert response.status_code == 204

        response = await auth_client.get("/api/v1/auth/me")
        assert response.status_code == 303
        assert response.headers["location"] == "/api/v1/auth/login"


class TestReviewEndpoints:
    """Tests for review CRUD."""

    async def test_create_and_list(self, auth_client):
        response = await auth_client.post(
            "/api/v1/reviews",
            json={"client_name": "Asha", "review_text": "Loved the dal baati", "rating": 5},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["ok"] is True
        assert body["notifications"][0]["title"] == "Review created successfully"

        response = await auth_client.get("/api/v1/reviews")
        data = response.json()
        assert data["title"] == "Reviews | Jagdamba Caterers - Admin Panel"
        assert data["user"]["email"] == ADMIN_EMAIL
        assert data["state"]["rows"][0]["client_name"] == "Asha"
        assert data["state"]["empty"] is False

    async def test_rating_out_of_range(self, auth_client):
        response = await auth_client.post(
            "/api/v1/reviews",
            json={"client_name": "Asha", "review_text": "Nice", "rating": 6},
        )

        assert response.status_code == 422
        body = response.json()
        assert body["ok"] is False
        assert body["field"] == "rating"

    async def test_update_and_delete(self, auth_client):
        await auth_client.post(
            "/api/v1/reviews",
            json={"client_name": "Ravi", "review_text": "Good", "rating": 3},
        )
        review = await first_row(auth_client, "/api/v1/reviews")

        response = await auth_client.put(
            f"/api/v1/reviews/{review['id']}",
            json={"client_name": "Ravi", "review_text": "Good", "rating": 4},
        )
        assert response.status_code == 200

        updated = await first_row(auth_client, "/api/v1/reviews")
        assert updated["rating"] == 4
        assert updated["review_text"] == "Good"

        response = await auth_client.delete(f"/api/v1/reviews/{review['id']}")
        assert response.status_code == 200

        response = await auth_client.get("/api/v1/reviews")
        assert response.json()["state"]["rows"] == []

    async def test_delete_missing_review(self, auth_client):
        response = await auth_client.delete("/api/v1/reviews/9999")

        assert response.status_code == 502
        assert response.json()["error"] == "Failed to delete review"


class TestMenuEndpoints:
    """Tests for menu items and image uploads."""

    async def test_create_with_image(self, auth_client):
        response = await auth_client.post(
            "/api/v1/menu",
            data={"hindi_name": "पनीर टिक्का", "english_name": "Paneer Tikka", "price": "250"},
            files={"image": ("paneer tikka.jpg", b"\xff\xd8\xff\xe0" + b"\x00" * 512, "image/jpeg")},
        )
        assert response.status_code == 201

        item = await first_row(auth_client, "/api/v1/menu")
        assert item["image_url"].startswith("/media/menu-images/")
        assert item["image_url"].endswith("_paneertikka.jpg")

        image = await auth_client.get(item["image_url"])
        assert image.status_code == 200
        assert image.content.startswith(b"\xff\xd8")

    async def test_oversized_image_rejected(self, auth_client):
        response = await auth_client.post(
            "/api/v1/menu",
            data={"hindi_name": "थाली", "price": "400"},
            files={"image": ("thali.jpg", b"\x00" * (6 * 1024 * 1024), "image/jpeg")},
        )

        assert response.status_code == 413
        assert response.json()["code"] == "FILE_TOO_LARGE"

        listing = await auth_client.get("/api/v1/menu")
        assert listing.json()["state"]["rows"] == []

    async def test_non_image_rejected(self, auth_client):
        response = await auth_client.post(
            "/api/v1/menu",
            data={"hindi_name": "थाली", "price": "400"},
            files={"image": ("menu.pdf", b"%PDF-1.7", "application/pdf")},
        )

        assert response.status_code == 415

    async def test_toggle_availability(self, auth_client):
        await auth_client.post("/api/v1/menu", json={"hindi_name": "लस्सी", "price": 60})
        item = await first_row(auth_client, "/api/v1/menu")

        response = await auth_client.patch(f"/api/v1/menu/{item['id']}/availability")

        assert response.status_code == 200
        assert response.json()["notifications"][0]["title"] == "लस्सी marked as unavailable"

        data = (await auth_client.get("/api/v1/menu")).json()["state"]
        assert data["available_count"] == 0
        assert data["total_count"] == 1
        assert data["prices"][item["id"]] == "₹60"


class TestAdminEndpoints:
    """Tests for admin accounts."""

    async def test_list_marks_current_admin(self, auth_client, api_admin):
        response = await auth_client.get("/api/v1/admins")

        state = response.json()["state"]
        assert state["current_admin_id"] == str(api_admin["id"])
        assert all("password_hash" not in row for row in state["rows"])

    async def test_cannot_delete_self(self, auth_client, api_admin):
        response = await auth_client.delete(f"/api/v1/admins/{api_admin['id']}")

        assert response.status_code == 403
        assert response.json()["error"] == "You cannot delete your own account"

    async def test_create_requires_password(self, auth_client):
        response = await auth_client.post(
            "/api/v1/admins",
            data={"username": "manager", "email": "manager@gmail.com"},
        )

        assert response.status_code == 422
        assert response.json()["error"] == "Password is required for new admin"

    async def test_new_admin_can_sign_in(self, auth_client):
        response = await auth_client.post(
            "/api/v1/admins",
            data={"username": "manager", "email": "manager@gmail.com", "password": "rasmalai"},
        )
        assert response.status_code == 201

        await auth_client.post("/api/v1/auth/logout")
        response = await auth_client.post(
            "/api/v1/auth/login",
            json={"email": "manager@gmail.com", "password": "rasmalai"},
        )
        assert response.status_code == 200
        assert response.json()["username"] == "manager"


class TestDashboardAndContacts:
    """Tests for overview statistics and inquiry follow-up links."""

    async def test_dashboard_stats(self, app, auth_client):
        gateway = app.state.services.gateway
        await gateway.insert("reviews", {"client_name": "Asha", "review_text": "Great", "rating": 5})
        await gateway.insert("reviews", {"client_name": "Ravi", "review_text": "Fine", "rating": 4})

        response = await auth_client.get("/api/v1/dashboard")

        assert response.status_code == 200
        state = response.json()["state"]
        assert state["total_reviews"] == 2
        assert state["average_rating"] == 4.5
        assert state["total_admins"] == 1
        assert state["failed_sources"] == []

    async def test_contact_links(self, app, auth_client):
        row = await app.state.services.gateway.insert(
            "contact_form",
            {"name": "Kabir", "email": "kabir@gmail.com", "phone": "+91 98765 43210",
             "event_type": "Wedding"},
        )

        response = await auth_client.get(f"/api/v1/contacts/{row['id']}/links")

        assert response.status_code == 200
        links = response.json()
        assert links["whatsapp"].startswith("https://wa.me/919876543210?text=")
        assert links["phone"] == "tel:+91 98765 43210"
        assert links["email"].startswith("mailto:kabir@gmail.com?subject=")

    async def test_unknown_contact(self, auth_client):
        response = await auth_client.get("/api/v1/contacts/9999/links")

        assert response.status_code == 404

    async def test_open_contact_link(self, app, auth_client):
        row = await app.state.services.gateway.insert(
            "contact_form", {"name": "Kabir", "email": "kabir@gmail.com"}
        )

        with patch("caterdesk.links.webbrowser.open_new_tab") as opener:
            response = await auth_client.post(f"/api/v1/contacts/{row['id']}/links/email/open")
            missing = await auth_client.post(f"/api/v1/contacts/{row['id']}/links/whatsapp/open")

        assert response.status_code == 200
        opener.assert_called_once()
        assert opener.call_args.args[0].startswith("mailto:kabir@gmail.com")
        assert missing.status_code == 422
