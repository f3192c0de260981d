"""
Tests for sign-up, login and the page-level auth redirects.
"""

from app.auth import SESSION_COOKIE, decode_session_token, hash_password, verify_password
from app.utils.safe_redirect import safe_redirect_url


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("correct horse")
        assert verify_password("correct horse", hashed)
        assert not verify_password("wrong horse", hashed)

    def test_malformed_hash_is_rejected(self):
        assert verify_password("anything", "not-a-hash") is False


class TestSignupAndLogin:
    """Tests for the form-based auth flow."""

    def test_signup_signs_the_user_in(self, anon_client):
        response = anon_client.post(
            "/signup",
            data={"email": "New@Example.com", "password": "long-enough", "full_name": "New"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/"
        token = response.cookies.get(SESSION_COOKIE)
        assert decode_session_token(token)["user_id"]

    def test_signup_rejects_short_password(self, anon_client):
        response = anon_client.post(
            "/signup", data={"email": "a@example.com", "password": "short"}
        )
        assert response.status_code == 400

    def test_signup_rejects_duplicate_email(self, anon_client, user):
        response = anon_client.post(
            "/signup", data={"email": user.email, "password": "long-enough"}
        )
        assert response.status_code == 400

    def test_login_success(self, anon_client, user):
        response = anon_client.post(
            "/login",
            data={"email": user.email, "password": "password123", "next": "/history/2024-01-15"},
            follow_redirects=False,
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/history/2024-01-15"
        assert SESSION_COOKIE in response.cookies

    def test_login_failure(self, anon_client, user):
        response = anon_client.post(
            "/login",
            data={"email": user.email, "password": "nope"},
            follow_redirects=False,
        )
        assert response.status_code == 303
        assert response.headers["location"].startswith("/login?error=")

    def test_login_failure_keeps_encoded_next(self, anon_client, user):
        response = anon_client.post(
            "/login",
            data={"email": user.email, "password": "nope", "next": "/history/2024-01-15?tab=a&b=c"},
            follow_redirects=False,
        )
        assert response.headers["location"] == (
            "/login?error=Invalid+email+or+password&next=/history/2024-01-15%3Ftab%3Da%26b%3Dc"
        )

        page = anon_client.get(response.headers["location"])
        assert "/history/2024-01-15?tab=a&amp;b=c" in page.text

    def test_login_ignores_external_next(self, anon_client, user):
        response = anon_client.post(
            "/login",
            data={"email": user.email, "password": "password123", "next": "https://evil.example"},
            follow_redirects=False,
        )
        assert response.headers["location"] == "/"


class TestPages:
    """Tests for the server-rendered pages."""

    def test_dashboard_redirects_anonymous_users(self, anon_client):
        response = anon_client.get("/", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/login"

    def test_dashboard_renders_notes(self, client, user, add_notes):
        add_notes(user, "Went for a run")
        response = client.get("/")
        assert response.status_code == 200
        assert "Went for a run" in response.text

    def test_history_redirect_carries_next(self, anon_client):
        response = anon_client.get("/history/2024-01-15", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/login?next=/history/2024-01-15"

    def test_history_page(self, client):
        response = client.get("/history/2024-01-15")
        assert response.status_code == 200
        assert "No summary for this date." in response.text

    def test_login_page(self, anon_client):
        assert anon_client.get("/login").status_code == 200


class TestSafeRedirect:
    def test_relative_path_kept(self):
        assert safe_redirect_url("/history/2024-01-15") == "/history/2024-01-15"

    def test_unsafe_targets_fall_back(self):
        for url in ("https://evil.example", "//evil.example", "/\\evil.example", "", None):
            assert safe_redirect_url(url) == "/"
