"""Tests for the browser landing page behind emailed reset links."""

from autoclinic.core.config import settings

IPHONE = "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X)"


def test_page_with_token(client):
    resp = client.get("/auth/reset-password", params={"token": "abc123"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert 'const token = "abc123";' in resp.text
    assert "jwautoclinic246://auth/reset-password?token=abc123" in resp.text
    assert 'id="password"' in resp.text
    assert "const isMobile = false;" in resp.text


def test_mobile_agent_tries_the_app(client):
    resp = client.get("/auth/reset-password", params={"token": "abc123"}, headers={"User-Agent": IPHONE})
    assert "const isMobile = true;" in resp.text


def test_missing_token(client):
    resp = client.get("/auth/reset-password")
    assert resp.status_code == 200
    assert "missing a token" in resp.text
    assert 'id="password"' not in resp.text


def test_token_cannot_break_out_of_script(client):
    resp = client.get("/auth/reset-password", params={"token": "</script><script>alert(1)</script>"})
    assert "</script><script>alert(1)" not in resp.text


def test_deep_link_honours_app_link_override(client, monkeypatch):
    monkeypatch.setattr(settings, "APP_RESET_LINK_BASE", "exp://127.0.0.1:19000/--/reset")
    resp = client.get("/auth/reset-password", params={"token": "abc123"})
    assert '"exp://127.0.0.1:19000/--/reset?token=abc123"' in resp.text
