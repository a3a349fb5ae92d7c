from urllib.parse import unquote_plus

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from storefront.app_setup.exception_handlers import register_exception_handlers
from storefront.errors import AuthenticationRequired, EmptyCart, Timeout


def _make_app():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/library-page")
    def library_page():
        raise AuthenticationRequired()

    @app.get("/checkout-page")
    def checkout_page():
        raise EmptyCart()

    @app.get("/api/v1/checkout/slow")
    def slow():
        raise Timeout()

    @app.get("/admin-page")
    def admin_page():
        raise HTTPException(status_code=403, detail="Accès interdit")

    return app


def test_browser_redirected_to_login_on_auth_error():
    r = TestClient(_make_app()).get("/library-page", headers={"Accept": "text/html"}, follow_redirects=False)

    assert r.status_code == 303
    assert r.headers["location"].startswith("/login?error=")
    assert unquote_plus(r.headers["location"].split("error=", 1)[1]) == "Veuillez vous connecter"


def test_browser_redirected_to_cart_on_empty_cart():
    r = TestClient(_make_app()).get("/checkout-page", headers={"Accept": "text/html"}, follow_redirects=False)

    assert r.status_code == 303
    assert r.headers["location"].startswith("/cart?error=")


def test_api_client_gets_json_error():
    r = TestClient(_make_app()).get("/library-page", headers={"Accept": "application/json"})

    assert r.status_code == 401
    assert r.json() == {"detail": "Veuillez vous connecter", "error": "AuthenticationRequired"}


def test_checkout_errors_carry_retry_state():
    r = TestClient(_make_app()).get("/api/v1/checkout/slow")

    assert r.status_code == 504
    assert r.json()["error"] == "Timeout"
    assert r.json()["state"] == "FAILED"
    assert r.json()["retry"] is True


def test_http_403_redirects_browsers_and_returns_json_otherwise():
    client = TestClient(_make_app())

    r = client.get("/admin-page", headers={"Accept": "text/html"}, follow_redirects=False)
    assert r.status_code == 303

    r = client.get("/admin-page")
    assert r.status_code == 403
    assert r.json() == {"detail": "Accès interdit"}
