"""Tests for HTTP action to response conversion"""

from authflow.core.http_action import (
    BadRequestAction,
    ForbiddenAction,
    HttpAction,
    OkAction,
    RedirectAction,
    SeeOtherAction,
    UnauthorizedAction,
)


class TestHttpActions:
    def test_redirect(self):
        response = RedirectAction("https://provider.example/authorize?state=abc").to_response()

        assert response.status_code == 302
        assert response.headers["location"] == "https://provider.example/authorize?state=abc"

    def test_see_other(self):
        response = SeeOtherAction("/next").to_response()

        assert response.status_code == 303
        assert response.headers["location"] == "/next"

    def test_ok_form_page(self):
        response = OkAction("<form id='saml'></form>").to_response()

        assert response.status_code == 200
        assert response.body == b"<form id='saml'></form>"
        assert response.headers["content-type"].startswith("text/html")

    def test_status_only_actions(self):
        assert BadRequestAction().to_response().status_code == 400
        assert UnauthorizedAction().to_response().status_code == 401
        assert ForbiddenAction("nope").to_response().body == b"nope"

    def test_custom_headers_preserved(self):
        action = UnauthorizedAction(headers={"WWW-Authenticate": 'Basic realm="cas"'})

        response = action.to_response()

        assert response.headers["www-authenticate"] == 'Basic realm="cas"'

    def test_generic_action_is_exception(self):
        action = HttpAction(418, content="teapot")

        assert isinstance(action, Exception)
        assert action.to_response().status_code == 418
