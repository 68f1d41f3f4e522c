import pytest
import requests

from app.repositories.supabase_client import AuthError, StorageError, SupabaseClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None, content=b"", headers=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.content = content
        self.headers = headers or {}
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, headers=None, params=None, timeout=None):
        self.requests.append({"url": url, "headers": headers, "params": params})
        if self.error is not None:
            raise self.error
        return self.response


def make_client(session):
    return SupabaseClient("https://demo.supabase.co/", "anon", "Bearer token", session=session)


def test_get_user_sends_caller_token():
    session = FakeSession(FakeResponse(payload={"id": "user-1"}))

    assert make_client(session).get_user() == {"id": "user-1"}
    request = session.requests[0]
    assert request["url"] == "https://demo.supabase.co/auth/v1/user"
    assert request["headers"] == {"apikey": "anon", "Authorization": "Bearer token"}


@pytest.mark.parametrize("response", [
    FakeResponse(401, payload={"msg": "invalid JWT"}),
    FakeResponse(200, payload={}),
])
def test_get_user_rejections(response):
    with pytest.raises(AuthError):
        make_client(FakeSession(response)).get_user()


def test_download_quotes_path_and_reads_content_type():
    session = FakeSession(FakeResponse(content=b"img", headers={"Content-Type": "image/webp; charset=binary"}))

    stored = make_client(session).download("article-photos", "user-1/ma photo.webp")

    assert stored.data == b"img"
    assert stored.content_type == "image/webp"
    assert session.requests[0]["url"] == (
        "https://demo.supabase.co/storage/v1/object/article-photos/user-1/ma%20photo.webp"
    )


def test_download_errors():
    with pytest.raises(StorageError, match="Object not found"):
        make_client(FakeSession(FakeResponse(404, payload={"message": "Object not found"}))).download("b", "x")
    with pytest.raises(StorageError, match="HTTP 500"):
        make_client(FakeSession(FakeResponse(500))).download("b", "x")
    with pytest.raises(StorageError):
        make_client(FakeSession(error=requests.ConnectionError("down"))).download("b", "x")


def test_family_member_lookup():
    session = FakeSession(FakeResponse(payload=[{"persona_id": "trendy", "writing_style": None}]))

    member = make_client(session).get_family_member("m-1", "user-1")

    assert member == {"persona_id": "trendy", "writing_style": None}
    assert session.requests[0]["params"]["id"] == "eq.m-1"
    assert session.requests[0]["params"]["user_id"] == "eq.user-1"


def test_family_member_missing_or_failing():
    assert make_client(FakeSession(FakeResponse(payload=[]))).get_family_member("m", "u") is None
    assert make_client(FakeSession(FakeResponse(500, payload={}))).get_family_member("m", "u") is None


def test_non_json_bodies():
    with pytest.raises(AuthError):
        make_client(FakeSession(FakeResponse(200, text="<html>bad gateway</html>"))).get_user()
    assert make_client(FakeSession(FakeResponse(200, text=""))).get_family_member("m", "u") is None
    assert make_client(FakeSession(FakeResponse(payload=["oops"]))).get_family_member("m", "u") is None
