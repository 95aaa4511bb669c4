# tests/test_client.py

from unittest import mock

import pytest
import requests

from user_service import client


def fake_response(status_code=200, payload=None):
    res = mock.Mock()
    res.status_code = status_code
    res.content = b"" if payload is None else b"x"
    res.json.return_value = payload
    if status_code >= 400:
        res.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return res


@mock.patch("user_service.client.requests.request")
def test_create_user_posts_json(request):
    request.return_value = fake_response(201, {"id": 1, "username": "john"})

    result = client.create_user("john", "john@example.com", "secret", base_url="http://svc")

    assert result == {"id": 1, "username": "john"}
    request.assert_called_once_with(
        "POST",
        "http://svc/api/users",
        timeout=client.TIMEOUT,
        json={"username": "john", "email": "john@example.com", "password": "secret"},
    )


@mock.patch("user_service.client.requests.request")
def test_update_sends_only_given_fields(request):
    request.return_value = fake_response(200, {"id": 3})

    client.update_user(3, email="new@x.com", base_url="http://svc")

    _, kwargs = request.call_args
    assert kwargs["json"] == {"email": "new@x.com"}


@mock.patch("user_service.client.requests.request")
def test_delete_returns_none(request):
    request.return_value = fake_response(204)

    assert client.delete_user(3, base_url="http://svc") is None


@mock.patch("user_service.client.requests.request")
def test_admin_list_sends_api_key(request):
    request.return_value = fake_response(200, [])

    client.admin_list_users("k", base_url="http://svc")

    _, kwargs = request.call_args
    assert kwargs["headers"] == {"X-API-Key": "k"}


@mock.patch("user_service.client.requests.request")
def test_errors_raise(request):
    request.return_value = fake_response(401, {"error": "Invalid credentials"})

    with pytest.raises(requests.HTTPError):
        client.login_user("john", "wrong", base_url="http://svc")
