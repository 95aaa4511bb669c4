# user_service/client.py

import os
import requests

# Base URL of the user service
SERVICE_URL = os.getenv("USER_SERVICE_URL", "http://localhost:8080")
TIMEOUT = 10


def _request(method, path, base_url=None, **kwargs):
    response = requests.request(
        method,
        f"{base_url or SERVICE_URL}{path}",
        timeout=TIMEOUT,
        **kwargs,
    )
    response.raise_for_status()
    if response.status_code == 204 or not response.content:
        return None
    return response.json()


# -------------------------------
# Health
# -------------------------------

def health(base_url=None):
    return _request("GET", "/health", base_url)


# -------------------------------
# Users
# -------------------------------

def list_users(base_url=None):
    """
    Returns every user, newest first.
    """
    return _request("GET", "/api/users", base_url)


def get_user(user_id, base_url=None):
    return _request("GET", f"/api/users/{user_id}", base_url)


def create_user(username, email, password, base_url=None):
    return _request(
        "POST",
        "/api/users",
        base_url,
        json={"username": username, "email": email, "password": password},
    )


def update_user(user_id, username=None, email=None, base_url=None):
    """
    Sends only the fields that were given; the server leaves the rest alone.
    """
    body = {k: v for k, v in {"username": username, "email": email}.items() if v}
    return _request("PUT", f"/api/users/{user_id}", base_url, json=body)


def delete_user(user_id, base_url=None):
    return _request("DELETE", f"/api/users/{user_id}", base_url)


# -------------------------------
# Authentication
# -------------------------------

def login_user(username, password, base_url=None):
    """
    Logs in and returns {"user": ..., "token": ...}.
    """
    return _request(
        "POST",
        "/api/auth/login",
        base_url,
        json={"username": username, "password": password},
    )


def admin_list_users(api_key, base_url=None):
    return _request("GET", "/api/admin/users", base_url, headers={"X-API-Key": api_key})
