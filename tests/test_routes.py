import inspect

from fastapi.routing import APIRoute

from app.core.auth import get_current_user, get_optional_user
from app.main import app

# Awaits the multipart body; its blocking work is pushed to the threadpool
ASYNC_ENDPOINTS = {"/api/users/update-profile-picture"}


def api_routes():
    return [r for r in app.routes if isinstance(r, APIRoute)]


def test_blocking_handlers_run_in_threadpool():
    for route in api_routes():
        if route.path in ASYNC_ENDPOINTS:
            continue
        assert not inspect.iscoroutinefunction(route.endpoint), route.path


def test_auth_dependencies_are_sync():
    assert not inspect.iscoroutinefunction(get_current_user)
    assert not inspect.iscoroutinefunction(get_optional_user)


def test_upload_handler_is_async():
    [route] = [r for r in api_routes() if r.path == "/api/users/update-profile-picture"]
    assert inspect.iscoroutinefunction(route.endpoint)


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["mongodb"] == "connected"
