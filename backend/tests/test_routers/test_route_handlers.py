"""
Endpoints that touch the database, bcrypt or the disk must be plain functions
so FastAPI runs them in its threadpool instead of on the event loop.
"""

import inspect

import pytest
from fastapi.routing import APIRoute

from main import app

BLOCKING_PREFIXES = ("/api/complaints", "/api/users", "/api/profile")


def _routes_under(prefix):
    return [
        route
        for route in app.routes
        if isinstance(route, APIRoute) and route.path.startswith(prefix)
    ]


@pytest.mark.parametrize("prefix", BLOCKING_PREFIXES)
def test_handlers_are_sync(prefix):
    routes = _routes_under(prefix)
    assert routes
    coroutines = [
        route.path for route in routes if inspect.iscoroutinefunction(route.endpoint)
    ]
    assert coroutines == []
