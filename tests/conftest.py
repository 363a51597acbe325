import json
import logging
import os
from urllib.parse import urlencode

# Minimal values for tests
os.environ.setdefault("SESSION_SECRET", "test-secret")

from httpx import ASGITransport
from httpx import AsyncClient
import pytest
from starlette.requests import Request

from csrfguard.app import app
from csrfguard.guard import CsrfGuard
from csrfguard.logging_config import get_logger


# ---- Plain dict standing in for the caller-owned session ----
@pytest.fixture
def session():
    return {}


@pytest.fixture
def guard(session):
    return CsrfGuard(session)


# ---- Build Starlette requests without a server ----
@pytest.fixture
def make_request():
    def _make(method="GET", data=None, json_body=None, path="/"):
        headers = []
        body = b""
        if data is not None:
            body = urlencode(data).encode()
            headers.append((b"content-type", b"application/x-www-form-urlencoded"))
        elif json_body is not None:
            body = json.dumps(json_body).encode()
            headers.append((b"content-type", b"application/json"))

        scope = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": b"",
            "headers": headers,
        }
        sent = False

        async def receive():
            nonlocal sent
            if sent:
                return {"type": "http.disconnect"}
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return _make


# ---- HTTP client bound to the ASGI app ----
@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


# ---- BeautifulSoup helper ----
@pytest.fixture
def soup():
    from bs4 import BeautifulSoup

    return lambda html: BeautifulSoup(html, "html.parser")


@pytest.fixture
def form_token(soup):
    """Read the hidden token field out of a rendered form page."""

    def _extract(html, form_key="_token"):
        field = soup(html).select_one(f'input[type="hidden"][name="{form_key}"]')
        assert field is not None
        return field["value"]

    return _extract


# ---- The package logger does not propagate, so hook caplog onto it directly ----
@pytest.fixture
def csrf_logs(caplog):
    logger = get_logger()
    logger.addHandler(caplog.handler)
    with caplog.at_level(logging.DEBUG, logger=logger.name):
        yield caplog
    logger.removeHandler(caplog.handler)
