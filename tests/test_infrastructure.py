import asyncio

import pytest
import redis
from fastapi import HTTPException
from starlette.requests import Request

from randevu import rate_limiter
from randevu.auth import verify_firebase_token


class FakePipeline:
    def __init__(self, store):
        self.store = store
        self.ops = []

    def incr(self, key):
        self.ops.append(("incr", key))

    def ttl(self, key):
        self.ops.append(("ttl", key))

    def execute(self):
        results = []
        for op, key in self.ops:
            if op == "incr":
                self.store.counts[key] = self.store.counts.get(key, 0) + 1
                results.append(self.store.counts[key])
            else:
                results.append(self.store.expiry.get(key, -1))
        return results


class FakeRedis:
    """In-memory stand-in for the INCR/TTL/EXPIRE calls the limiter makes"""

    def __init__(self):
        self.counts = {}
        self.expiry = {}

    def pipeline(self):
        return FakePipeline(self)

    def expire(self, key, seconds):
        self.expiry[key] = seconds


def make_request(ip="10.0.0.1", headers=()):
    return Request({"type": "http", "headers": list(headers), "client": (ip, 5000)})


class TestCheckRateLimit:
    def test_window_starts_on_first_hit(self):
        client = FakeRedis()

        assert rate_limiter.check_rate_limit("k", 2, 60, client) == (True, 1, 60)
        assert client.expiry == {"k": 60}
        assert rate_limiter.check_rate_limit("k", 2, 60, client) == (True, 2, 60)
        assert rate_limiter.check_rate_limit("k", 2, 60, client) == (False, 3, 60)


class TestRateLimitDependency:
    @pytest.fixture(autouse=True)
    def enabled(self, monkeypatch):
        monkeypatch.setattr(rate_limiter, "RATE_LIMIT_ENABLED", True)

    def test_blocks_after_limit(self, monkeypatch):
        client = FakeRedis()
        monkeypatch.setattr(rate_limiter, "get_redis_client", lambda: client)
        request = make_request()

        asyncio.run(rate_limiter.rate_limit_dependency(request, 1, 60, "test"))
        with pytest.raises(HTTPException) as exc:
            asyncio.run(rate_limiter.rate_limit_dependency(request, 1, 60, "test"))

        assert exc.value.status_code == 429
        assert exc.value.headers == {"Retry-After": "60"}
        assert client.counts == {"test:10.0.0.1": 2}

    def test_forwarded_for_header_identifies_client(self, monkeypatch):
        client = FakeRedis()
        monkeypatch.setattr(rate_limiter, "get_redis_client", lambda: client)
        request = make_request(headers=[(b"x-forwarded-for", b"203.0.113.7, 10.0.0.1")])

        asyncio.run(rate_limiter.rate_limit_dependency(request, 5, 60, "test"))

        assert list(client.counts) == ["test:203.0.113.7"]

    def test_redis_outage_fails_open(self, monkeypatch):
        def unavailable():
            raise redis.ConnectionError("connection refused")

        monkeypatch.setattr(rate_limiter, "get_redis_client", unavailable)

        assert asyncio.run(rate_limiter.rate_limit_dependency(make_request(), 1, 60, "t")) is None


class TestAuth:
    @pytest.mark.parametrize("token", ["not-a-jwt", "a.b", "%%%.%%%.%%%"])
    def test_malformed_tokens_are_rejected(self, token):
        with pytest.raises(HTTPException) as exc:
            asyncio.run(verify_firebase_token(token))
        assert exc.value.status_code == 401

    def test_protected_endpoint_without_credentials(self, client):
        assert client.get("/businesses").status_code in (401, 403)


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_validation_errors_are_reported(client):
    response = client.post("/appointments", json={"businessId": "x"})
    assert response.status_code == 422
    fields = {tuple(error["loc"]) for error in response.json()["detail"]}
    assert ("body", "serviceId") in fields
