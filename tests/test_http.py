import unittest

import requests

from aether.config import Settings
from aether.data_sources import http
from aether.errors import TransportError


class DummyResp:
    def __init__(self, payload=None, status_code=200, bad_json=False):
        self._payload = payload
        self.status_code = status_code
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("not json")
        return self._payload


def _session(resp=None, exc=None):
    def get(*_args, **_kwargs):
        if exc is not None:
            raise exc
        return resp

    return type("S", (), {"get": staticmethod(get)})()


class TestGetJson(unittest.TestCase):
    def test_returns_decoded_body(self):
        data = http.get_json(_session(DummyResp({"ok": 1})), "https://x.test", timeout=1, provider="p")
        self.assertEqual(data, {"ok": 1})

    def test_connection_error_is_transport_error(self):
        with self.assertRaises(TransportError):
            http.get_json(_session(exc=requests.exceptions.ConnectionError("down")), "https://x.test", timeout=1, provider="p")

    def test_timeout_is_transport_error(self):
        with self.assertRaises(TransportError) as ctx:
            http.get_json(_session(exc=requests.exceptions.ReadTimeout("slow")), "https://x.test", timeout=1, provider="p")
        self.assertIn("timed out", str(ctx.exception))

    def test_server_error_is_transport_error(self):
        with self.assertRaises(TransportError) as ctx:
            http.get_json(_session(DummyResp({}, status_code=503)), "https://x.test", timeout=1, provider="p")
        self.assertEqual(ctx.exception.status_code, 503)

    def test_non_json_body_is_transport_error(self):
        with self.assertRaises(TransportError):
            http.get_json(_session(DummyResp(bad_json=True)), "https://x.test", timeout=1, provider="p")

    def test_client_error_body_is_returned_for_provider_to_read(self):
        body = {"error": True, "reason": "bad"}
        data = http.get_json(_session(DummyResp(body, status_code=400)), "https://x.test", timeout=1, provider="p")
        self.assertEqual(data, body)

    def test_error_url_has_secrets_masked(self):
        with self.assertRaises(TransportError) as ctx:
            http.get_json(
                _session(exc=requests.exceptions.ConnectionError("down")),
                "http://ws.test/current?access_key=s3cret&query=Oslo",
                timeout=1,
                provider="p",
            )
        self.assertNotIn("s3cret", ctx.exception.url)


class TestBuildHttpSession(unittest.TestCase):
    def test_builds_plain_session_when_cache_disabled(self):
        session = http.build_http_session(Settings(http_cache_enabled=False, http_retries=0))
        self.assertIsInstance(session, requests.Session)


if __name__ == "__main__":
    unittest.main()
