"""Unit tests for ResolutionRequest construction."""

from clientaddr.core.models import ResolutionRequest


class TestFromHeaders:
    def test_normalizes_names(self):
        request = ResolutionRequest.from_headers(
            "10.0.0.5", {"X-Forwarded-For": "198.51.100.2", "client-ip": "203.0.113.7"}
        )
        assert request.remote_address == "10.0.0.5"
        assert request.header("HTTP_X_FORWARDED_FOR") == "198.51.100.2"
        assert request.header("HTTP_CLIENT_IP") == "203.0.113.7"

    def test_joins_repeated_headers(self):
        request = ResolutionRequest.from_headers(
            "10.0.0.5",
            [
                ("x-forwarded-for", "198.51.100.2"),
                ("x-forwarded-for", "192.168.5.5"),
            ],
        )
        assert request.header("HTTP_X_FORWARDED_FOR") == "198.51.100.2, 192.168.5.5"

    def test_missing_header(self):
        request = ResolutionRequest.from_headers(None, {})
        assert request.remote_address is None
        assert request.header("HTTP_X_FORWARDED_FOR") is None


class TestFromEnviron:
    def test_reads_remote_and_http_keys(self):
        environ = {
            "REMOTE_ADDR": "10.0.0.5",
            "HTTP_X_FORWARDED_FOR": "198.51.100.2",
            "SERVER_NAME": "localhost",
            "wsgi.input": object(),
        }
        request = ResolutionRequest.from_environ(environ)
        assert request.remote_address == "10.0.0.5"
        assert dict(request.headers) == {"HTTP_X_FORWARDED_FOR": "198.51.100.2"}

    def test_absent_remote_addr(self):
        assert ResolutionRequest.from_environ({}).remote_address is None
        assert ResolutionRequest.from_environ({"REMOTE_ADDR": ""}).remote_address is None
