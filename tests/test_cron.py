"""Tests for cron secret checks."""

from starlette.requests import Request

from inbox_zero.cron import cron_secret_header, has_cron_secret, has_post_cron_secret


def _request(query: bytes = b"", headers: list[tuple[bytes, bytes]] | None = None) -> Request:
    return Request({"type": "http", "method": "GET", "path": "/", "query_string": query, "headers": headers or []})


class TestHasCronSecret:
    def test_matching_query_param(self):
        assert has_cron_secret(_request(b"cron_secret=s3cret"), "s3cret")

    def test_wrong_or_missing(self):
        assert not has_cron_secret(_request(b"cron_secret=nope"), "s3cret")
        assert not has_cron_secret(_request(), "s3cret")

    def test_header_does_not_count_for_get(self):
        assert not has_cron_secret(_request(headers=[(b"x-cron-secret", b"s3cret")]), "s3cret")

    def test_unset_secret_never_matches(self):
        assert not has_cron_secret(_request(b"cron_secret="), "")


class TestHasPostCronSecret:
    def test_matching_header(self):
        assert has_post_cron_secret(_request(headers=[(b"x-cron-secret", b"s3cret")]), "s3cret")

    def test_query_does_not_count_for_post(self):
        assert not has_post_cron_secret(_request(b"cron_secret=s3cret"), "s3cret")

    def test_unset_secret_never_matches(self):
        assert not has_post_cron_secret(_request(headers=[(b"x-cron-secret", b"")]), "")


class TestCronSecretHeader:
    def test_header(self):
        assert cron_secret_header("s3cret") == {"x-cron-secret": "s3cret"}

    def test_no_secret(self):
        assert cron_secret_header("") is None
