"""Tests for HTTP/1.0 request formatting."""

import pytest

from split_get.request import HttpMethod, build_request


def test_get_without_range():
    request = build_request("example.com", "/a/b")
    assert request.data == b"GET /a/b HTTP/1.0\r\nHost: example.com\r\n\r\n"
    assert request.method is HttpMethod.GET


def test_get_with_range():
    request = build_request("example.com", "/file.bin", "0-499")
    assert request.data == (b"GET /file.bin HTTP/1.0\r\n"
                            b"Host: example.com\r\n"
                            b"Range: bytes=0-499\r\n\r\n")


def test_head_request():
    request = build_request("example.com", "/", method=HttpMethod.HEAD)
    assert request.data.startswith(b"HEAD / HTTP/1.0\r\n")


def test_user_agent_only_when_configured():
    assert b"User-Agent" not in build_request("h", "/").data
    request = build_request("h", "/", user_agent="split-get/1.0")
    assert b"User-Agent: split-get/1.0\r\n" in request.data


def test_query_string_passes_through():
    request = build_request("h", "/search?q=a&b=2")
    assert request.data.startswith(b"GET /search?q=a&b=2 HTTP/1.0\r\n")


def test_request_is_immutable():
    request = build_request("h", "/")
    with pytest.raises(AttributeError):
        request.data = b""


def test_empty_host_rejected():
    with pytest.raises(ValueError):
        build_request("", "/")


def test_relative_path_rejected():
    with pytest.raises(ValueError):
        build_request("example.com", "index.html")
