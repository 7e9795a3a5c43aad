"""Tests for the URL codec."""

import pytest

from booksearch.core.urls import UrlState, decode_param, encode_param, parse_url, render_url


def test_parse_url_splits_all_parts():
    state = parse_url("https://Example.com:8080/docs/index.html?search=foo&&highlight=bar#intro")

    assert state.protocol == "https"
    assert state.host == "example.com"
    assert state.port == "8080"
    assert state.path == "/docs/index.html"
    assert state.params == {"search": "foo", "highlight": "bar"}
    assert state.hash == "intro"


def test_parse_url_without_port_query_or_fragment():
    state = parse_url("http://localhost/book/")

    assert state == UrlState(protocol="http", host="localhost", port="", path="/book/", params={}, hash="")


def test_parse_url_splits_params_on_first_equals():
    state = parse_url("http://h/p?a=b=c&flag&x=1&x=2")

    assert state.params == {"a": "b=c", "flag": "", "x": "2"}


def test_parse_url_keeps_params_encoded():
    state = parse_url("http://h/p?search=borrow+checker&path=a%2Fb")

    assert state.params["search"] == "borrow+checker"
    assert state.params["path"] == "a%2Fb"


def test_parse_url_drops_invalid_port():
    assert parse_url("http://host:99999/x").port == ""
    assert parse_url("http://host:abc/x").port == ""


def test_parse_url_drops_keyless_segment():
    assert parse_url("http://h/p?=orphan&a=1").params == {"a": "1"}


def test_parse_url_never_raises_on_garbage():
    state = parse_url("http://[broken/x")

    assert isinstance(state, UrlState)


def test_render_url():
    state = UrlState(
        protocol="https",
        host="book.example",
        port="8443",
        path="/ch1.html",
        params={"search": "foo", "highlight": "a+b"},
        hash="sec",
    )

    assert render_url(state) == "https://book.example:8443/ch1.html?search=foo&highlight=a+b#sec"


def test_render_url_omits_empty_parts():
    state = UrlState(protocol="http", host="h", path="/")

    assert render_url(state) == "http://h/"


def test_render_preserves_untouched_encoding():
    url = "https://x.org/p?q=a%2Fb&search=x%20y"

    assert render_url(parse_url(url)) == url


@pytest.mark.parametrize("url", [
    "https://Example.com:8080/docs/index.html?search=foo&&highlight=bar#intro",
    "http://h?x=1",
    "http://h/p?a=b=c&flag",
    "http://[::1]:8000/a?b=c#d",
    "//host/x?y=1",
    "/relative/path?x=1",
    "relative.html#frag",
    "",
    "mailto:someone@example.com",
    "////x",
    "//:80/x",
    "file:///home/user/book/index.html?search=a+b",
    "http://host:99999/x",
])
def test_parse_render_parse_is_stable(url):
    state = parse_url(url)

    assert parse_url(render_url(state)) == state


def test_decode_param_plus_and_percent():
    assert decode_param("borrow+checker%21") == "borrow checker!"


def test_decode_param_falls_back_to_raw_value():
    assert decode_param("%E0%A4%A") == "%E0%A4%A"


def test_encode_param_round_trips_through_decode():
    assert decode_param(encode_param("a b&c=d")) == "a b&c=d"
