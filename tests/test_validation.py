import pytest

from aitools.framework.errors import ConfigurationError, ValidationError
from aitools.framework.validation import (
    clamp_image_count,
    normalize_url,
    parse_viewport,
    parse_wait_ms,
    require_env_var,
    resolve_image_prompt,
)


def test_require_env_var(monkeypatch):
    monkeypatch.setenv("SOME_KEY", "  secret ")
    assert require_env_var("SOME_KEY") == "secret"

    monkeypatch.setenv("SOME_KEY", "   ")
    with pytest.raises(ConfigurationError, match="SOME_KEY is not set"):
        require_env_var("SOME_KEY")

    monkeypatch.delenv("SOME_KEY")
    with pytest.raises(ConfigurationError):
        require_env_var("SOME_KEY")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("https://example.com", "https://example.com/"),
        ("HTTP://example.com/a?b=1", "http://example.com/a?b=1"),
        ("  https://example.com/path#frag ", "https://example.com/path#frag"),
        ("http://localhost:8080", "http://localhost:8080/"),
        ("http://[::1]:3000/app", "http://[::1]:3000/app"),
    ],
)
def test_normalize_url_accepts_http_and_https(value, expected):
    assert normalize_url(value) == expected


@pytest.mark.parametrize(
    "value",
    [
        "ftp://example.com",
        "file:///etc/passwd",
        "example.com",
        "",
        "https://",
        "http://exa mple.com",
        "http://example.com:99999",
        "http://example.com:abc/",
        "http://exa<mple.com/",
        "http://example|com/",
        "http://[not-an-address]/",
    ],
)
def test_normalize_url_rejects(value):
    with pytest.raises(ValidationError):
        normalize_url(value)


def test_parse_viewport():
    assert parse_viewport("1280x720") == (1280, 720)
    assert parse_viewport(" 390x844 ") == (390, 844)


@pytest.mark.parametrize("value", ["1280*720", "1280x", "1x1", "123456x100", "wide", ""])
def test_parse_viewport_rejects(value):
    with pytest.raises(ValidationError, match="WIDTHxHEIGHT"):
        parse_viewport(value)


@pytest.mark.parametrize(("value", "expected"), [("3", 3), (0, 1), ("50", 10), ("abc", 1), (None, 1), ("2.5", 2), (" 4 images", 4)])
def test_clamp_image_count(value, expected):
    assert clamp_image_count(value) == expected


@pytest.mark.parametrize(("value", "expected"), [("1500", 1500), (-10, 0), ("soon", 0), (0, 0), ("1500ms", 1500), ("-5ms", 0)])
def test_parse_wait_ms(value, expected):
    assert parse_wait_ms(value) == expected


def test_resolve_image_prompt_keeps_subject():
    assert resolve_image_prompt(None, default_prompt="cats", label="cat") == "cats"
    assert resolve_image_prompt("  ", default_prompt="cats", label="cat") == "cats"
    assert resolve_image_prompt("A CAT in space", default_prompt="cats", label="cat") == "A CAT in space"
    assert resolve_image_prompt("watercolor", default_prompt="cats", label="cat") == "cats, watercolor"
