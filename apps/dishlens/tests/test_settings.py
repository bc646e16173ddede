"""Tests for API base URL handling."""

import pytest

from apps.dishlens.config.settings import DEFAULT_API_BASE_URL, normalize_base_url


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("https://api.dishlens.com/", "https://api.dishlens.com"),
        ("api.dishlens.com", "https://api.dishlens.com"),
        ("localhost:3000", "http://localhost:3000"),
        ("127.0.0.1:3000/", "http://127.0.0.1:3000"),
        ("  http://staging.dishlens.com  ", "http://staging.dishlens.com"),
        (None, DEFAULT_API_BASE_URL),
        ("", DEFAULT_API_BASE_URL),
    ],
)
def test_normalize_base_url(raw, expected):
    assert normalize_base_url(raw) == expected


@pytest.mark.parametrize("raw", ["https://:8080", "https://host:notaport"])
def test_invalid_url_falls_back(raw, caplog):
    assert normalize_base_url(raw) == DEFAULT_API_BASE_URL
    assert "Invalid API base URL" in caplog.text
