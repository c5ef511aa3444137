"""
Tests for subreddit identifier normalization.
"""

import pytest

from feedproxy.sources.common import normalize_identifier


TRICKY_INPUTS = [
    "SaaS",
    "  SaaS  ",
    "r/SaaS",
    "r/SaaS/",
    "https://www.reddit.com/r/SaaS/",
    "https://www.reddit.com/r/SaaS/?sort=new",
    "SaaS?utm_source=share",
    "r/r/SaaS",
    "SaaS//",
    "SaaS/?x=1",
    "SaaS ?x=1",
    "https://www.reddit.com/r/r/SaaS/",
    "",
    "   ",
    "/",
    "?",
    "r/",
    "https://www.reddit.com/r/",
    "python+learnpython",
]


class TestNormalizeIdentifier:
    """Canonical identifier derivation"""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("SaaS", "SaaS"),
            ("  startups \n", "startups"),
            ("r/SaaS", "SaaS"),
            ("SaaS/", "SaaS"),
            ("SaaS?sort=new", "SaaS"),
            ("https://www.reddit.com/r/SaaS", "SaaS"),
            ("https://www.reddit.com/r/SaaS/?utm_source=share&utm_medium=web", "SaaS"),
        ],
    )
    def test_strips_known_decorations(self, raw, expected):
        """Test each decoration on its own is removed"""
        assert normalize_identifier(raw) == expected

    def test_combined_decorations_all_removed(self):
        """Test full URL prefix, trailing slash and query string together"""
        result = normalize_identifier("  https://www.reddit.com/r/Entrepreneur/?sort=top&t=week ")
        assert result == "Entrepreneur"
        assert "https://" not in result
        assert not result.startswith("r/")
        assert not result.endswith("/")
        assert "?" not in result

    def test_case_is_preserved(self):
        """Test identifiers are not lowercased"""
        assert normalize_identifier("r/MachineLearning") == "MachineLearning"

    @pytest.mark.parametrize("raw", TRICKY_INPUTS)
    def test_idempotent(self, raw):
        """Test normalizing a canonical identifier is a no-op"""
        once = normalize_identifier(raw)
        assert normalize_identifier(once) == once

    @pytest.mark.parametrize("raw", ["", "   ", "r/", "https://www.reddit.com/r/", None])
    def test_degenerate_input_yields_empty(self, raw):
        """Test empty-ish input never raises and yields an empty identifier"""
        assert normalize_identifier(raw) == ""

    def test_other_hosts_are_left_alone(self):
        """Test only the www.reddit.com listing prefix is recognized"""
        assert normalize_identifier("https://old.reddit.com/r/SaaS") == "https://old.reddit.com/r/SaaS"
