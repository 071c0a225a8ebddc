"""Tests for share link parsing."""
import pytest

from swishpy.core.links import is_share_link, extract_link_id
from swishpy.core.exceptions import InvalidLinkError


class TestIsShareLink:
    """Test suite for is_share_link()."""

    @pytest.mark.parametrize("url", [
        "https://www.swisstransfer.com/d/8b3b3b3b-3b3b-3b3b-3b3b-3b3b3b3b3b3b",
        "https://www.swisstransfer.com/d/3215702a-bed4-4cec-9eb6-d731048a2312",
    ])
    def test_matches(self, url):
        assert is_share_link(url)

    @pytest.mark.parametrize("url", [
        "http://www.swisstransfer.com/d/8b3b3b3b-3b3b-3b3b-3b3b-3b3b3b3b3b3b/",
        "https://www.swisstransfer.ch/d/8b3b3b3b-3b3b-3b3b-3b3b-3b3b3b3b3b3b/",
        "www.swisstransfer.com/d/8b3b3b3b-3b3b-3b3b-3b3b-3b3b3b3b3b3b",
        "https://www.swisstransfer.com/8b3b3b3b-3b3b-3b3b-3b3b-3b3b3b3b3b3b",
        "https://www.swisstransfer.com/d/8b3b3b3b-3b3b-3b3b-3b3b-3b3b3b3b3b3b/",
        "https://www.swisstransfer.com/d/8b3b3b3b-3b3b-3b3b-3b3b",
        "https://wwwXswisstransferXcom/d/8b3b3b3b-3b3b-3b3b-3b3b-3b3b3b3b3b3b",
    ])
    def test_rejects(self, url):
        assert not is_share_link(url)

    def test_other_domain(self):
        """Test the domain can be overridden."""
        url = "https://transfer.example.org/d/8b3b3b3b-3b3b-3b3b-3b3b-3b3b3b3b3b3b"

        assert is_share_link(url, domain="transfer.example.org")
        assert not is_share_link(url)


class TestExtractLinkId:
    """Test suite for extract_link_id()."""

    def test_final_segment(self):
        url = "https://www.swisstransfer.com/d/3215702a-bed4-4cec-9eb6-d731048a2312"

        assert extract_link_id(url) == "3215702a-bed4-4cec-9eb6-d731048a2312"

    def test_trailing_slash(self):
        assert extract_link_id("https://www.swisstransfer.com/d/abc/") == "abc"

    def test_no_path(self):
        with pytest.raises(InvalidLinkError):
            extract_link_id("https://www.swisstransfer.com/")
