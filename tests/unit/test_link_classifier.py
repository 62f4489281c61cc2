"""
Unit tests for LinkClassifier module.

Run with: pytest tests/unit/test_link_classifier.py -v
"""

import pytest
from pagescout.config import LinkRules
from pagescout.crawler.link_classifier import (
    LinkClassifier,
    LinkRecord,
    classify_link,
    normalize_href,
)


PAGE_URL = "https://example.com/guide/page"


class TestNormalizeHref:
    """Test suite for href normalization"""

    def test_root_relative_gets_origin(self):
        """Test root-relative hrefs get the page origin prepended"""
        assert normalize_href("/docs/intro", PAGE_URL) == "https://example.com/docs/intro"

    def test_root_relative_keeps_port(self):
        """Test root-relative hrefs keep the page's port"""
        assert normalize_href("/b", "http://localhost:8000/a") == "http://localhost:8000/b"

    def test_dot_relative_resolves_against_page(self):
        """Test ./ and ../ resolve against the current URL"""
        assert normalize_href("./setup.html", PAGE_URL) == "https://example.com/guide/setup.html"
        assert normalize_href("../api/", PAGE_URL) == "https://example.com/api/"

    def test_protocol_relative_uses_page_scheme(self):
        """Test //host hrefs take the page scheme"""
        assert normalize_href("//cdn.example.com/lib", PAGE_URL) == "https://cdn.example.com/lib"

    def test_absolute_unchanged(self):
        """Test absolute URLs pass through"""
        assert normalize_href("https://example.com/a#b", PAGE_URL) == "https://example.com/a#b"

    def test_malformed_rejected(self):
        """Test unparseable and scheme-less values are rejected"""
        assert normalize_href("http://[::1", PAGE_URL) is None
        assert normalize_href("page.html", PAGE_URL) is None
        assert normalize_href("#top", PAGE_URL) is None


class TestLinkClassifier:
    """Test suite for LinkClassifier class"""

    def test_root_relative_is_internal(self):
        """Test root-relative links are internal with origin prepended"""
        record = classify_link("/docs/intro", PAGE_URL, text="Intro")

        assert record is not None
        assert record.href == "https://example.com/docs/intro"
        assert record.is_internal is True
        assert record.original_href == "/docs/intro"
        assert record.text == "Intro"

    def test_text_falls_back_to_href(self):
        """Test empty anchor text falls back to the raw href"""
        record = classify_link("/docs/intro", PAGE_URL, text="   ")

        assert record.text == "/docs/intro"

    def test_subdomain_is_internal(self):
        """Test subdomains of the current host are internal"""
        record = classify_link("https://docs.example.com/start", "https://example.com/")

        assert record is not None
        assert record.is_internal is True

    def test_external_rejected(self):
        """Test links to other hosts are rejected"""
        assert classify_link("https://other.com/page", PAGE_URL) is None
        assert classify_link("https://notexample.com/page", PAGE_URL) is None

    def test_protocol_relative_external_rejected(self):
        """Test //other-host links are not treated as root-relative"""
        assert classify_link("//cdn.other.com/lib", PAGE_URL) is None

    def test_protocol_relative_same_host_accepted(self):
        """Test //same-host links are internal"""
        record = classify_link("//example.com/docs", PAGE_URL)

        assert record.href == "https://example.com/docs"

    def test_action_links_rejected(self):
        """Test fragment-only, javascript:, mailto: and tel: hrefs are rejected"""
        assert classify_link("#section", PAGE_URL) is None
        assert classify_link("javascript:void(0)", PAGE_URL) is None
        assert classify_link("mailto:team@example.com", PAGE_URL) is None
        assert classify_link("tel:+15550100", PAGE_URL) is None

    def test_empty_href_rejected(self):
        """Test empty hrefs are rejected"""
        assert classify_link("", PAGE_URL) is None

    def test_malformed_href_rejected(self):
        """Test malformed URLs are rejected silently"""
        assert classify_link("http://[::1", PAGE_URL) is None

    def test_file_download_detected(self):
        """Test document extensions are flagged, case-insensitively"""
        record = classify_link("/files/Report.PDF", PAGE_URL)

        assert record.is_file_download is True
        assert record.file_type == "PDF"

        record = classify_link("https://example.com/data/export.csv", PAGE_URL)
        assert record.file_type == "csv"

    def test_plain_page_not_file(self):
        """Test ordinary pages have no file type"""
        record = classify_link("https://example.com/about", PAGE_URL)

        assert record.is_file_download is False
        assert record.file_type is None

    def test_fragment_stripped_on_content_path(self):
        """Test fragments are stripped from accepted links"""
        record = classify_link("https://example.com/help/page#install", PAGE_URL)

        assert record.href == "https://example.com/help/page"
        assert record.original_href == "https://example.com/help/page#install"

    def test_fragment_link_without_content_marker_rejected(self):
        """Test in-page anchors to non-content paths are rejected"""
        assert classify_link("https://example.com/about#team", PAGE_URL) is None

    def test_custom_path_markers(self):
        """Test content path markers come from configuration"""
        href = "https://example.com/kb/article#faq"
        rules = LinkRules(content_path_markers=["/kb/"])

        assert classify_link(href, PAGE_URL) is None
        assert classify_link(href, PAGE_URL, rules=rules).href == "https://example.com/kb/article"

    def test_action_prefixes_not_configurable(self):
        """Test action links stay excluded even with permissive markers"""
        rules = LinkRules(content_path_markers=["mailto"])

        assert classify_link("mailto:team@example.com", PAGE_URL, rules=rules) is None

    def test_classifier_reuse(self):
        """Test one classifier handles many hrefs for the same page"""
        classifier = LinkClassifier(PAGE_URL)

        assert classifier.current_hostname == "example.com"
        assert classifier.is_file_download("/a/b.zip") is True
        assert isinstance(classifier.classify("/a"), LinkRecord)
        assert classifier.classify("https://other.com/") is None

    def test_to_dict(self):
        """Test LinkRecord serializes to a plain dict"""
        record = classify_link("/docs", PAGE_URL, text="Docs")

        assert record.to_dict() == {
            "href": "https://example.com/docs",
            "text": "Docs",
            "is_internal": True,
            "is_file_download": False,
            "file_type": None,
            "original_href": "/docs",
        }


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
