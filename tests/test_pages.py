"""Tests for decoding remote listing responses."""

from r2_tools.objectstorage.pages import (
    BareArrayFallback,
    StandardPage,
    Unrecognized,
    decode_entry,
    decode_page,
)


class TestDecodePage:
    """Test response shape detection."""

    def test_standard_page(self):
        """Test a well-formed page decodes to StandardPage."""
        page = decode_page(
            {
                "objects": [{"key": "a.txt", "size": 3, "etag": "x"}],
                "delimited_prefixes": ["docs/"],
                "truncated": True,
                "cursor": "abc",
            }
        )

        assert isinstance(page, StandardPage)
        assert [o.key for o in page.objects] == ["a.txt"]
        assert page.prefixes == ["docs/"]
        assert page.truncated is True
        assert page.cursor == "abc"

    def test_prefixes_only_page(self):
        """Test a page with only folders is still standard."""
        page = decode_page({"delimited_prefixes": ["a/", "", 7, "b/"], "truncated": False})

        assert isinstance(page, StandardPage)
        assert page.objects == []
        assert page.prefixes == ["a/", "b/"]

    def test_empty_cursor_is_none(self):
        """Test an empty cursor string counts as no cursor."""
        page = decode_page({"objects": [], "truncated": True, "cursor": ""})
        assert page.cursor is None

    def test_bare_array(self):
        """Test a list decodes to BareArrayFallback."""
        page = decode_page([{"key": "a.txt", "size": 1}])

        assert isinstance(page, BareArrayFallback)
        assert [o.key for o in page.objects] == ["a.txt"]

    def test_truncated_must_be_boolean(self):
        """Test a non-boolean truncation flag is not a standard page."""
        page = decode_page({"objects": [], "truncated": "false"})

        assert isinstance(page, Unrecognized)
        assert page.payload_type == "dict"

    def test_other_shapes(self):
        """Test scalars and None are unrecognized."""
        assert isinstance(decode_page(None), Unrecognized)
        assert isinstance(decode_page(42), Unrecognized)


class TestDecodeEntry:
    """Test decoding of individual remote objects."""

    def test_keeps_raw_mapping(self):
        """Test the original mapping is kept for passthrough."""
        raw = {"key": "a.txt", "size": 5, "content_type": "text/plain"}
        entry = decode_entry(raw)

        assert entry.raw == raw
        assert entry.to_dict() == raw

    def test_camel_case_timestamp(self):
        """Test lastModified is accepted as the timestamp field."""
        entry = decode_entry({"key": "a", "size": 1, "lastModified": "2024-01-01T00:00:00Z"})
        assert entry.last_modified == "2024-01-01T00:00:00Z"

    def test_invalid_size_is_zero(self):
        """Test negative or non-integer sizes are treated as zero."""
        assert decode_entry({"key": "a", "size": -4}).size == 0
        assert decode_entry({"key": "a", "size": "12"}).size == 0
        assert decode_entry({"key": "a"}).size == 0

    def test_missing_key_is_rejected(self):
        """Test objects without a usable key are dropped."""
        assert decode_entry({"size": 1}) is None
        assert decode_entry({"key": "", "size": 1}) is None
        assert decode_entry("a.txt") is None

    def test_malformed_entries_are_skipped_in_pages(self):
        """Test malformed objects do not abort decoding of a page."""
        page = decode_page(
            {"objects": [{"key": "ok.txt", "size": 1}, {"size": 2}, None], "truncated": False}
        )
        assert [o.key for o in page.objects] == ["ok.txt"]
