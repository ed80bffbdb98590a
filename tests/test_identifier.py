"""Tests for the node key derivation used by the execution document."""
from workflow_canvas.converter.identifier import build_key_map, derive_key
from workflow_canvas.models.results import GraphErrorKind


class TestDeriveKey:
    """Test suite for derive_key."""

    def test_strips_separators_and_appends_suffix(self):
        assert derive_key("email-create-trigger") == "emailcreatetriggerNode"

    def test_underscores_and_whitespace_are_separators(self):
        assert derive_key("send_mail step") == "sendmailstepNode"

    def test_only_first_letter_is_lowercased(self):
        assert derive_key("Parse-PDF") == "parsePDFNode"

    def test_is_deterministic(self):
        assert derive_key("trigger-1700000000000") == derive_key("trigger-1700000000000")

    def test_existing_id_with_node_suffix_gets_another(self):
        assert derive_key("categorize-email-node") == "categorizeemailnodeNode"


class TestBuildKeyMap:
    """Test suite for collision detection."""

    def test_distinct_ids_map_in_order(self):
        result = build_key_map(["a-b", "c"])

        assert result.ok
        assert list(result.value.items()) == [("a-b", "abNode"), ("c", "cNode")]

    def test_collision_fails_with_duplicate_key(self):
        result = build_key_map(["a-b", "a_b"])

        assert not result.ok
        assert result.kind == GraphErrorKind.DUPLICATE_KEY
        assert result.error.node_id == "a_b"
        assert "abNode" in result.error.message

    def test_empty_input(self):
        result = build_key_map([])

        assert result.ok
        assert result.value == {}
