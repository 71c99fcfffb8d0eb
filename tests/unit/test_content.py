"""
Content Contract Unit Tests
Tests for merkletree/schemas/content.py and merkletree/schemas/canonical.py

Tests:
- Guarded digest and equality calls
- BytesContent and CanonicalContent behaviour
- FileMeta validation and canonical form
- Canonical JSON determinism
"""
import hashlib
import math
from datetime import datetime, timedelta, timezone
from enum import Enum

import pytest
from pydantic import ValidationError

from merkletree.merkle import MerkleTree
from merkletree.schemas import (
    BytesContent,
    CanonicalContent,
    CanonicalizationException,
    Content,
    ContentEqualityError,
    ContentHashError,
    FileMeta,
    canonical_equals,
    content_digest,
    content_equals,
    dumps_canonical,
    format_datetime_canonical,
)

from fixtures import FailingEqualsContent, FailingHashContent, ItemContent

INFO_HASH = "a" * 40


class Color(str, Enum):
    RED = "red"


class Record(CanonicalContent):
    name: str
    tags: list[str] = []


class TestContentDigest:
    """Tests for content_digest()."""

    def test_returns_content_digest(self):
        item = ItemContent("a")
        assert content_digest(item) == hashlib.sha256(b"a").digest()

    def test_wraps_failure(self):
        with pytest.raises(ContentHashError) as exc_info:
            content_digest(FailingHashContent("a"))

        assert exc_info.value.details["content_type"] == "FailingHashContent"
        assert "cannot hash a" in exc_info.value.message

    def test_rejects_non_bytes(self):
        class TextDigest(ItemContent):
            def calculate_hash(self):
                return "not bytes"

        with pytest.raises(ContentHashError, match="must return bytes"):
            content_digest(TextDigest("a"))

    def test_bytearray_accepted(self):
        class ArrayDigest(ItemContent):
            def calculate_hash(self):
                return bytearray(b"\x01\x02")

        assert content_digest(ArrayDigest("a")) == b"\x01\x02"


class TestContentEquals:
    """Tests for content_equals()."""

    def test_equal_and_unequal(self):
        assert content_equals(ItemContent("a"), ItemContent("a"))
        assert not content_equals(ItemContent("a"), ItemContent("b"))

    def test_wraps_failure_with_index(self):
        with pytest.raises(ContentEqualityError) as exc_info:
            content_equals(FailingEqualsContent("a"), ItemContent("a"), leaf_index=4)

        assert exc_info.value.details["leaf_index"] == 4
        assert exc_info.value.details["content_type"] == "FailingEqualsContent"


class TestBytesContent:
    """Tests for BytesContent."""

    def test_digest(self):
        assert BytesContent(b"piece").calculate_hash() == hashlib.sha256(b"piece").digest()

    def test_custom_strategy(self):
        content = BytesContent(b"piece", hash_strategy=hashlib.sha512)
        assert content.calculate_hash() == hashlib.sha512(b"piece").digest()

    def test_equals(self):
        assert BytesContent(b"x").equals(BytesContent(b"x"))
        assert not BytesContent(b"x").equals(BytesContent(b"y"))
        assert not BytesContent(b"x").equals(b"x")

    def test_satisfies_protocol(self):
        assert isinstance(BytesContent(b"x"), Content)

    def test_tree_of_pieces(self):
        pieces = [BytesContent(bytes([i]) * 16) for i in range(5)]
        tree = MerkleTree.build(pieces)

        assert tree.verify_content(BytesContent(bytes([3]) * 16))
        assert tree.verify_tree()


class TestCanonicalContent:
    """Tests for CanonicalContent and FileMeta."""

    def test_digest_is_hash_of_canonical_json(self):
        record = Record(name="a", tags=["x"])
        expected = hashlib.sha256(b'{"name":"a","tags":["x"]}').digest()

        assert record.calculate_hash() == expected

    def test_equals_by_type_and_form(self):
        assert Record(name="a").equals(Record(name="a"))
        assert not Record(name="a").equals(Record(name="b"))

    def test_equals_rejects_other_type(self):
        meta = FileMeta(info_hash=INFO_HASH, raw_size=1)
        assert not Record(name="a").equals(meta)

    def test_file_meta_canonical_form_uses_aliases(self):
        meta = FileMeta(info_hash=INFO_HASH, raw_size=2048)
        assert dumps_canonical(meta) == f'{{"infoHash":"{INFO_HASH}","rawSize":2048}}'

    def test_file_meta_normalizes_info_hash(self):
        meta = FileMeta(info_hash="0x" + "AB" * 20, raw_size=0)
        assert meta.info_hash == "ab" * 20

    @pytest.mark.parametrize("bad", ["abc", "g" * 40, "a" * 41])
    def test_file_meta_rejects_bad_info_hash(self, bad):
        with pytest.raises(ValidationError):
            FileMeta(info_hash=bad, raw_size=1)

    def test_file_meta_rejects_negative_size(self):
        with pytest.raises(ValidationError):
            FileMeta(info_hash=INFO_HASH, raw_size=-1)

    def test_file_meta_tree(self):
        files = [FileMeta(info_hash=f"{i:040x}", raw_size=i * 100) for i in range(3)]
        tree = MerkleTree.build(files)

        proof = tree.get_proof(FileMeta(info_hash=f"{1:040x}", raw_size=100))

        assert proof is not None
        assert proof.leaf == files[1].calculate_hash()


class TestCanonicalJson:
    """Tests for canonical serialization."""

    def test_sorted_keys_no_whitespace(self):
        assert dumps_canonical({"b": 2, "a": 1}) == '{"a":1,"b":2}'

    def test_key_order_independent(self):
        assert canonical_equals({"a": 1, "b": [1, 2]}, {"b": [1, 2], "a": 1})

    def test_none_fields_dropped(self):
        assert dumps_canonical({"a": None, "b": 1}) == '{"b":1}'

    def test_enum_and_bytes(self):
        assert dumps_canonical({"c": Color.RED, "d": b"\xff"}) == '{"c":"red","d":"ff"}'

    def test_datetime_utc(self):
        dt = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(hours=2)))
        assert format_datetime_canonical(dt) == "2024-01-02T01:04:05Z"

    def test_naive_datetime_treated_as_utc(self):
        assert format_datetime_canonical(datetime(2024, 1, 1, 0, 0, 0, 500)) == "2024-01-01T00:00:00.000500Z"

    def test_nan_rejected(self):
        with pytest.raises(CanonicalizationException, match="Non-finite"):
            dumps_canonical({"x": math.nan})

    def test_unknown_type_rejected(self):
        with pytest.raises(CanonicalizationException) as exc_info:
            dumps_canonical({"x": object()})

        assert exc_info.value.details["path"] == "x"

    def test_canonical_equals_false_on_failure(self):
        assert canonical_equals({"x": math.inf}, {"x": math.inf}) is False
