"""Tests for the owner key set."""

import pytest
from symbolchain.CryptoTypes import PrivateKey, PublicKey

from quorum_safe.features.multisig.keyset import MAX_OWNERS, KeySet
from quorum_safe.features.multisig.signer import LocalSigner
from quorum_safe.shared.errors import (
    DuplicateKey,
    InvalidPublicKey,
    InvalidThreshold,
    KeySetError,
    TooManyKeys,
)


def _keys(count):
    return [LocalSigner(PrivateKey.random()).public_key for _ in range(count)]


@pytest.mark.unit
class TestKeySetThreshold:
    def test_threshold_one_is_valid(self):
        key_set = KeySet(_keys(3), threshold=1)
        assert key_set.threshold == 1

    def test_threshold_equal_to_key_count_is_valid(self):
        key_set = KeySet(_keys(3), threshold=3)
        assert key_set.threshold == 3

    def test_threshold_zero_fails(self):
        with pytest.raises(InvalidThreshold):
            KeySet(_keys(3), threshold=0)

    def test_negative_threshold_fails(self):
        with pytest.raises(InvalidThreshold):
            KeySet(_keys(3), threshold=-1)

    def test_threshold_above_key_count_fails(self):
        with pytest.raises(InvalidThreshold) as exc_info:
            KeySet(_keys(3), threshold=4)
        assert exc_info.value.key_count == 3

    def test_empty_key_list_fails(self):
        with pytest.raises(InvalidThreshold):
            KeySet([], threshold=1)

    def test_non_integer_threshold_fails(self):
        with pytest.raises(InvalidThreshold):
            KeySet(_keys(2), threshold=True)


@pytest.mark.unit
class TestKeySetDuplicates:
    @pytest.mark.parametrize("first,second", [(0, 1), (0, 3), (2, 3), (1, 2)])
    def test_duplicate_fails_regardless_of_position(self, first, second):
        keys = _keys(4)
        keys[second] = keys[first]
        with pytest.raises(DuplicateKey) as exc_info:
            KeySet(keys, threshold=2)
        assert exc_info.value.first_index == first
        assert exc_info.value.second_index == second

    def test_duplicate_detected_by_value_not_identity(self):
        keys = _keys(2)
        copy = PublicKey(keys[0].bytes)
        with pytest.raises(DuplicateKey):
            KeySet([keys[0], keys[1], copy], threshold=1)

    def test_construction_errors_are_key_set_errors(self):
        keys = _keys(2)
        with pytest.raises(KeySetError):
            KeySet([keys[0], keys[0]], threshold=1)


@pytest.mark.unit
class TestKeySetLookup:
    def test_index_of_follows_construction_order(self):
        keys = _keys(3)
        key_set = KeySet(keys, threshold=2)
        for index, key in enumerate(keys):
            assert key_set.index_of(key) == index

    def test_index_of_unknown_key_is_none(self):
        key_set = KeySet(_keys(3), threshold=2)
        assert key_set.index_of(_keys(1)[0]) is None

    def test_iteration_is_stable(self):
        keys = _keys(5)
        key_set = KeySet(keys, threshold=3)
        assert list(key_set) == keys
        assert list(key_set) == keys
        assert key_set.size() == 5
        assert len(key_set) == 5

    def test_contains(self):
        keys = _keys(2)
        key_set = KeySet(keys, threshold=1)
        assert keys[0] in key_set
        assert _keys(1)[0] not in key_set

    def test_equal_key_sets(self):
        keys = _keys(3)
        assert KeySet(keys, 2) == KeySet(list(keys), 2)
        assert KeySet(keys, 2) != KeySet(keys, 3)
        assert KeySet(keys, 2) != KeySet(list(reversed(keys)), 2)


@pytest.mark.unit
class TestKeySetParsing:
    def test_from_hex(self):
        keys = _keys(2)
        key_set = KeySet.from_hex([key.bytes.hex() for key in keys], threshold=2)
        assert list(key_set) == keys

    def test_from_hex_accepts_prefix_and_uppercase(self):
        key = _keys(1)[0]
        key_set = KeySet.from_hex(["0x" + key.bytes.hex().upper()], threshold=1)
        assert key_set[0] == key

    def test_from_hex_rejects_short_key(self):
        with pytest.raises(InvalidPublicKey):
            KeySet.from_hex(["abcd"], threshold=1)

    def test_rejects_non_public_key_values(self):
        with pytest.raises(InvalidPublicKey):
            KeySet([b"\x00" * 32], threshold=1)

    def test_too_many_owners(self):
        with pytest.raises(TooManyKeys):
            KeySet(_keys(MAX_OWNERS + 1), threshold=1)

    def test_to_dict(self):
        keys = _keys(2)
        data = KeySet(keys, threshold=1).to_dict()
        assert data == {
            "publicKeys": [key.bytes.hex() for key in keys],
            "threshold": 1,
        }
