import pytest
from symbolchain.CryptoTypes import PublicKey, Signature

from quorum_safe.shared.validation import (
    AddressValidator,
    NonceValidator,
    PublicKeyValidator,
    SignatureValidator,
    ValidationResult,
)

KEY_HEX = "AB" * 32
SIGNATURE_HEX = "cd" * 64


class TestValidationResult:
    def test_defaults(self):
        result = ValidationResult(is_valid=False, error_message="bad")
        assert result.error_message == "bad"
        assert result.normalized_value is None


class TestPublicKeyValidator:
    def test_hex(self):
        result = PublicKeyValidator.validate(KEY_HEX)
        assert result.is_valid is True
        assert result.normalized_value == PublicKey(KEY_HEX)

    def test_hex_with_prefix_and_whitespace(self):
        result = PublicKeyValidator.validate(f"  0x{KEY_HEX.lower()} ")
        assert result.normalized_value == PublicKey(KEY_HEX)

    def test_bytes(self):
        result = PublicKeyValidator.validate(bytes(32))
        assert result.normalized_value == PublicKey(bytes(32))

    def test_instance_passes_through(self):
        key = PublicKey(KEY_HEX)
        assert PublicKeyValidator.validate(key).normalized_value is key

    def test_empty(self):
        result = PublicKeyValidator.validate("")
        assert result.is_valid is False
        assert "required" in result.error_message

    def test_not_hex(self):
        result = PublicKeyValidator.validate("zz" * 32)
        assert "hexadecimal" in result.error_message

    def test_wrong_length(self):
        result = PublicKeyValidator.validate("ab" * 31)
        assert result.is_valid is False
        assert "32 bytes" in result.error_message

    def test_wrong_byte_length(self):
        assert PublicKeyValidator.validate(bytes(33)).is_valid is False

    def test_wrong_type(self):
        result = PublicKeyValidator.validate(12345)
        assert result.is_valid is False
        assert "hex string" in result.error_message


class TestSignatureValidator:
    def test_hex(self):
        result = SignatureValidator.validate(SIGNATURE_HEX)
        assert result.normalized_value == Signature(SIGNATURE_HEX)

    def test_bytes(self):
        assert SignatureValidator.validate(bytes(64)).is_valid is True

    def test_wrong_length(self):
        result = SignatureValidator.validate("cd" * 32)
        assert "64 bytes" in result.error_message


class TestAddressValidator:
    def test_normalizes(self):
        result = AddressValidator.validate("0X" + "AA" * 32)
        assert result.normalized_value == "0x" + "aa" * 32

    def test_without_prefix(self):
        assert AddressValidator.validate("aa" * 32).normalized_value == "0x" + "aa" * 32

    def test_too_short(self):
        assert AddressValidator.validate("0xabc").is_valid is False


class TestNonceValidator:
    @pytest.mark.parametrize(
        "value, expected",
        [(0, 0), (7, 7), ("42", 42), ("0x10", 16), (2**64 - 1, 2**64 - 1)],
    )
    def test_valid(self, value, expected):
        result = NonceValidator.validate(value)
        assert result.is_valid is True
        assert result.normalized_value == expected

    @pytest.mark.parametrize("value", [-1, 2**64, "abc", "", True, 1.5])
    def test_invalid(self, value):
        assert NonceValidator.validate(value).is_valid is False
