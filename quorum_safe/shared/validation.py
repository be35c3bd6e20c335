"""Input validation for keys, signatures, addresses and nonces."""

from dataclasses import dataclass
from typing import Any

from symbolchain.CryptoTypes import PublicKey, Signature

HEX_DIGITS = frozenset("0123456789abcdef")


@dataclass
class ValidationResult:
    is_valid: bool
    error_message: str | None = None
    normalized_value: Any = None


def _strip_hex(value: str) -> str:
    normalized = value.strip().lower()
    if normalized.startswith("0x"):
        normalized = normalized[2:]
    return normalized


def _check_hex(value: str, label: str, size: int) -> ValidationResult:
    if not isinstance(value, str):
        return ValidationResult(
            is_valid=False,
            error_message=f"{label} must be a hex string",
        )

    if not value.strip():
        return ValidationResult(
            is_valid=False,
            error_message=f"{label} is required",
        )

    hex_part = _strip_hex(value)

    if not all(c in HEX_DIGITS for c in hex_part):
        return ValidationResult(
            is_valid=False,
            error_message=f"{label} must be hexadecimal",
        )

    if len(hex_part) != size * 2:
        return ValidationResult(
            is_valid=False,
            error_message=f"{label} must be {size} bytes ({size * 2} hex characters)",
        )

    return ValidationResult(is_valid=True, normalized_value=bytes.fromhex(hex_part))


class PublicKeyValidator:
    @staticmethod
    def validate(value: str | bytes | PublicKey) -> ValidationResult:
        if isinstance(value, PublicKey):
            return ValidationResult(is_valid=True, normalized_value=value)

        if isinstance(value, (bytes, bytearray)):
            if len(value) != PublicKey.SIZE:
                return ValidationResult(
                    is_valid=False,
                    error_message=f"Public key must be {PublicKey.SIZE} bytes",
                )
            return ValidationResult(
                is_valid=True, normalized_value=PublicKey(bytes(value))
            )

        result = _check_hex(value, "Public key", PublicKey.SIZE)
        if not result.is_valid:
            return result
        return ValidationResult(
            is_valid=True, normalized_value=PublicKey(result.normalized_value)
        )


class SignatureValidator:
    @staticmethod
    def validate(value: str | bytes | Signature) -> ValidationResult:
        if isinstance(value, Signature):
            return ValidationResult(is_valid=True, normalized_value=value)

        if isinstance(value, (bytes, bytearray)):
            if len(value) != Signature.SIZE:
                return ValidationResult(
                    is_valid=False,
                    error_message=f"Signature must be {Signature.SIZE} bytes",
                )
            return ValidationResult(
                is_valid=True, normalized_value=Signature(bytes(value))
            )

        result = _check_hex(value, "Signature", Signature.SIZE)
        if not result.is_valid:
            return result
        return ValidationResult(
            is_valid=True, normalized_value=Signature(result.normalized_value)
        )


class AddressValidator:
    ADDRESS_SIZE = 32

    @staticmethod
    def validate(value: str) -> ValidationResult:
        result = _check_hex(value, "Address", AddressValidator.ADDRESS_SIZE)
        if not result.is_valid:
            return result
        return ValidationResult(
            is_valid=True, normalized_value="0x" + result.normalized_value.hex()
        )


class NonceValidator:
    MAX_NONCE = 2**64 - 1

    @staticmethod
    def validate(value: str | int) -> ValidationResult:
        if isinstance(value, bool):
            return ValidationResult(
                is_valid=False,
                error_message="Nonce must be an integer",
            )

        if isinstance(value, str):
            if not value.strip():
                return ValidationResult(
                    is_valid=False,
                    error_message="Nonce is required",
                )
            try:
                value = int(value.strip(), 0)
            except ValueError:
                return ValidationResult(
                    is_valid=False,
                    error_message="Nonce must be an integer",
                )

        if not isinstance(value, int):
            return ValidationResult(
                is_valid=False,
                error_message="Nonce must be an integer",
            )

        if value < 0 or value > NonceValidator.MAX_NONCE:
            return ValidationResult(
                is_valid=False,
                error_message=f"Nonce must be between 0 and {NonceValidator.MAX_NONCE}",
            )

        return ValidationResult(is_valid=True, normalized_value=value)
