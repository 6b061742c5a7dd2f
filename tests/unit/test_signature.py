"""Tests for webhook signatures."""

import hashlib
import hmac
from unittest.mock import patch

import pytest

from innochannel.webhook.signature import compute_signature, verify_signature

PAYLOAD = b'{"event":"reservation.created","object_type":"reservation","data":{"id":"R1"}}'


def test_signature_is_hex_hmac_sha256(webhook_secret):
    expected = hmac.new(webhook_secret.encode(), PAYLOAD, hashlib.sha256).hexdigest()

    assert compute_signature(PAYLOAD, webhook_secret) == expected
    assert len(expected) == 64


def test_str_and_bytes_payloads_agree(webhook_secret):
    assert compute_signature(PAYLOAD.decode(), webhook_secret) == compute_signature(
        PAYLOAD, webhook_secret
    )


def test_round_trip(webhook_secret):
    signature = compute_signature(PAYLOAD, webhook_secret)

    assert verify_signature(PAYLOAD, signature, webhook_secret) is True


@pytest.mark.parametrize("bit", [0, 3, 7])
def test_single_bit_change_in_payload_fails(webhook_secret, bit):
    signature = compute_signature(PAYLOAD, webhook_secret)
    tampered = bytearray(PAYLOAD)
    tampered[10] ^= 1 << bit

    assert verify_signature(bytes(tampered), signature, webhook_secret) is False


def test_single_character_change_in_signature_fails(webhook_secret):
    signature = compute_signature(PAYLOAD, webhook_secret)
    flipped = ("1" if signature[0] == "0" else "0") + signature[1:]

    assert verify_signature(PAYLOAD, flipped, webhook_secret) is False


def test_wrong_secret_fails(webhook_secret):
    signature = compute_signature(PAYLOAD, webhook_secret)

    assert verify_signature(PAYLOAD, signature, "another-secret-value") is False


@pytest.mark.parametrize("signature,secret", [("", "0123456789abcdef"), ("abc", ""), (None, "x")])
def test_empty_signature_or_secret_fails(signature, secret):
    assert verify_signature(PAYLOAD, signature, secret) is False


def test_uses_constant_time_comparison(webhook_secret):
    signature = compute_signature(PAYLOAD, webhook_secret)

    with patch("innochannel.webhook.signature.hmac.compare_digest", return_value=True) as mock:
        assert verify_signature(PAYLOAD, signature, webhook_secret) is True

    mock.assert_called_once_with(signature.encode(), signature.encode())
