"""Tests for Shopify webhook HMAC verification."""

import base64
import hashlib
import hmac

from orderdesk.adapters.shopify.signature import compute_signature, verify_signature

BODY = b'{"order_number": 1001}'
SECRET = "shpss_test"


def test_compute_matches_reference_hmac():
    expected = base64.b64encode(hmac.new(SECRET.encode(), BODY, hashlib.sha256).digest()).decode()
    assert compute_signature(BODY, SECRET) == expected


def test_valid_signature_accepted():
    assert verify_signature(BODY, SECRET, compute_signature(BODY, SECRET))


def test_header_whitespace_tolerated():
    assert verify_signature(BODY, SECRET, f"  {compute_signature(BODY, SECRET)}\n")


def test_tampered_body_rejected():
    sig = compute_signature(BODY, SECRET)
    assert not verify_signature(b'{"order_number": 1002}', SECRET, sig)


def test_wrong_secret_rejected():
    assert not verify_signature(BODY, SECRET, compute_signature(BODY, "other"))


def test_missing_secret_or_header_rejected():
    sig = compute_signature(BODY, SECRET)
    assert not verify_signature(BODY, "", sig)
    assert not verify_signature(BODY, SECRET, None)
    assert not verify_signature(BODY, SECRET, "")
