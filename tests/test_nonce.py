from __future__ import annotations

from core import nonce as nonce_module
from core.nonce import NONCE_BOUND, generate_nonce


def test_nonce_is_decimal_within_bound() -> None:
    for _ in range(200):
        value = generate_nonce()
        assert value.isdigit()
        assert 0 <= int(value) <= NONCE_BOUND


def test_nonce_bound_stays_inside_safe_integer_range() -> None:
    assert NONCE_BOUND == (2**53 - 1) // 10


def test_nonce_uses_full_range(monkeypatch) -> None:
    monkeypatch.setattr(nonce_module.random, "randint", lambda low, high: high)
    assert generate_nonce() == str(NONCE_BOUND)
