"""Pruebas básicas de la cadena de hashes.

Basic tests for the hash chain.
"""

import hashlib

from urna.core.hashchain import canonical_json, compute_hash


def test_hash_is_stable():
    data = '{"a":1,"b":2}'
    h1 = compute_hash(data)
    h2 = compute_hash(data)

    assert h1 == h2
    assert len(h1) == 64


def test_hash_chain_changes():
    data = '{"a":1}'
    h1 = compute_hash(data)
    h2 = compute_hash(data, previous_hash=h1)

    assert h1 != h2


def test_canonical_json_ignores_key_order():
    assert canonical_json({"b": 2, "a": 1}) == canonical_json({"a": 1, "b": 2}) == '{"a":1,"b":2}'


def test_genesis_and_none_are_equivalent():
    assert compute_hash('{"a":1}', previous_hash=None) == compute_hash('{"a":1}', previous_hash="")


def test_previous_hash_case_is_normalized():
    previous = compute_hash('{"a":1}')

    assert compute_hash('{"b":2}', previous) == compute_hash('{"b":2}', previous.upper())


def test_hash_is_domain_separated():
    data = '{"a":1}'

    assert compute_hash(data) != hashlib.sha256(data.encode("utf-8")).hexdigest()
