from __future__ import annotations

import hashlib
from typing import Callable

from Cryptodome.Hash import keccak

from .constants import EMPTY_LEAF_TAG, LEAF_TAG, NODE_TAG


HashFn = Callable[[bytes], bytes]


def keccak256(data: bytes) -> bytes:
    return keccak.new(data=bytes(data), digest_bits=256).digest()


def blake2s_32(data: bytes) -> bytes:
    return hashlib.blake2s(data, digest_size=32).digest()


def empty_leaf_hash(hash_fn: HashFn = keccak256) -> bytes:
    """Digest used to pad leaf slots that hold no payload."""
    return hash_fn(EMPTY_LEAF_TAG)


def leaf_hash(payload: bytes, hash_fn: HashFn = keccak256) -> bytes:
    return hash_fn(LEAF_TAG + bytes(payload))


def node_hash(a: bytes, b: bytes, hash_fn: HashFn = keccak256) -> bytes:
    """Combine two child digests into their parent.

    The children are sorted byte-wise first, so node_hash(a, b) == node_hash(b, a)
    and proofs carry no direction bits.
    """
    a = bytes(a)
    b = bytes(b)
    if a > b:
        a, b = b, a
    return hash_fn(NODE_TAG + a + b)
