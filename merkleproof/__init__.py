"""
merkleproof — Keccak Merkle commitments and compact membership proofs.

Features:

- Domain-separated hashing (leaf / node / empty-leaf tags) with a commutative,
  sorted node combiner so proofs never need left/right direction bits.
- Offline construction of a complete, padded binary tree over a batch of
  payloads, with one leaf-to-root proof per payload.
- Fast verification straight off a packed buffer of count-prefixed proofs,
  with an explicitly unchecked entry point and a bounds-checked wrapper.

The builder's depth-prefixed proofs and the verifier's count-prefixed proofs
are distinct wire formats; see merkleproof.wire for the types and conversion.
"""

__version__ = "0.1"

__all__ = [
    "constants",
    "errors",
    "hashutil",
    "wire",
    "verifier",
    "builder",
]

# Programmatic API lives in merkleproof.builder/merkleproof.verifier; the CLI
# functions in merkleproof.cli (cmd_build/cmd_verify) take normal parameters.
