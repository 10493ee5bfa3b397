from __future__ import annotations

"""
Proof encodings.

Two layouts exist and are deliberately kept as separate types:

Verifier proof (consumed by merkleproof.verifier, may sit back-to-back in a
larger buffer)
- u16 big-endian sibling_count
- sibling_count x bytes[32] sibling digests, leaf-to-root

Builder proof (produced by merkleproof.builder, tooling only)
- u8 depth
- depth x bytes[32] sibling digests, leaf-to-root

A builder proof becomes verifiable only through BuilderProof.to_verifier().
"""

from dataclasses import dataclass
from typing import Iterable, Tuple

from .constants import (
    COUNT_STRUCT,
    DEPTH_STRUCT,
    DIGEST_SIZE,
    MAX_BUILDER_DEPTH,
    MAX_SIBLING_COUNT,
)
from .errors import BufferTooShort, ProofFormatError


def _check_siblings(siblings: Tuple[bytes, ...]) -> None:
    for i, s in enumerate(siblings):
        if len(s) != DIGEST_SIZE:
            raise ProofFormatError(f"sibling {i}: expected {DIGEST_SIZE} bytes, got {len(s)}")


def _read_siblings(buffer: bytes, pos: int, count: int) -> Tuple[Tuple[bytes, ...], int]:
    end = pos + count * DIGEST_SIZE
    if len(buffer) < end:
        raise BufferTooShort(f"need {end} bytes for {count} sibling(s), buffer has {len(buffer)}")
    view = memoryview(buffer)
    siblings = tuple(bytes(view[p : p + DIGEST_SIZE]) for p in range(pos, end, DIGEST_SIZE))
    return siblings, end


@dataclass(frozen=True)
class VerifierProof:
    siblings: Tuple[bytes, ...]

    def __post_init__(self):
        object.__setattr__(self, "siblings", tuple(bytes(s) for s in self.siblings))
        if len(self.siblings) > MAX_SIBLING_COUNT:
            raise ProofFormatError(f"too many siblings for a u16 count: {len(self.siblings)}")
        _check_siblings(self.siblings)

    @property
    def count(self) -> int:
        return len(self.siblings)

    def pack(self) -> bytes:
        return COUNT_STRUCT.pack(len(self.siblings)) + b"".join(self.siblings)

    @classmethod
    def unpack_from(cls, buffer: bytes, offset: int = 0) -> Tuple["VerifierProof", int]:
        """Parse one proof at offset; returns the proof and the offset just past it."""
        if offset < 0 or len(buffer) < offset + COUNT_STRUCT.size:
            raise BufferTooShort(f"no sibling count at offset {offset}")
        (count,) = COUNT_STRUCT.unpack_from(buffer, offset)
        siblings, end = _read_siblings(buffer, offset + COUNT_STRUCT.size, count)
        return cls(siblings), end


@dataclass(frozen=True)
class BuilderProof:
    depth: int
    siblings: Tuple[bytes, ...]

    def __post_init__(self):
        object.__setattr__(self, "siblings", tuple(bytes(s) for s in self.siblings))
        if not 0 <= self.depth <= MAX_BUILDER_DEPTH:
            raise ProofFormatError(f"depth out of range: {self.depth}")
        if len(self.siblings) != self.depth:
            raise ProofFormatError(f"depth {self.depth} but {len(self.siblings)} sibling(s)")
        _check_siblings(self.siblings)

    def pack(self) -> bytes:
        return DEPTH_STRUCT.pack(self.depth) + b"".join(self.siblings)

    @classmethod
    def unpack(cls, data: bytes) -> "BuilderProof":
        if len(data) < DEPTH_STRUCT.size:
            raise BufferTooShort("empty builder proof")
        (depth,) = DEPTH_STRUCT.unpack_from(data, 0)
        siblings, end = _read_siblings(data, DEPTH_STRUCT.size, depth)
        if end != len(data):
            raise ProofFormatError(f"{len(data) - end} trailing byte(s) after builder proof")
        return cls(depth, siblings)

    def to_verifier(self) -> VerifierProof:
        return VerifierProof(self.siblings)


def pack_proofs(proofs: Iterable[VerifierProof]) -> bytes:
    """Concatenate verifier proofs into one buffer, in order."""
    out = bytearray()
    for p in proofs:
        if not isinstance(p, VerifierProof):
            raise TypeError(f"expected VerifierProof, got {type(p).__name__}")
        out += p.pack()
    return bytes(out)
