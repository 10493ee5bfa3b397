from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .constants import COUNT_STRUCT, DEFAULT_MAX_SIBLINGS, DIGEST_SIZE
from .errors import BufferTooShort, SiblingCountExceeded
from .hashutil import HashFn, keccak256, leaf_hash, node_hash
from .wire import VerifierProof


@dataclass
class VerifierConfig:
    # None disables the ceiling and matches the unchecked path exactly
    max_siblings: Optional[int] = DEFAULT_MAX_SIBLINGS


def is_proof_valid_unchecked(
    buffer: bytes,
    offset: int,
    root: bytes,
    leaf_data: bytes,
    *,
    hash_fn: HashFn = keccak256,
) -> Tuple[bool, int]:
    """Fold a count-prefixed proof read from buffer at offset and compare to root.

    UNCHECKED: the caller guarantees len(buffer) >= offset + 2 + 32 * count.
    Nothing here validates that, and the loop runs for whatever count the
    buffer claims. On a short buffer the outcome is undefined: the count read
    may raise, or siblings may be silently truncated.

    Returns:
        (valid, end_offset) where end_offset points just past this proof so the
        next packed proof can be checked without re-scanning.
    """
    (count,) = COUNT_STRUCT.unpack_from(buffer, offset)
    view = memoryview(buffer)
    pos = offset + COUNT_STRUCT.size
    digest = leaf_hash(leaf_data, hash_fn)
    for _ in range(count):
        digest = node_hash(digest, view[pos : pos + DIGEST_SIZE], hash_fn)
        pos += DIGEST_SIZE
    return digest == bytes(root), pos


def is_proof_valid(
    buffer: bytes,
    offset: int,
    root: bytes,
    leaf_data: bytes,
    *,
    config: Optional[VerifierConfig] = None,
    hash_fn: HashFn = keccak256,
) -> Tuple[bool, int]:
    """Bounds-checked variant of is_proof_valid_unchecked.

    Raises:
        BufferTooShort: offset is negative, or the count field or any sibling
            digest lies past the end of buffer.
        SiblingCountExceeded: the encoded count exceeds config.max_siblings.
    """
    config = config or VerifierConfig()
    if offset < 0:
        raise BufferTooShort(f"negative offset: {offset}")
    if len(buffer) < offset + COUNT_STRUCT.size:
        raise BufferTooShort(f"no sibling count at offset {offset} (buffer has {len(buffer)} bytes)")
    (count,) = COUNT_STRUCT.unpack_from(buffer, offset)
    if config.max_siblings is not None and count > config.max_siblings:
        raise SiblingCountExceeded(f"proof claims {count} siblings, limit is {config.max_siblings}")
    need = offset + COUNT_STRUCT.size + count * DIGEST_SIZE
    if len(buffer) < need:
        raise BufferTooShort(f"need {need} bytes for {count} sibling(s), buffer has {len(buffer)}")
    return is_proof_valid_unchecked(buffer, offset, root, leaf_data, hash_fn=hash_fn)


def verify_proof(
    proof: VerifierProof,
    root: bytes,
    leaf_data: bytes,
    *,
    config: Optional[VerifierConfig] = None,
    hash_fn: HashFn = keccak256,
) -> bool:
    if not isinstance(proof, VerifierProof):
        raise TypeError(
            f"expected VerifierProof, got {type(proof).__name__}; convert builder proofs with to_verifier()"
        )
    ok, _ = is_proof_valid(proof.pack(), 0, root, leaf_data, config=config, hash_fn=hash_fn)
    return ok


def verify_packed(
    buffer: bytes,
    root: bytes,
    leaves: Sequence[bytes],
    *,
    offset: int = 0,
    config: Optional[VerifierConfig] = None,
    hash_fn: HashFn = keccak256,
) -> Tuple[List[bool], int]:
    """Check consecutive proofs in buffer, one per entry in leaves.

    Returns the per-leaf results and the offset just past the last proof.
    """
    results: List[bool] = []
    for leaf in leaves:
        ok, offset = is_proof_valid(buffer, offset, root, leaf, config=config, hash_fn=hash_fn)
        results.append(ok)
    return results, offset
