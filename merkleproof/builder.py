from __future__ import annotations

from typing import List, Sequence, Tuple

from .constants import MAX_BUILDER_DEPTH
from .errors import ConstructionError
from .hashutil import HashFn, empty_leaf_hash, keccak256, leaf_hash, node_hash
from .wire import BuilderProof


# Tree layout: 1-based array, index 0 unused, root at 1,
# leaves at [2**depth, 2**(depth+1)).

def parent(index: int) -> int:
    return index // 2


def children(index: int) -> Tuple[int, int]:
    return 2 * index, 2 * index + 1


def sibling(index: int) -> int:
    return index ^ 1


def _check_inputs(messages: Sequence[bytes], depth: int) -> None:
    if depth < 0 or depth > MAX_BUILDER_DEPTH:
        raise ConstructionError(f"depth must be in 0..{MAX_BUILDER_DEPTH}, got {depth}")
    if (1 << depth) < len(messages):
        raise ConstructionError(f"depth {depth} holds {1 << depth} leaves, got {len(messages)} messages")


def build_tree(messages: Sequence[bytes], depth: int, *, hash_fn: HashFn = keccak256) -> List[bytes]:
    """
    Builds the complete tree over messages as a flat 1-based array.

    Leaf slots past len(messages) are padded with the empty-leaf digest. Internal
    nodes are filled bottom-up, one level at a time, so tree[1] is the root.
    """
    _check_inputs(messages, depth)
    first_leaf = 1 << depth
    tree: List[bytes] = [b""] * (2 * first_leaf)
    empty = empty_leaf_hash(hash_fn)
    for i in range(first_leaf):
        tree[first_leaf + i] = leaf_hash(messages[i], hash_fn) if i < len(messages) else empty
    for level in range(depth - 1, -1, -1):
        for node in range(1 << level, 1 << (level + 1)):
            left, right = children(node)
            tree[node] = node_hash(tree[left], tree[right], hash_fn)
    return tree


def construct_proofs(
    messages: Sequence[bytes], depth: int, *, hash_fn: HashFn = keccak256
) -> Tuple[bytes, List[BuilderProof]]:
    """Build the tree and extract one leaf-to-root proof per message.

    Args:
        messages: Payloads, placed left to right in the leaf slots.
        depth: Tree depth; 2**depth must be at least len(messages).
        hash_fn: 32-byte hash used for every digest.

    Returns:
        (root, proofs) with proofs[i] proving messages[i].

    Raises:
        ConstructionError: depth is too small for the batch or not encodable in one byte.
    """
    tree = build_tree(messages, depth, hash_fn=hash_fn)
    first_leaf = 1 << depth
    proofs: List[BuilderProof] = []
    for i in range(len(messages)):
        siblings: List[bytes] = []
        idx = first_leaf + i
        while idx > 1:
            siblings.append(tree[sibling(idx)])
            idx = parent(idx)
        proofs.append(BuilderProof(depth, tuple(siblings)))
    return tree[1], proofs
