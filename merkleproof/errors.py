class MerkleError(Exception):
    """Base class for merkleproof errors."""


# Tree construction
class ConstructionError(MerkleError):
    pass


# Proof parsing
class BufferTooShort(MerkleError):
    pass


class SiblingCountExceeded(MerkleError):
    pass


class ProofFormatError(MerkleError):
    pass
