import struct


# Hash output size shared by every digest in a tree
DIGEST_SIZE = 32

# Domain separation tags (prepended before hashing)
LEAF_TAG = b"\x00"
NODE_TAG = b"\x01"
EMPTY_LEAF_TAG = b"\x02"

# Verifier proof header: sibling count, u16 big-endian
COUNT_STRUCT = struct.Struct(">H")
# Builder proof header: tree depth, u8
DEPTH_STRUCT = struct.Struct(">B")

MAX_SIBLING_COUNT = 0xFFFF
MAX_BUILDER_DEPTH = 0xFF

# Hardening ceiling for the checked verifier (2**64 leaves is far past any real batch)
DEFAULT_MAX_SIBLINGS = 64
