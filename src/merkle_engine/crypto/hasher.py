"""
Merkle Engine - Hasher

SHA-256 digests framed as lowercase hex text encoded to ASCII bytes.

Every node digest in the tree is 64 bytes of hex text, not the raw
32-byte hash. Internal nodes hash the concatenated hex text of their
children, so the framing must be reproduced byte for byte to stay
compatible with other implementations of the same tree.
"""

import hashlib
from collections.abc import Iterable

Digest = bytes


def digest(parts: Iterable[bytes]) -> Digest:
    """
    Hash an ordered sequence of byte strings in a single SHA-256 context.

    Args:
        parts: Byte strings fed to the hash in order

    Returns:
        ASCII bytes of the lowercase hex SHA-256 digest
    """
    hasher = hashlib.sha256()
    for part in parts:
        hasher.update(part)
    return hasher.hexdigest().encode("ascii")


def compute_leaf_hash(block: bytes) -> Digest:
    """Compute the digest of a leaf wrapping one data block."""
    return digest([block])


def compute_parent_hash(left: Digest, right: Digest) -> Digest:
    """Compute the digest of an internal node from its children's digests."""
    return digest([left, right])
