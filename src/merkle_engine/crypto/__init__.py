"""
Merkle Engine - Cryptographic Utilities

Provides SHA-256 hex digests and the Merkle tree engine.
"""

from merkle_engine.crypto.hasher import (
    Digest,
    compute_leaf_hash,
    compute_parent_hash,
    digest,
)
from merkle_engine.crypto.merkle import (
    MerkleNode,
    MerkleTree,
    build,
    contains,
    insert,
)

__all__ = [
    "Digest",
    "MerkleNode",
    "MerkleTree",
    "build",
    "compute_leaf_hash",
    "compute_parent_hash",
    "contains",
    "digest",
    "insert",
]
