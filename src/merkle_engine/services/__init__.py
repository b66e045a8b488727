"""
Merkle Engine - Services Package

Provides the lock-guarded service that owns the served Merkle tree.
"""

from merkle_engine.services.tree_service import TreeService, TreeSnapshot

__all__ = [
    "TreeService",
    "TreeSnapshot",
]
