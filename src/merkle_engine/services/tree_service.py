"""
Merkle Engine - Tree Service

Owns the served Merkle tree and serializes every access to it.

The tree engine has no internal locking; this service is the single
writer and guards build, insert and membership queries with one lock.
"""

import asyncio
import time
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import structlog

from merkle_engine.core.config import settings
from merkle_engine.crypto.hasher import compute_leaf_hash
from merkle_engine.crypto.merkle import MerkleTree
from merkle_engine.metrics import get_tree_metrics

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TreeSnapshot:
    """Point-in-time summary of the served tree."""

    root_hash: str | None
    leaf_count: int
    height: int

    @property
    def is_empty(self) -> bool:
        return self.root_hash is None

    @classmethod
    def of(cls, tree: MerkleTree) -> "TreeSnapshot":
        root_hash = tree.root_hash
        return cls(
            root_hash=root_hash.decode("ascii") if root_hash is not None else None,
            leaf_count=tree.leaf_count,
            height=tree.height,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "root_hash": self.root_hash,
            "leaf_count": self.leaf_count,
            "height": self.height,
            "is_empty": self.is_empty,
        }


class TreeService:
    """
    Merkle tree service.

    Provides:
    - Batch rebuild of the served tree
    - Single block insertion
    - Membership queries
    - Snapshots for status reporting
    """

    def __init__(self, tree: MerkleTree | None = None) -> None:
        """Initialize tree service, starting from an empty tree by default."""
        self._tree = tree if tree is not None else MerkleTree()
        self._lock = asyncio.Lock()

    @property
    def tree(self) -> MerkleTree:
        """Get the served tree instance."""
        return self._tree

    async def build(self, blocks: Iterable[bytes]) -> TreeSnapshot:
        """
        Replace the served tree with one built from a batch of blocks.

        Args:
            blocks: Ordered data blocks; may be empty

        Returns:
            Snapshot of the new tree
        """
        blocks = list(blocks)

        async with self._lock:
            started = time.perf_counter()
            self._tree = MerkleTree.from_leaves(blocks)
            duration = time.perf_counter() - started
            snapshot = TreeSnapshot.of(self._tree)

        logger.info(
            "Merkle tree built",
            block_count=len(blocks),
            root_hash=snapshot.root_hash,
            height=snapshot.height,
            duration=duration,
        )

        if settings.METRICS_ENABLED:
            metrics = get_tree_metrics()
            metrics.record_build(duration, len(blocks))
            metrics.update_shape(snapshot.leaf_count, snapshot.height)

        return snapshot

    async def insert(self, block: bytes) -> TreeSnapshot:
        """
        Insert a single block into the served tree.

        Args:
            block: Data block to insert

        Returns:
            Snapshot of the tree after insertion
        """
        async with self._lock:
            started = time.perf_counter()
            self._tree.insert(block)
            duration = time.perf_counter() - started
            snapshot = TreeSnapshot.of(self._tree)

        logger.info(
            "Block inserted",
            leaf_hash=compute_leaf_hash(block).decode("ascii"),
            root_hash=snapshot.root_hash,
            leaf_count=snapshot.leaf_count,
            height=snapshot.height,
        )

        if settings.METRICS_ENABLED:
            metrics = get_tree_metrics()
            metrics.record_insert(duration)
            metrics.update_shape(snapshot.leaf_count, snapshot.height)

        return snapshot

    async def contains(self, block: bytes) -> bool:
        """Check whether a block is a member of the served tree."""
        async with self._lock:
            present = self._tree.contains(block)

        logger.debug(
            "Membership query",
            leaf_hash=compute_leaf_hash(block).decode("ascii"),
            present=present,
        )

        if settings.METRICS_ENABLED:
            get_tree_metrics().record_membership_query(present)

        return present

    async def snapshot(self) -> TreeSnapshot:
        """Get a snapshot of the served tree."""
        async with self._lock:
            return TreeSnapshot.of(self._tree)
