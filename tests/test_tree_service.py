"""
Unit tests for the Tree Service.
"""

import asyncio
from unittest.mock import MagicMock, patch

import pytest

from merkle_engine.crypto.hasher import compute_leaf_hash
from merkle_engine.crypto.merkle import MerkleTree
from merkle_engine.services.tree_service import TreeService, TreeSnapshot


class TestTreeSnapshot:
    """Tests for TreeSnapshot."""

    def test_empty_tree(self) -> None:
        """Test snapshot of an empty tree."""
        snapshot = TreeSnapshot.of(MerkleTree())

        assert snapshot.root_hash is None
        assert snapshot.is_empty
        assert snapshot.leaf_count == 0
        assert snapshot.height == 0

    def test_root_hash_is_text(self, sample_tree: MerkleTree) -> None:
        """Test root hash is reported as hex text."""
        snapshot = TreeSnapshot.of(sample_tree)

        assert snapshot.root_hash == sample_tree.root_hash.decode("ascii")
        assert snapshot.leaf_count == 4
        assert snapshot.height == 2

    def test_to_dict(self, sample_tree: MerkleTree) -> None:
        """Test dictionary serialization."""
        data = TreeSnapshot.of(sample_tree).to_dict()

        assert set(data) == {"root_hash", "leaf_count", "height", "is_empty"}
        assert data["is_empty"] is False


class TestTreeService:
    """Tests for TreeService."""

    def test_initialization(self, tree_service: TreeService) -> None:
        """Test service starts with an empty tree."""
        assert tree_service.tree.is_empty

    def test_initialization_with_tree(self, sample_tree: MerkleTree) -> None:
        """Test service can adopt an existing tree."""
        service = TreeService(sample_tree)

        assert service.tree is sample_tree

    @pytest.mark.asyncio
    async def test_build(self, tree_service: TreeService, sample_blocks: list[bytes]) -> None:
        """Test build replaces the served tree."""
        snapshot = await tree_service.build(sample_blocks)

        assert snapshot.root_hash == MerkleTree.from_leaves(sample_blocks).root_hash.decode()
        assert snapshot.leaf_count == 4

    @pytest.mark.asyncio
    async def test_build_empty_clears(
        self, tree_service: TreeService, sample_blocks: list[bytes]
    ) -> None:
        """Test building from no blocks leaves an empty tree."""
        await tree_service.build(sample_blocks)
        snapshot = await tree_service.build([])

        assert snapshot.is_empty
        assert not await tree_service.contains(b"hello")

    @pytest.mark.asyncio
    async def test_insert_and_contains(
        self, tree_service: TreeService, sample_blocks: list[bytes]
    ) -> None:
        """Test insertion followed by membership queries."""
        await tree_service.build(sample_blocks)
        snapshot = await tree_service.insert(b"tree")

        assert snapshot.leaf_count == 5
        assert snapshot.height == 3
        assert await tree_service.contains(b"hello")
        assert await tree_service.contains(b"tree")
        assert not await tree_service.contains(b"not-inserted")

    @pytest.mark.asyncio
    async def test_insert_into_empty(self, tree_service: TreeService) -> None:
        """Test first insertion makes the leaf the root."""
        snapshot = await tree_service.insert(b"first")

        assert snapshot.root_hash == compute_leaf_hash(b"first").decode()
        assert snapshot.height == 0

    @pytest.mark.asyncio
    async def test_concurrent_inserts_serialized(self, tree_service: TreeService) -> None:
        """Test concurrent inserts all land in the tree."""
        blocks = [f"block{i}".encode() for i in range(50)]

        await asyncio.gather(*(tree_service.insert(b) for b in blocks))

        snapshot = await tree_service.snapshot()
        assert snapshot.leaf_count == 50
        for block in blocks:
            assert await tree_service.contains(block)

    @pytest.mark.asyncio
    async def test_records_metrics(
        self, tree_service: TreeService, sample_blocks: list[bytes]
    ) -> None:
        """Test operations are recorded in metrics."""
        metrics = MagicMock()

        with patch(
            "merkle_engine.services.tree_service.get_tree_metrics",
            return_value=metrics,
        ):
            await tree_service.build(sample_blocks)
            await tree_service.insert(b"tree")
            await tree_service.contains(b"hello")
            await tree_service.contains(b"missing")

        metrics.record_build.assert_called_once()
        assert metrics.record_build.call_args.args[1] == 4
        metrics.record_insert.assert_called_once()
        metrics.update_shape.assert_called_with(5, 3)
        metrics.record_membership_query.assert_any_call(True)
        metrics.record_membership_query.assert_any_call(False)

    @pytest.mark.asyncio
    async def test_metrics_disabled(
        self, tree_service: TreeService, sample_blocks: list[bytes]
    ) -> None:
        """Test metrics are skipped when disabled."""
        metrics = MagicMock()

        with patch(
            "merkle_engine.services.tree_service.get_tree_metrics",
            return_value=metrics,
        ), patch(
            "merkle_engine.services.tree_service.settings.METRICS_ENABLED",
            False,
        ):
            await tree_service.build(sample_blocks)
            await tree_service.insert(b"tree")

        metrics.record_build.assert_not_called()
        metrics.record_insert.assert_not_called()
