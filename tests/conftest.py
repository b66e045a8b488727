"""
Pytest configuration and shared fixtures for Merkle engine tests.
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from merkle_engine.crypto.merkle import MerkleTree
from merkle_engine.main import create_application
from merkle_engine.services.tree_service import TreeService


@pytest.fixture
def sample_blocks() -> list[bytes]:
    """Blocks used by the four-word scenario."""
    return [b"hello", b"world", b"whatsup", b"merkle"]


@pytest.fixture
def sample_tree(sample_blocks: list[bytes]) -> MerkleTree:
    """Create a balanced tree over the sample blocks."""
    return MerkleTree.from_leaves(sample_blocks)


@pytest.fixture
def tree_service() -> TreeService:
    """Create a tree service starting from an empty tree."""
    return TreeService()


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create a test client with the application lifespan running."""
    with TestClient(create_application()) as test_client:
        yield test_client
