"""
Merkle Engine - Merkle Tree Implementation

Binary Merkle tree over SHA-256 hex digests with balanced batch
construction, single-block insertion and membership queries.

Construction splits the ordered leaves at the midpoint (the left half
gets the smaller share when the count is odd) and joins the halves
recursively. A lone node is carried up unchanged, so a one-block tree
has the leaf digest as its root.

Insertion always descends into the left child and promotes the leaf it
reaches into an internal node holding the old leaf on the left and the
new leaf on the right. Repeated insertion therefore grows a left-leaning
chain rather than a balanced tree.

Leaves hash raw blocks while internal nodes hash the concatenated hex
digests of their children, so a block's digest only ever matches a leaf.
"""

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from merkle_engine.crypto.hasher import (
    Digest,
    compute_leaf_hash,
    compute_parent_hash,
)


@dataclass(frozen=True)
class MerkleNode:
    """
    Represents a node in the Merkle tree.

    Attributes:
        hash: Hex digest bytes of the node
        left: Left child node (None for leaves)
        right: Right child node (None for leaves)
    """

    hash: Digest
    left: "MerkleNode | None" = None
    right: "MerkleNode | None" = None

    def __post_init__(self) -> None:
        if (self.left is None) != (self.right is None):
            raise ValueError("Internal node must have exactly two children")

    @property
    def is_leaf(self) -> bool:
        """Check if this node is a leaf."""
        return self.left is None and self.right is None

    @classmethod
    def leaf(cls, block: bytes) -> "MerkleNode":
        """Create a leaf node for a data block."""
        return cls(hash=compute_leaf_hash(block))

    @classmethod
    def join(cls, left: "MerkleNode", right: "MerkleNode") -> "MerkleNode":
        """Create an internal node over two subtrees."""
        return cls(
            hash=compute_parent_hash(left.hash, right.hash),
            left=left,
            right=right,
        )


def _build_subtree(nodes: Sequence[MerkleNode]) -> MerkleNode | None:
    """Reduce an ordered run of nodes to a single subtree root."""
    if not nodes:
        return None
    if len(nodes) == 1:
        return nodes[0]

    mid = len(nodes) // 2
    left = _build_subtree(nodes[:mid])
    right = _build_subtree(nodes[mid:])
    return MerkleNode.join(left, right)


class MerkleTree:
    """
    Merkle tree over an ordered collection of byte blocks.

    The tree owns its node graph exclusively. Nodes are immutable;
    insertion replaces the nodes along the insertion path and swaps in
    the new root. Not safe for concurrent mutation.

    Example:
        >>> tree = MerkleTree.from_leaves([b"a", b"b", b"c", b"d"])
        >>> tree.insert(b"e")
        >>> tree.contains(b"a")
        True
    """

    def __init__(self, root: MerkleNode | None = None) -> None:
        self._root = root

    @classmethod
    def from_leaves(cls, blocks: Iterable[bytes]) -> "MerkleTree":
        """
        Construct a balanced Merkle tree from data blocks.

        Args:
            blocks: Ordered data blocks; may be empty

        Returns:
            Constructed MerkleTree (without a root when blocks is empty)
        """
        leaf_nodes = [MerkleNode.leaf(block) for block in blocks]
        return cls(_build_subtree(leaf_nodes))

    @property
    def root(self) -> MerkleNode | None:
        """Get the root node."""
        return self._root

    @property
    def root_hash(self) -> Digest | None:
        """Get the root digest, or None for an empty tree."""
        return self._root.hash if self._root is not None else None

    @property
    def is_empty(self) -> bool:
        return self._root is None

    @property
    def leaf_count(self) -> int:
        """Get the number of leaves."""
        return sum(1 for node in self.iter_nodes() if node.is_leaf)

    @property
    def height(self) -> int:
        """Get the number of edges on the longest root-to-leaf path."""
        if self._root is None:
            return 0

        deepest = 0
        stack = [(self._root, 0)]
        while stack:
            node, depth = stack.pop()
            if node.is_leaf:
                deepest = max(deepest, depth)
            else:
                stack.append((node.right, depth + 1))
                stack.append((node.left, depth + 1))
        return deepest

    def iter_nodes(self) -> Iterator[MerkleNode]:
        """Iterate over every node depth-first, parents before children."""
        stack = [self._root] if self._root is not None else []
        while stack:
            node = stack.pop()
            yield node
            if not node.is_leaf:
                stack.append(node.right)
                stack.append(node.left)

    def insert(self, block: bytes) -> None:
        """
        Add one data block to the tree.

        Descends through left children to a leaf, promotes that leaf to
        an internal node (old leaf, new leaf) and recomputes the digest
        of every ancestor on the way back up.

        Args:
            block: Data block to insert
        """
        new_leaf = MerkleNode.leaf(block)

        if self._root is None:
            self._root = new_leaf
            return

        path: list[MerkleNode] = []
        current = self._root
        # Internal nodes always hold both children, so descent is always left.
        while not current.is_leaf:
            path.append(current)
            current = current.left

        replacement = MerkleNode.join(current, new_leaf)
        for ancestor in reversed(path):
            replacement = MerkleNode.join(replacement, ancestor.right)

        self._root = replacement

    def contains_hash(self, target: Digest) -> bool:
        """
        Check whether any node in the tree carries the given digest.

        Every node is visited until a match is found; digests carry no
        ordering, so no subtree can be skipped.
        """
        return any(node.hash == target for node in self.iter_nodes())

    def contains(self, block: bytes) -> bool:
        """
        Check whether a data block is a member of the tree.

        Args:
            block: Data block to look up

        Returns:
            True if the block's leaf digest appears in the tree
        """
        return self.contains_hash(compute_leaf_hash(block))


def build(blocks: Iterable[bytes]) -> MerkleTree:
    """Build a balanced Merkle tree from an ordered batch of blocks."""
    return MerkleTree.from_leaves(blocks)


def insert(tree: MerkleTree, block: bytes) -> None:
    """Insert a single block into an existing tree in place."""
    tree.insert(block)


def contains(tree: MerkleTree, block: bytes) -> bool:
    """Check whether a block is a member of the tree."""
    return tree.contains(block)
