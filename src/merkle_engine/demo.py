"""
Merkle Engine - Demo

Builds a tree from four words, inserts a fifth and checks membership.
"""

import structlog

from merkle_engine.core.logging import setup_logging
from merkle_engine.crypto.merkle import MerkleTree

logger = structlog.get_logger(__name__)

DEMO_BLOCKS = [b"hello", b"world", b"whatsup", b"merkle"]
DEMO_INSERT = b"tree"
DEMO_QUERY = b"hello"


def run_demo() -> bool:
    """Run the demo scenario and return whether the queried block is present."""
    tree = MerkleTree.from_leaves(DEMO_BLOCKS)
    logger.info(
        "Built demo tree",
        blocks=[b.decode() for b in DEMO_BLOCKS],
        root_hash=tree.root_hash.decode("ascii"),
    )

    tree.insert(DEMO_INSERT)
    logger.info(
        "Inserted block",
        block=DEMO_INSERT.decode(),
        root_hash=tree.root_hash.decode("ascii"),
        height=tree.height,
    )

    is_present = tree.contains(DEMO_QUERY)
    logger.info("Membership query", block=DEMO_QUERY.decode(), is_present=is_present)
    return is_present


def main() -> None:
    setup_logging()
    run_demo()


if __name__ == "__main__":
    main()
