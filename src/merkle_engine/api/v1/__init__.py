"""
Merkle Engine API v1

Endpoints:
- GET /tree - Tree summary
- POST /tree - Build tree from blocks
- POST /tree/blocks - Insert block
- POST /tree/contains - Membership query
"""

from fastapi import APIRouter

from merkle_engine.api.v1.endpoints import tree

router = APIRouter()
router.include_router(tree.router, prefix="/tree", tags=["Tree"])
