"""
Merkle Engine API - Tree Endpoints

- GET /tree: Current tree summary
- POST /tree: Rebuild the tree from a batch of blocks
- POST /tree/blocks: Insert a single block
- POST /tree/contains: Membership query for a block
"""

import base64
import binascii
from enum import Enum

import structlog
from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel, Field

from merkle_engine.core.config import settings
from merkle_engine.crypto.hasher import compute_leaf_hash
from merkle_engine.services.tree_service import TreeService, TreeSnapshot

logger = structlog.get_logger(__name__)
router = APIRouter()


class BlockEncoding(str, Enum):
    """Text encoding of a block carried in a JSON request."""

    UTF8 = "utf-8"
    HEX = "hex"
    BASE64 = "base64"


def decode_block(data: str, encoding: BlockEncoding) -> bytes:
    """
    Decode a textual block into raw bytes.

    Raises:
        ValueError: If data is not valid for the given encoding
    """
    if encoding == BlockEncoding.HEX:
        return bytes.fromhex(data)
    if encoding == BlockEncoding.BASE64:
        try:
            return base64.b64decode(data, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 data: {e}") from e
    return data.encode("utf-8")


# Request/Response Models
class BlockRequest(BaseModel):
    """A single data block."""

    data: str = Field(..., description="Block contents in the given encoding")
    encoding: BlockEncoding = Field(
        default=BlockEncoding.UTF8,
        description="How data is encoded (utf-8, hex, base64)",
    )


class BuildRequest(BaseModel):
    """Request to rebuild the tree from a batch of blocks."""

    blocks: list[str] = Field(
        default_factory=list,
        description="Ordered block contents; an empty list clears the tree",
    )
    encoding: BlockEncoding = Field(
        default=BlockEncoding.UTF8,
        description="How every block is encoded (utf-8, hex, base64)",
    )


class TreeResponse(BaseModel):
    """Tree summary response."""

    root_hash: str | None = None
    leaf_count: int
    height: int
    is_empty: bool


class MembershipResponse(BaseModel):
    """Membership query result."""

    present: bool
    leaf_hash: str


def _get_service(req: Request) -> TreeService:
    tree_service = getattr(req.app.state, "tree_service", None)
    if not tree_service:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Tree service not initialized",
        )
    return tree_service


def _decode_or_400(data: str, encoding: BlockEncoding) -> bytes:
    try:
        return decode_block(data, encoding)
    except ValueError as e:
        logger.warning("Rejected undecodable block", encoding=encoding.value, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Block is not valid {encoding.value}: {e}",
        )


def _snapshot_to_response(snapshot: TreeSnapshot) -> TreeResponse:
    return TreeResponse(**snapshot.to_dict())


# Endpoints
@router.get(
    "",
    response_model=TreeResponse,
    summary="Get tree",
    description="Summary of the served tree: root hash, leaf count and height.",
)
async def get_tree(req: Request) -> TreeResponse:
    tree_service = _get_service(req)
    return _snapshot_to_response(await tree_service.snapshot())


@router.post(
    "",
    response_model=TreeResponse,
    summary="Build tree",
    description="Replace the served tree with a balanced tree over the given blocks.",
    responses={
        400: {"description": "A block could not be decoded"},
        413: {"description": "Too many blocks in one request"},
    },
)
async def build_tree(request: BuildRequest, req: Request) -> TreeResponse:
    """Rebuild the served tree from an ordered batch of blocks."""
    tree_service = _get_service(req)

    if len(request.blocks) > settings.MAX_BLOCKS_PER_REQUEST:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"At most {settings.MAX_BLOCKS_PER_REQUEST} blocks per request",
        )

    blocks = [_decode_or_400(data, request.encoding) for data in request.blocks]

    logger.info("Tree build requested", block_count=len(blocks))
    snapshot = await tree_service.build(blocks)
    return _snapshot_to_response(snapshot)


@router.post(
    "/blocks",
    response_model=TreeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Insert block",
    description="Insert a single block into the served tree.",
    responses={400: {"description": "The block could not be decoded"}},
)
async def insert_block(request: BlockRequest, req: Request) -> TreeResponse:
    tree_service = _get_service(req)
    block = _decode_or_400(request.data, request.encoding)
    snapshot = await tree_service.insert(block)
    return _snapshot_to_response(snapshot)


@router.post(
    "/contains",
    response_model=MembershipResponse,
    summary="Membership query",
    description="Check whether a block's leaf hash appears in the served tree.",
    responses={400: {"description": "The block could not be decoded"}},
)
async def contains_block(request: BlockRequest, req: Request) -> MembershipResponse:
    tree_service = _get_service(req)
    block = _decode_or_400(request.data, request.encoding)
    present = await tree_service.contains(block)
    return MembershipResponse(
        present=present,
        leaf_hash=compute_leaf_hash(block).decode("ascii"),
    )
