"""Round history router."""

from fastapi import APIRouter, HTTPException, Query

from guessgame.services.runtime import get_round_logger

router = APIRouter(prefix="/rounds", tags=["rounds"])


@router.get("")
async def list_rounds(limit: int = Query(100, ge=1, le=1000), offset: int = Query(0, ge=0)):
    """List settled rounds, newest first."""
    round_logger = get_round_logger()
    return {
        "rounds": round_logger.list_rounds(limit=limit, offset=offset),
        "total": round_logger.get_rounds_count(),
    }


@router.get("/stats")
async def round_stats():
    """Aggregate statistics over settled rounds."""
    return get_round_logger().analyze_rounds()


@router.get("/{round_id}")
async def get_round(round_id: str):
    """Full record of one settled round."""
    if not round_id.isalnum():
        raise HTTPException(status_code=400, detail="Invalid round id")
    record = get_round_logger().get_round(round_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Round not found")
    return record.to_dict()
