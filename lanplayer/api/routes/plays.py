"""Play counts: record a counted play, report the most-played song."""
from typing import Optional, Union

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel

from lanplayer.api.state import AppState, get_state

router = APIRouter()


class PlayBody(BaseModel):
    id: Optional[Union[str, int]] = None


@router.post("/play")
def record_play(
    body: PlayBody | None = Body(None),
    state: AppState = Depends(get_state),
):
    """Increment the shared play count for a song id."""
    song_id = str(body.id) if body and body.id not in (None, "") else None
    if not song_id:
        raise HTTPException(status_code=400, detail="missing id")
    count = state.play_counts.record_play(song_id)
    return {"ok": True, "id": song_id, "count": count}


@router.get("/top")
def top_played(state: AppState = Depends(get_state)):
    """Return the most-played song id and its count ({id: null, count: 0} when empty)."""
    song_id, count = state.play_counts.top_played()
    return {"id": song_id, "count": count}
