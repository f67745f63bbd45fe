"""Device status reports and the live device roster."""
from typing import Any, Optional, Union

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from lanplayer.api.state import AppState, get_state
from lanplayer.core.netaddr import client_ip
from lanplayer.models.device import SongRef

router = APIRouter()


class StatusBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    device_id: Optional[Union[str, int]] = Field(None, alias="deviceId")
    song_id: Optional[Union[str, int]] = Field(None, alias="songId")
    is_playing: Any = Field(False, alias="isPlaying")
    title: Any = None
    artist: Any = None


def _text(value: Any) -> Optional[str]:
    return str(value) if value not in (None, "") else None


@router.post("/status")
def report_status(
    request: Request,
    body: StatusBody | None = Body(None),
    state: AppState = Depends(get_state),
):
    """Upsert this device's now-playing entry (full overwrite, fresh timestamp)."""
    device_id = _text(body.device_id) if body else None
    if not device_id:
        raise HTTPException(status_code=400, detail="missing deviceId")
    peer = request.client.host if request.client else None
    ip = client_ip(request.headers, peer, trust_proxy=state.trust_proxy)
    song_id = _text(body.song_id)
    song = (
        SongRef(id=song_id, title=_text(body.title), artist=_text(body.artist))
        if song_id
        else None
    )
    state.devices.report(
        device_id,
        ip=ip,
        is_playing=bool(body.is_playing),
        song=song,
        user_agent=request.headers.get("user-agent", ""),
    )
    return {"ok": True}


@router.get("/devices")
def list_devices(state: AppState = Depends(get_state)):
    """List devices that reported within the TTL window."""
    return [d.to_dict() for d in state.devices.list_active()]
