from typing import List, Optional

from pydantic import BaseModel, Field


class UploadToMuxRequest(BaseModel):
    videoURL: str = Field(..., min_length=1)

    class Config:
        extra = "ignore"


class MuxPlaybackId(BaseModel):
    id: Optional[str] = None
    policy: Optional[str] = None

    class Config:
        extra = "ignore"


class MuxAsset(BaseModel):
    id: Optional[str] = None
    status: Optional[str] = None
    playback_ids: Optional[List[MuxPlaybackId]] = None

    class Config:
        extra = "ignore"


class MuxAssetResponse(BaseModel):
    data: Optional[MuxAsset] = None

    class Config:
        extra = "ignore"

    def first_playback_id(self) -> Optional[str]:
        if not self.data or not self.data.playback_ids:
            return None
        return self.data.playback_ids[0].id or None
