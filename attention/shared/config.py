from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class AppConfig(BaseModel):
    enabled: bool = True
    media_folder: Optional[str] = None
    window_count: int = Field(default=1, ge=1, le=4)
    loop_mode: bool = False
    bounce_mode: bool = False
    poll_interval_ms: int = Field(default=500, ge=100)
    image_duration_s: float = Field(default=8.0, gt=0)
    bounce_fps: int = Field(default=60, ge=1, le=240)
    bounce_speed_min: float = Field(default=3.0, gt=0)
    bounce_speed_max: float = Field(default=6.0, gt=0)
    video_seek_min_s: float = Field(default=10.0, ge=0)
    video_seek_max_s: float = Field(default=20.0, ge=0)

    @field_validator("media_folder")
    @classmethod
    def _blank_folder_is_default(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    def to_monitor_config(self) -> dict:
        return {
            "poll_interval_ms": self.poll_interval_ms,
        }

    def to_playback_config(self) -> dict:
        return {
            "window_count": self.window_count,
            "loop_mode": self.loop_mode,
            "bounce_mode": self.bounce_mode,
            "image_duration_s": self.image_duration_s,
            "bounce_fps": self.bounce_fps,
            "bounce_speed_min": min(self.bounce_speed_min, self.bounce_speed_max),
            "bounce_speed_max": max(self.bounce_speed_min, self.bounce_speed_max),
            "video_seek_min_s": min(self.video_seek_min_s, self.video_seek_max_s),
            "video_seek_max_s": max(self.video_seek_min_s, self.video_seek_max_s),
        }
