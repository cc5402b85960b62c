# vidsum/common/settings.py
from __future__ import annotations

from functools import lru_cache
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from vidsum.common.strings.splitters import csv_to_list
from vidsum.domain.enums.file_format import VideoFormats


class ConcurrencyConfig(BaseModel):
    # probe_workers is the hard cap on simultaneous ffprobe processes
    probe_workers: int = Field(4, ge=1, le=256)
    scan_workers: int = Field(8, ge=1, le=256)
    probe_queue_maxsize: int = Field(64, ge=0)


class FFProbeConfig(BaseModel):
    bin: str = "ffprobe"
    timeout_sec: float = Field(30.0, gt=0)
    log_level: str = "error"  # quiet|panic|fatal|error|warning|info|verbose|debug|trace
    poll_interval_sec: float = Field(0.1, gt=0)


class Settings(BaseSettings):
    # -------- App --------
    app_name: str = "vidsum"
    log_level: str = "WARNING"

    # -------- Recognized extensions (case-sensitive, without the dot) --------
    video_exts: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: [f.value for f in VideoFormats]
    )

    # -------- Sub-configs --------
    concurrency: ConcurrencyConfig = ConcurrencyConfig()
    ffprobe: FFProbeConfig = FFProbeConfig()

    # Optional override for the ffprobe binary (wins over ffprobe.bin)
    ffprobe_bin_override: Optional[str] = Field(default=None, alias="FFPROBE_BIN")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("video_exts", mode="before")
    @classmethod
    def _split_csv(cls, v):
        return [s.lstrip(".") for s in csv_to_list(v)]

    @computed_field  # type: ignore[misc]
    @property
    def ffprobe_bin(self) -> str:
        return self.ffprobe_bin_override or self.ffprobe.bin


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Use this everywhere you need config:
        from vidsum.common.settings import get_settings
        cfg = get_settings()
    """
    return Settings()  # pydantic_settings will read from .env automatically
