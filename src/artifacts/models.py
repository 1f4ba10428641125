"""Data models for generated artifacts and long-running video jobs."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Optional
from pydantic import BaseModel, ConfigDict

from util.data_url import to_data_url

ImageSize = Literal["1K", "2K", "4K"]


class GeneratedArtifact(BaseModel):
    """Binary output of an image call plus its media type."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: str

    @property
    def locator(self) -> str:
        """Embeddable data URL handed to callers."""
        return to_data_url(self.mime_type, self.data)


class ReferenceImage(BaseModel):
    """Input image sent alongside a directive (edit and compositing calls)."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: str = "image/png"


class JobState(str, Enum):
    PENDING = "pending"
    DONE = "done"


@dataclass(frozen=True)
class VideoJobConfig:
    """Output settings for a stress-test video."""

    number_of_videos: int = 1
    resolution: str = "1080p"
    aspect_ratio: str = "9:16"  # Portrait for actor fit checks


@dataclass(frozen=True)
class Job:
    """Snapshot of a long-running video generation operation.

    Advanced only by explicit polls; terminal once ``done`` is True.
    """

    name: Optional[str]
    done: bool
    result_locator: Optional[str] = None
    error: Optional[str] = None
    operation: Any = field(default=None, repr=False, compare=False)

    @property
    def state(self) -> JobState:
        return JobState.DONE if self.done else JobState.PENDING
