"""Long-running video generation with Veo.

A job moves through two states:

    PENDING --poll(not done)--> PENDING
    PENDING --poll(done, locator present)--> DONE (success)
    PENDING --poll(done, locator absent)--> DONE (failure)

Polling is driven entirely by the awaiting caller; nothing runs in the
background. By default there is no attempt bound, no timeout and no
cancellation: a caller that stops awaiting leaves the remote job
running. ``max_attempts`` exists so a bound can be added without
changing call sites.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from google.genai import types

from config import POLL_INTERVAL_SECONDS
from exceptions import JobPollingExhausted, VideoGenerationFailed
from util.gemini import GeminiAPI, generate_videos_async, get_operation_async

from .models import Job, VideoJobConfig

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


def job_from_operation(operation: Any) -> Job:
    """Snapshot an SDK operation as a Job."""
    locator = None
    response = getattr(operation, "response", None) or getattr(operation, "result", None)
    videos = getattr(response, "generated_videos", None) or []
    if videos:
        video = getattr(videos[0], "video", None)
        locator = getattr(video, "uri", None)

    error = getattr(operation, "error", None)
    return Job(
        name=getattr(operation, "name", None),
        done=bool(getattr(operation, "done", False)),
        result_locator=locator,
        error=str(error) if error else None,
        operation=operation,
    )


def authorize_locator(locator: str, api_key: str) -> str:
    """Append the key query parameter required to download a generated video."""
    separator = "&" if "?" in locator else "?"
    return f"{locator}{separator}key={api_key}"


class VideoJobClient:
    """Starts and polls Veo video jobs."""

    def __init__(
        self,
        api: GeminiAPI,
        model: str,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        sleep: Sleep = asyncio.sleep,
        max_attempts: Optional[int] = None
    ):
        """
        Args:
            api: Shared Gemini client handle
            model: Veo model identifier
            poll_interval: Seconds to wait before each poll
            sleep: Awaitable sleep (injected in tests)
            max_attempts: Optional bound on polls; None means unbounded
        """
        self.api = api
        self.model = model
        self.poll_interval = poll_interval
        self._sleep = sleep
        self.max_attempts = max_attempts

    async def start(
        self,
        image: bytes,
        mime_type: str,
        directive: str,
        config: VideoJobConfig = VideoJobConfig()
    ) -> Job:
        """Start a video job seeded with ``image``; returns the job as first reported."""
        logger.info(f"Starting video job with {self.model} ({config.resolution}, {config.aspect_ratio})")
        operation = await generate_videos_async(
            self.api.client,
            model=self.model,
            prompt=directive,
            image=types.Image(image_bytes=image, mime_type=mime_type),
            config=types.GenerateVideosConfig(
                number_of_videos=config.number_of_videos,
                resolution=config.resolution,
                aspect_ratio=config.aspect_ratio,
            ),
        )
        job = job_from_operation(operation)
        logger.info(f"Video job started: {job.name}")
        return job

    async def poll(self, job: Job) -> Job:
        """Issue one status check and return the updated job."""
        operation = await get_operation_async(self.api.client, job.operation)
        updated = job_from_operation(operation)
        logger.debug(f"Polled {updated.name}: {updated.state.value}")
        return updated

    async def wait_for_locator(self, job: Job) -> str:
        """
        Drive a job to completion and return its authorized download locator.

        Raises:
            VideoGenerationFailed: If the job finishes without a locator
            JobPollingExhausted: If ``max_attempts`` polls pass without completion
        """
        attempts = 0
        while not job.done:
            if self.max_attempts is not None and attempts >= self.max_attempts:
                raise JobPollingExhausted(f"Video job {job.name} not done after {attempts} polls")
            await self._sleep(self.poll_interval)
            job = await self.poll(job)
            attempts += 1

        if not job.result_locator:
            detail = f": {job.error}" if job.error else ""
            raise VideoGenerationFailed(f"Video job {job.name} finished without a video{detail}")

        # Log the bare locator only; the authorized one carries the key.
        logger.info(f"Video job {job.name} finished: {job.result_locator}")
        return authorize_locator(job.result_locator, self.api.api_key)

    async def generate(
        self,
        image: bytes,
        mime_type: str,
        directive: str,
        config: VideoJobConfig = VideoJobConfig()
    ) -> str:
        """Start a job and wait for its authorized locator."""
        job = await self.start(image, mime_type, directive, config)
        return await self.wait_for_locator(job)
