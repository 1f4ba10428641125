"""Image and video artifact generation."""

from .models import GeneratedArtifact, ReferenceImage, Job, JobState, VideoJobConfig
from .images import ImageSynthesizer, extract_first_image
from .video import VideoJobClient, job_from_operation, authorize_locator

__all__ = [
    'GeneratedArtifact',
    'ReferenceImage',
    'Job',
    'JobState',
    'VideoJobConfig',
    'ImageSynthesizer',
    'extract_first_image',
    'VideoJobClient',
    'job_from_operation',
    'authorize_locator',
]
