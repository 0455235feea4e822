from fastapi import APIRouter
from typing import List
import logging

from config.settings import settings
from core.errors import OpenRouterError
from models.image_edit import ImageInput, VideoGenerationRequest, VideoGenerationResponse
from services import openrouter_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/video", tags=["video"])

@router.post("/generate", response_model=VideoGenerationResponse)
async def generate_video(video_request: VideoGenerationRequest):
    """Video generation entry point; the current backend always reports it as unsupported"""
    progress: List[str] = []

    try:
        image = ImageInput.from_data_url(video_request.image_data) if video_request.image_data else None

        video_url = await openrouter_service.generate_video(
            video_request.prompt,
            image,
            video_request.aspect_ratio,
            progress.append,
            model=settings.OPENROUTER_MODEL
        )

        return VideoGenerationResponse(success=True, video_url=video_url, progress=progress)

    except OpenRouterError as e:
        return VideoGenerationResponse(success=False, progress=progress, error=e.message)
    except Exception as e:
        logger.exception("Video generation failed")
        return VideoGenerationResponse(success=False, progress=progress, error=f"Server error: {str(e)}")
