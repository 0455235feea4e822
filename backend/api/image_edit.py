from fastapi import APIRouter, UploadFile, File, Form
from typing import Optional
import logging

from config.settings import settings
from core.errors import OpenRouterError
from models.image_edit import ImageInput, ImageEditRequest, ImageEditResponse
from services.openrouter_service import OpenRouterService, is_configured

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/image-edit", tags=["image-edit"])

def get_openrouter_service():
    return OpenRouterService()

async def read_upload(upload: UploadFile, label: str) -> ImageInput:
    """Read an uploaded file into an ImageInput, enforcing type and size limits"""
    mime_type = upload.content_type or ""
    if mime_type not in settings.ALLOWED_IMAGE_TYPES:
        raise ValueError(f"Unsupported {label} type: {mime_type or 'unknown'}")

    # One byte past the limit is enough to know it is too large
    raw = await upload.read(settings.MAX_UPLOAD_SIZE + 1)
    if not raw:
        raise ValueError(f"Uploaded {label} is empty")
    if len(raw) > settings.MAX_UPLOAD_SIZE:
        raise ValueError(f"Uploaded {label} exceeds {settings.MAX_UPLOAD_SIZE} bytes")

    return ImageInput.from_bytes(raw, mime_type)

async def run_edit(
    image: ImageInput,
    prompt: str,
    mask: Optional[ImageInput],
    secondary_image: Optional[ImageInput]
) -> ImageEditResponse:
    try:
        openrouter_service = get_openrouter_service()
        result = await openrouter_service.edit_image(image, prompt, mask=mask, secondary_image=secondary_image)

        return ImageEditResponse(
            success=True,
            image_url=result.image_url,
            text=result.text,
            error=None
        )

    except OpenRouterError as e:
        return ImageEditResponse(
            success=False,
            error=e.message
        )
    except Exception as e:
        logger.exception("Image edit failed")
        return ImageEditResponse(
            success=False,
            error=f"Server error: {str(e)}"
        )

@router.post("/", response_model=ImageEditResponse)
async def edit_image(edit_request: ImageEditRequest):
    """Edit an image using OpenRouter's Gemini model"""
    try:
        image = ImageInput.from_data_url(edit_request.image_data)
        mask = ImageInput.from_data_url(edit_request.mask_data) if edit_request.mask_data else None
        secondary_image = (
            ImageInput.from_data_url(edit_request.secondary_image_data)
            if edit_request.secondary_image_data else None
        )
    except ValueError as e:
        return ImageEditResponse(success=False, error=f"Invalid image data: {str(e)}")

    return await run_edit(image, edit_request.prompt, mask, secondary_image)

@router.post("/upload", response_model=ImageEditResponse)
async def edit_uploaded_image(
    prompt: str = Form(..., min_length=1, description="Edit instruction"),
    image: UploadFile = File(..., description="Image to edit"),
    mask: Optional[UploadFile] = File(None, description="PNG mask of the area to edit"),
    secondary_image: Optional[UploadFile] = File(None, description="Optional second image")
):
    """Edit an uploaded image (multipart form) using OpenRouter's Gemini model"""
    try:
        primary_input = await read_upload(image, "image")
        mask_input = await read_upload(mask, "mask") if mask is not None else None
        secondary_input = await read_upload(secondary_image, "secondary image") if secondary_image is not None else None
    except ValueError as e:
        return ImageEditResponse(success=False, error=str(e))

    return await run_edit(primary_input, prompt, mask_input, secondary_input)

@router.get("/health")
async def check_openrouter_config():
    """Check if OpenRouter is properly configured"""
    has_key = is_configured()

    return {
        "configured": has_key,
        "model": settings.OPENROUTER_MODEL,
        "message": "OpenRouter API key configured" if has_key else "OpenRouter API key not set"
    }
