from pydantic import BaseModel, Field
from typing import Optional, List, Literal
import base64
import re

DATA_URL_PATTERN = re.compile(r'^data:(?P<mime>[^;,]+);base64,(?P<data>.*)$', re.DOTALL)

class ImageInput(BaseModel):
    """One image sent upstream: base64 text plus its MIME type"""
    data: str = Field(..., min_length=1)
    mime_type: str = Field(..., min_length=1)

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: str) -> "ImageInput":
        return cls(data=base64.b64encode(raw).decode("ascii"), mime_type=mime_type)

    @classmethod
    def from_data_url(cls, value: str, default_mime_type: str = "image/png") -> "ImageInput":
        """Accept either a data URL or bare base64 text"""
        value = value.strip()
        match = DATA_URL_PATTERN.match(value)
        if match:
            return cls(data=match.group('data'), mime_type=match.group('mime'))
        return cls(data=value, mime_type=default_mime_type)

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"

class GeneratedContent(BaseModel):
    image_url: Optional[str] = None
    text: Optional[str] = None

class ImageEditRequest(BaseModel):
    image_data: str = Field(..., min_length=1)  # Data URL or bare base64
    prompt: str = Field(..., min_length=1)
    mask_data: Optional[str] = None  # PNG mask, data URL or bare base64
    secondary_image_data: Optional[str] = None

class ImageEditResponse(BaseModel):
    success: bool
    image_url: Optional[str] = None
    text: Optional[str] = None
    error: Optional[str] = None

class VideoGenerationRequest(BaseModel):
    prompt: str = Field(..., min_length=1)
    image_data: Optional[str] = None
    aspect_ratio: Literal["16:9", "9:16"] = "16:9"

class VideoGenerationResponse(BaseModel):
    success: bool
    video_url: Optional[str] = None
    progress: List[str] = []
    error: Optional[str] = None
