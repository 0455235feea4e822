"""
Response shapes returned by the OpenRouter chat-completions endpoint.

OpenRouter does not document a single shape for image output, so the
message is validated into a closed set of known variants. Anything that
does not fit becomes an Unrecognized* model instead of failing validation.
"""
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from typing import Optional, List, Any, Union, Literal, Annotated


class ImageUrl(BaseModel):
    url: Optional[str] = None

    @field_validator("url", mode="before")
    @classmethod
    def _url_type(cls, value: Any) -> Any:
        return value if isinstance(value, str) else None


class ImageUrlPart(BaseModel):
    type: Literal["image_url"]
    image_url: ImageUrl


class TextPart(BaseModel):
    type: Literal["text"]
    text: str


class UnrecognizedPart(BaseModel):
    model_config = ConfigDict(extra="allow")

    raw: Any = None

    @model_validator(mode="before")
    @classmethod
    def _wrap(cls, data: Any) -> Any:
        return {"raw": data}


ContentPart = Annotated[
    Union[ImageUrlPart, TextPart, UnrecognizedPart],
    Field(union_mode="left_to_right"),
]


class Attachment(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None
    content_type: Optional[str] = None
    url: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _keep_string_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if not (k in ("type", "content_type", "url") and not isinstance(v, str))}

    @property
    def is_image(self) -> bool:
        return self.type == "image" or bool(self.content_type and self.content_type.startswith("image/"))


class ResponseMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    content: Optional[Union[str, List[ContentPart]]] = None
    images: Optional[List[ContentPart]] = None
    attachments: Optional[List[Attachment]] = None
    image_url: Optional[Union[str, ImageUrl]] = None

    @field_validator("content", mode="before")
    @classmethod
    def _content_type(cls, value: Any) -> Any:
        return value if isinstance(value, (str, list)) else None

    @field_validator("images", "attachments", mode="before")
    @classmethod
    def _list_only(cls, value: Any) -> Any:
        return value if isinstance(value, list) else None

    @field_validator("image_url", mode="before")
    @classmethod
    def _image_url_type(cls, value: Any) -> Any:
        return value if isinstance(value, (str, dict)) else None

    @property
    def direct_image_url(self) -> Optional[str]:
        if isinstance(self.image_url, ImageUrl):
            return self.image_url.url
        return self.image_url


class Choice(BaseModel):
    model_config = ConfigDict(extra="allow")

    message: Optional[ResponseMessage] = None

    @field_validator("message", mode="before")
    @classmethod
    def _message_type(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else None


class ChatCompletionResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    choices: List[Choice] = []

    @field_validator("choices", mode="before")
    @classmethod
    def _choices_type(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return []
        return [choice if isinstance(choice, dict) else {} for choice in value]

    @property
    def first_message(self) -> Optional[ResponseMessage]:
        if not self.choices:
            return None
        return self.choices[0].message


class UnrecognizedResponse(BaseModel):
    raw: Any = None
    reason: Optional[str] = None

    @property
    def first_message(self) -> Optional[ResponseMessage]:
        return None


ParsedResponse = Union[ChatCompletionResponse, UnrecognizedResponse]


def parse_response(data: Any) -> ParsedResponse:
    """Validate a decoded JSON body into one of the known response shapes"""
    if not isinstance(data, dict):
        return UnrecognizedResponse(raw=data, reason=f"expected a JSON object, got {type(data).__name__}")
    try:
        return ChatCompletionResponse.model_validate(data)
    except ValidationError as e:
        return UnrecognizedResponse(raw=data, reason=str(e))
