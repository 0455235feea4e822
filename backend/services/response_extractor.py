"""
Locate the generated image inside an OpenRouter chat-completions response.

Strategies are tried in a fixed order and the first one that yields an
image wins. Each strategy is a pure function of the validated message.
"""
import logging
import re
from typing import Any, Callable, List, Optional, Tuple

from core.errors import ImageExtractionError
from models.image_edit import GeneratedContent
from models.openrouter import ImageUrlPart, ResponseMessage, UnrecognizedResponse, parse_response

logger = logging.getLogger(__name__)

DATA_URI_PATTERN = re.compile(r'data:image/[^;]+;base64,[A-Za-z0-9+/=]+')
RAW_BASE64_PATTERN = re.compile(r'[A-Za-z0-9+/]{100,}={0,2}')

TROUBLESHOOTING = (
    "Possible causes:\n"
    "• The prompt may have been blocked by the safety filter\n"
    "• The input image format or content is not supported\n"
    "• The API response format has changed\n"
    "• The model is temporarily unavailable\n\n"
    "Suggestions:\n"
    "• Rephrase the prompt and avoid sensitive content\n"
    "• Try a different input image\n"
    "• Try again later"
)

Strategy = Callable[[ResponseMessage], Optional[str]]


def find_data_uri(message: ResponseMessage) -> Optional[str]:
    if not isinstance(message.content, str):
        return None
    match = DATA_URI_PATTERN.search(message.content)
    return match.group(0) if match else None


def find_raw_base64(message: ResponseMessage) -> Optional[str]:
    if not isinstance(message.content, str):
        return None
    trimmed = message.content.strip()
    if RAW_BASE64_PATTERN.fullmatch(trimmed):
        # No header to go by; PNG is a guess and the bytes are not checked
        logger.warning("Treating %d chars of headerless base64 as PNG", len(trimmed))
        return f"data:image/png;base64,{trimmed}"
    return None


def _first_image_part_url(parts: Optional[List[Any]]) -> Optional[str]:
    for part in parts or []:
        if isinstance(part, ImageUrlPart) and part.image_url.url:
            return part.image_url.url
    return None


def find_in_images_array(message: ResponseMessage) -> Optional[str]:
    return _first_image_part_url(message.images)


def find_in_attachments(message: ResponseMessage) -> Optional[str]:
    for attachment in message.attachments or []:
        if attachment.is_image:
            return attachment.url or None
    return None


def find_direct_image_url(message: ResponseMessage) -> Optional[str]:
    return message.direct_image_url or None


def find_in_content_parts(message: ResponseMessage) -> Optional[str]:
    if not isinstance(message.content, list):
        return None
    return _first_image_part_url(message.content)


DEFAULT_STRATEGIES: List[Tuple[str, Strategy]] = [
    ("data_uri", find_data_uri),
    ("raw_base64", find_raw_base64),
    ("images_array", find_in_images_array),
    ("attachments", find_in_attachments),
    ("direct_image_url", find_direct_image_url),
    ("content_parts", find_in_content_parts),
]


def captured_text(message: Optional[ResponseMessage]) -> Optional[str]:
    """Plain-text content kept for the failure message"""
    if message is None or not isinstance(message.content, str) or not message.content:
        return None
    return message.content


def build_failure_message(model_name: str, text: Optional[str]) -> str:
    message = f"{model_name} did not return an image.\n\n"
    if text:
        message += f"Model response: {text}\n\n"
    return message + TROUBLESHOOTING


class ResponseExtractor:
    """Turns a decoded response body into GeneratedContent or raises ImageExtractionError"""

    def __init__(
        self,
        model_name: str = "The model",
        strategies: Optional[List[Tuple[str, Strategy]]] = None,
        log: Optional[logging.Logger] = None
    ):
        self.model_name = model_name
        self.strategies = list(strategies) if strategies is not None else list(DEFAULT_STRATEGIES)
        self.log = log or logger

    def select(self, message: ResponseMessage) -> Optional[Tuple[str, str]]:
        """Run strategies in order; return (strategy name, image url) of the first hit"""
        for name, strategy in self.strategies:
            self.log.debug("Trying image strategy %s", name)
            image_url = strategy(message)
            if image_url:
                self.log.info("Image found by strategy %s", name)
                return name, image_url
            self.log.debug("Strategy %s found nothing", name)
        return None

    def extract(self, data: Any) -> GeneratedContent:
        parsed = parse_response(data)
        if isinstance(parsed, UnrecognizedResponse):
            self.log.warning("Unrecognized response shape: %s", parsed.reason)

        message = parsed.first_message
        if message is None:
            self.log.debug("Response has no message in its first choice")
        else:
            self.log.debug(
                "Response content type: %s",
                type(message.content).__name__ if message.content is not None else "missing"
            )
            selected = self.select(message)
            if selected:
                return GeneratedContent(image_url=selected[1], text=None)

        text = captured_text(message)
        self.log.error("No image located in response (text captured: %s)", bool(text))
        raise ImageExtractionError(build_failure_message(self.model_name, text), text=text)
