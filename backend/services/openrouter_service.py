import logging
import httpx
from typing import Optional, Callable, Dict, Any

from config.settings import Settings, settings as default_settings
from core.errors import (
    OpenRouterError,
    ConfigurationError,
    UpstreamHTTPError,
    NetworkError,
    UnsupportedCapabilityError,
    NETWORK_ERROR_MESSAGE,
    TIMEOUT_ERROR_MESSAGE,
    UNKNOWN_ERROR_MESSAGE,
)
from models.image_edit import ImageInput, GeneratedContent
from services.request_builder import build_request_body
from services.response_extractor import ResponseExtractor

logger = logging.getLogger(__name__)

VIDEO_PROGRESS_MESSAGE = "Checking video generation capabilities..."


class OpenRouterService:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        extractor: Optional[ResponseExtractor] = None
    ):
        self.settings = settings or default_settings
        if not self.settings.has_api_key:
            raise ConfigurationError(
                "OpenRouter API key not configured. Set OPENROUTER_API_KEY in your "
                ".env file or environment. Get a key at https://openrouter.ai"
            )
        self.api_key = self.settings.OPENROUTER_API_KEY.strip()
        self.model = self.settings.OPENROUTER_MODEL
        self.transport = transport
        self.extractor = extractor or ResponseExtractor(model_name=self.model)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.settings.OPENROUTER_REFERER,
            "X-Title": self.settings.OPENROUTER_APP_TITLE
        }

    async def _post(self, payload: Dict[str, Any]) -> Any:
        async with httpx.AsyncClient(timeout=self.settings.OPENROUTER_TIMEOUT, transport=self.transport) as client:
            response = await client.post(
                self.settings.chat_completions_url,
                json=payload,
                headers=self._headers()
            )

        if not response.is_success:
            raise UpstreamHTTPError(self._error_message(response), response.status_code)

        return response.json()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Prefer the message from the error body, fall back to the status line"""
        try:
            error_data = response.json() if response.content else {}
        except ValueError:
            error_data = {}

        error = error_data.get('error') if isinstance(error_data, dict) else None
        if isinstance(error, dict) and error.get('message'):
            return str(error['message'])
        return f"HTTP {response.status_code}: {response.reason_phrase}"

    async def edit_image(
        self,
        image: ImageInput,
        prompt: str,
        mask: Optional[ImageInput] = None,
        secondary_image: Optional[ImageInput] = None
    ) -> GeneratedContent:
        """Edit an image with the configured Gemini model and return the generated image"""
        try:
            payload = build_request_body(
                self.model,
                image,
                prompt,
                mask=mask,
                secondary_image=secondary_image,
                max_tokens=self.settings.OPENROUTER_MAX_TOKENS,
                temperature=self.settings.OPENROUTER_TEMPERATURE
            )
            logger.info(
                "Sending image edit to %s (mask=%s, secondary=%s)",
                self.model, mask is not None, secondary_image is not None
            )

            data = await self._post(payload)
            return self.extractor.extract(data)

        except OpenRouterError as error:
            logger.error("Error calling OpenRouter API: %s", error.message)
            raise
        except httpx.TimeoutException as error:
            logger.error("Error calling OpenRouter API: %s", error)
            raise NetworkError(TIMEOUT_ERROR_MESSAGE) from error
        except httpx.TransportError as error:
            logger.error("Error calling OpenRouter API: %s", error)
            raise NetworkError(NETWORK_ERROR_MESSAGE) from error
        except Exception as error:
            logger.exception("Unexpected error calling OpenRouter API")
            raise OpenRouterError(UNKNOWN_ERROR_MESSAGE) from error

    async def generate_video(
        self,
        prompt: str,
        image: Optional[ImageInput],
        aspect_ratio: str,
        on_progress: Callable[[str], None]
    ) -> str:
        return await generate_video(prompt, image, aspect_ratio, on_progress, model=self.model)


async def generate_video(
    prompt: str,
    image: Optional[ImageInput],
    aspect_ratio: str,
    on_progress: Callable[[str], None],
    model: Optional[str] = None
) -> str:
    """Video generation is not available through this model; needs no API key"""
    on_progress(VIDEO_PROGRESS_MESSAGE)

    raise UnsupportedCapabilityError(
        "Video generation is currently unavailable. The OpenRouter model "
        f"{model or default_settings.OPENROUTER_MODEL} only supports image processing. Please choose another "
        "image transformation, or contact the developers about video alternatives."
    )


def is_configured(settings: Optional[Settings] = None) -> bool:
    return (settings or default_settings).has_api_key
