"""
Shared pytest fixtures and configuration for all tests
"""
import base64
import pytest
import sys
from pathlib import Path

# Add backend to Python path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

@pytest.fixture
def test_settings():
    """Settings with a fake API key, independent of the environment"""
    from config.settings import Settings
    return Settings(
        OPENROUTER_API_KEY="test-key",
        OPENROUTER_MODEL="google/gemini-2.5-flash-image-preview",
        OPENROUTER_REFERER="https://bananary.test",
        OPENROUTER_APP_TITLE="Nano Bananary Image Editor",
        _env_file=None
    )

@pytest.fixture
def primary_image():
    from models.image_edit import ImageInput
    return ImageInput(data="UFJJTUFSWQ==", mime_type="image/jpeg")

@pytest.fixture
def mask_image():
    from models.image_edit import ImageInput
    return ImageInput(data="TUFTSw==", mime_type="image/png")

@pytest.fixture
def secondary_image():
    from models.image_edit import ImageInput
    return ImageInput(data="U0VDT05E", mime_type="image/webp")

@pytest.fixture
def png_payload():
    """A realistic base64 payload well over 100 characters"""
    return base64.b64encode(bytes(range(256)) * 2).decode("ascii")
