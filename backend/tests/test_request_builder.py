"""
Request builder unit tests

These tests validate the multimodal payload sent to OpenRouter.
"""
import pytest

from services.request_builder import (
    build_message_content,
    build_request_body,
    effective_prompt,
    IMAGE_OUTPUT_SUFFIX,
)


@pytest.mark.unit
class TestEffectivePrompt:
    """Tests for the masked-edit prompt rewrite"""

    def test_prompt_unchanged_without_mask(self):
        assert effective_prompt("make it blue", has_mask=False) == "make it blue"

    def test_mask_rewrites_prompt_and_quotes_original(self):
        prompt = effective_prompt("make it blue", has_mask=True)

        assert prompt != "make it blue"
        assert '"make it blue"' in prompt
        assert "only to the masked area" in prompt
        assert "Preserve the unmasked area." in prompt


@pytest.mark.unit
class TestBuildMessageContent:
    """Tests for part ordering and text suffix"""

    def test_primary_only(self, primary_image):
        content = build_message_content(primary_image, "add a hat")

        assert len(content) == 2
        assert content[0] == {
            "type": "image_url",
            "image_url": {"url": "data:image/jpeg;base64,UFJJTUFSWQ=="}
        }
        assert content[1] == {
            "type": "text",
            "text": "add a hat Please generate and return an image as output."
        }

    def test_trailing_text_without_mask_is_prompt_plus_suffix(self, primary_image, secondary_image):
        content = build_message_content(primary_image, "swap the sky", secondary_image=secondary_image)

        assert content[-1]["text"] == "swap the sky" + IMAGE_OUTPUT_SUFFIX
        assert [part["type"] for part in content] == ["image_url", "image_url", "text"]
        assert content[1]["image_url"]["url"] == "data:image/webp;base64,U0VDT05E"

    def test_mask_and_secondary_give_three_image_parts_in_order(self, primary_image, mask_image, secondary_image):
        content = build_message_content(primary_image, "remove the car", mask=mask_image, secondary_image=secondary_image)

        image_urls = [part["image_url"]["url"] for part in content if part["type"] == "image_url"]
        assert image_urls == [
            "data:image/jpeg;base64,UFJJTUFSWQ==",
            "data:image/png;base64,TUFTSw==",
            "data:image/webp;base64,U0VDT05E",
        ]
        assert content[-1]["type"] == "text"

    def test_mask_without_secondary_gives_two_image_parts(self, primary_image, mask_image):
        content = build_message_content(primary_image, "remove the car", mask=mask_image)

        assert sum(1 for part in content if part["type"] == "image_url") == 2
        text = content[-1]["text"]
        assert '"remove the car"' in text
        assert text.endswith(IMAGE_OUTPUT_SUFFIX)
        assert not text.startswith("remove the car")

    def test_mask_always_declared_as_png(self, primary_image):
        from models.image_edit import ImageInput
        jpeg_mask = ImageInput(data="TUFTSw==", mime_type="image/jpeg")

        content = build_message_content(primary_image, "blur", mask=jpeg_mask)

        assert content[1]["image_url"]["url"] == "data:image/png;base64,TUFTSw=="


@pytest.mark.unit
def test_build_request_body_shape(primary_image):
    body = build_request_body("google/gemini-2.5-flash-image-preview", primary_image, "add a hat")

    assert body["model"] == "google/gemini-2.5-flash-image-preview"
    assert body["max_tokens"] == 4096
    assert body["temperature"] == 0.7
    assert "response_format" not in body
    assert len(body["messages"]) == 1
    assert body["messages"][0]["role"] == "user"
    assert body["messages"][0]["content"][-1]["type"] == "text"
