from typing import Optional, List, Dict, Any

from models.image_edit import ImageInput

MASK_MIME_TYPE = "image/png"
IMAGE_OUTPUT_SUFFIX = " Please generate and return an image as output."
MASKED_EDIT_TEMPLATE = (
    'Apply the following instruction only to the masked area of the image: "{prompt}". '
    'Preserve the unmasked area.'
)


def effective_prompt(prompt: str, has_mask: bool) -> str:
    """Scope the instruction to the masked region when a mask is sent"""
    if has_mask:
        return MASKED_EDIT_TEMPLATE.format(prompt=prompt)
    return prompt


def image_part(url: str) -> Dict[str, Any]:
    return {
        "type": "image_url",
        "image_url": {
            "url": url
        }
    }


def build_message_content(
    image: ImageInput,
    prompt: str,
    mask: Optional[ImageInput] = None,
    secondary_image: Optional[ImageInput] = None
) -> List[Dict[str, Any]]:
    """
    Build the ordered parts of the user message.

    Order is primary image, mask, secondary image, then a single text part.
    The mask is always declared as PNG whatever type it was uploaded with.
    """
    full_prompt = effective_prompt(prompt, mask is not None)

    content = [image_part(image.to_data_url())]

    if mask is not None:
        content.append(image_part(f"data:{MASK_MIME_TYPE};base64,{mask.data}"))

    if secondary_image is not None:
        content.append(image_part(secondary_image.to_data_url()))

    # Gemini only returns an image when asked for one explicitly
    content.append({
        "type": "text",
        "text": full_prompt + IMAGE_OUTPUT_SUFFIX
    })

    return content


def build_request_body(
    model: str,
    image: ImageInput,
    prompt: str,
    mask: Optional[ImageInput] = None,
    secondary_image: Optional[ImageInput] = None,
    max_tokens: int = 4096,
    temperature: float = 0.7
) -> Dict[str, Any]:
    """Chat-completions payload for a single multimodal user turn"""
    return {
        "model": model,
        "messages": [{
            "role": "user",
            "content": build_message_content(image, prompt, mask, secondary_image)
        }],
        "max_tokens": max_tokens,
        "temperature": temperature
    }
