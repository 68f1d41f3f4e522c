"""
Vision model clients. One instance is built per request by the HTTP layer
and handed to the services; nothing here keeps a global client.
"""
from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List, Optional, Sequence

import google.generativeai as genai
from openai import OpenAI

from app.config import ai_config
from app.services.image_ingestion import EncodedImagePart

logger = logging.getLogger(__name__)


class VisionClient:
    """Sends a prompt plus image parts to a hosted model and returns its text."""

    provider = ""
    model_name = ""

    def generate(
        self,
        prompt: str,
        images: Sequence[EncodedImagePart],
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> str:
        raise NotImplementedError


class GeminiVisionClient(VisionClient):
    provider = "gemini"

    def __init__(self, api_key: str, model_name: str = ai_config.GEMINI_MODEL):
        genai.configure(api_key=api_key)
        self.model_name = model_name
        self._model = genai.GenerativeModel(model_name)

    def generate(self, prompt, images, response_schema=None) -> str:
        parts: List[Any] = [prompt]
        for image in images:
            # the SDK's blob field takes raw bytes
            parts.append({"mime_type": image.content_type, "data": base64.b64decode(image.data)})

        config_kwargs: Dict[str, Any] = {"temperature": ai_config.AI_TEMPERATURE}
        if response_schema is not None:
            config_kwargs["response_mime_type"] = "application/json"
            config_kwargs["response_schema"] = response_schema

        logger.info(f"Sending request to Gemini ({self.model_name}) with {len(images)} image(s)")
        response = self._model.generate_content(
            parts,
            generation_config=genai.types.GenerationConfig(**config_kwargs),
        )
        try:
            return response.text or ""
        except ValueError:
            # no candidate text (blocked or empty response)
            logger.warning(f"Gemini returned no text: {getattr(response, 'prompt_feedback', None)}")
            return ""


class OpenAIVisionClient(VisionClient):
    provider = "openai"

    def __init__(self, api_key: str, model_name: str = ai_config.OPENAI_MODEL):
        self.client = OpenAI(api_key=api_key)
        self.model_name = model_name

    def generate(self, prompt, images, response_schema=None) -> str:
        content: List[dict] = [{"type": "text", "text": prompt}]
        for image in images:
            data_uri = f"data:{image.content_type};base64,{image.data}"
            content.append({"type": "image_url", "image_url": {"url": data_uri}})

        kwargs: Dict[str, Any] = {}
        if response_schema is not None:
            kwargs["response_format"] = {"type": "json_object"}

        logger.info(f"Sending request to OpenAI ({self.model_name}) with {len(images)} image(s)")
        response = self.client.chat.completions.create(
            model=self.model_name,
            temperature=ai_config.AI_TEMPERATURE,
            max_tokens=ai_config.OPENAI_MAX_TOKENS,
            messages=[{"role": "user", "content": content}],
            **kwargs,
        )
        return response.choices[0].message.content or ""


def create_vision_client(provider: str, api_key: str) -> VisionClient:
    if provider == "openai":
        return OpenAIVisionClient(api_key)
    if provider == "gemini":
        return GeminiVisionClient(api_key)
    raise ValueError(f"Unknown AI provider: {provider}")
