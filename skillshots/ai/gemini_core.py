"""
Gemini access for SkillShots.

Text and JSON generation go through the google-generativeai SDK. Thinking
mode and speech synthesis need generation options the SDK does not expose,
so those two calls use the REST endpoint directly.
"""

import asyncio
import base64
import json
import logging
from typing import Any, Dict, List, Optional, Union

import google.generativeai as genai
import httpx

from skillshots.core.config import Configuration
from skillshots.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)

Part = Union[str, Dict[str, Any]]


class GeminiClient:

    def __init__(self, config: Configuration):
        self.config = config
        self._configured = False

    def _ensure_configured(self):
        if not self.config.gemini_api_key:
            raise ExternalServiceError("Gemini API key is not configured")
        if not self._configured:
            genai.configure(api_key=self.config.gemini_api_key)
            self._configured = True

    # ==================== SDK ====================

    def _run(
        self,
        contents: Union[str, List[Part]],
        model_name: str,
        json_schema: Optional[dict],
        system_instruction: Optional[str],
    ) -> str:
        self._ensure_configured()
        model = genai.GenerativeModel(model_name, system_instruction=system_instruction)

        generation_config = None
        if json_schema is not None:
            generation_config = genai.GenerationConfig(
                response_mime_type="application/json",
                response_schema=json_schema,
            )

        response = model.generate_content(contents, generation_config=generation_config)
        return response.text.strip()

    async def generate(
        self,
        contents: Union[str, List[Part]],
        model: Optional[str] = None,
        json_schema: Optional[dict] = None,
        system_instruction: Optional[str] = None,
    ) -> str:
        """
        Run one generation and return the response text.

        Args:
            contents: Prompt string or list of parts (text or inline data)
            model: Model name, defaults to the flash model
            json_schema: When given, the response is constrained to JSON of this shape
            system_instruction: Optional system prompt

        Raises:
            ExternalServiceError: on any Gemini failure
        """
        model_name = model or self.config.gemini_flash_model
        try:
            return await asyncio.to_thread(self._run, contents, model_name, json_schema, system_instruction)
        except ExternalServiceError:
            raise
        except Exception as e:
            logger.error("Gemini %s generation failed: %s", model_name, e)
            raise ExternalServiceError("The AI service is unavailable. Please try again.") from e

    async def generate_json(self, contents: Union[str, List[Part]], json_schema: dict, model: Optional[str] = None):
        raw = await self.generate(contents, model=model, json_schema=json_schema)
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("Gemini returned invalid JSON: %s", raw[:200])
            raise ExternalServiceError("The AI service returned an unreadable response. Please try again.") from e

    # ==================== REST ====================

    async def _post(self, model_name: str, body: dict) -> dict:
        if not self.config.gemini_api_key:
            raise ExternalServiceError("Gemini API key is not configured")

        url = f"{self.config.gemini_api_base}/models/{model_name}:generateContent"
        try:
            async with httpx.AsyncClient(timeout=self.config.gemini_timeout_seconds) as client:
                response = await client.post(
                    url,
                    params={"key": self.config.gemini_api_key},
                    json=body,
                )
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as e:
            logger.error("Gemini %s request failed: %s", model_name, e)
            raise ExternalServiceError("The AI service is unavailable. Please try again.") from e

    @staticmethod
    def _first_part(payload: dict) -> dict:
        try:
            return payload["candidates"][0]["content"]["parts"][0]
        except (KeyError, IndexError, TypeError) as e:
            raise ExternalServiceError("The AI service returned an empty response") from e

    async def generate_with_thinking(self, prompt: str, system_instruction: Optional[str] = None) -> str:
        """Pro model with an explicit thinking budget"""
        body = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "thinkingConfig": {"thinkingBudget": self.config.thinking_budget},
            },
        }
        if system_instruction:
            body["systemInstruction"] = {"parts": [{"text": system_instruction}]}

        payload = await self._post(self.config.gemini_pro_model, body)
        candidates = payload.get("candidates") or [{}]
        parts = candidates[0].get("content", {}).get("parts", [])
        text = "".join(p.get("text", "") for p in parts if not p.get("thought"))
        if not text:
            raise ExternalServiceError("The AI service returned an empty response")
        return text.strip()

    async def synthesize(self, text: str) -> bytes:
        """Returns raw PCM audio bytes from the TTS model"""
        body = {
            "contents": [{"parts": [{"text": text}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {
                        "prebuiltVoiceConfig": {"voiceName": self.config.gemini_tts_voice}
                    }
                },
            },
        }
        payload = await self._post(self.config.gemini_tts_model, body)
        inline = self._first_part(payload).get("inlineData") or {}
        data = inline.get("data")
        if not data:
            raise ExternalServiceError("No audio data received from the AI service")
        return base64.b64decode(data)
