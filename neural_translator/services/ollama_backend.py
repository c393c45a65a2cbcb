"""
Baseline translation engine backed by a local Ollama server.
"""

from typing import Any, Dict, List, Optional

import httpx

from neural_translator.config.config import EngineConfig, EngineKind, config
from neural_translator.models.interfaces import TranslationBackend, TranslationRequest
from neural_translator.models.languages import detect_script_language
from neural_translator.services.prompts import build_improvement_prompt, build_translation_prompt
from neural_translator.utils.exceptions import (
    EngineConnectionError,
    ModelUnavailableError,
    TransportError,
)
from neural_translator.utils.logging import engine_logger as logger


class OllamaBackend(TranslationBackend):
    """Talks to ``/api/generate`` trying each configured model in order."""

    kind = EngineKind.OLLAMA

    def __init__(self, engine_config: EngineConfig = None, http_client: httpx.AsyncClient = None):
        self.engine_config = engine_config or config.engine
        self.base_url = self.engine_config.ollama_base_url.rstrip("/")
        self.models: List[str] = list(self.engine_config.ollama_models)
        self.timeout = self.engine_config.request_timeout_seconds
        self.http_client = http_client
        self._owns_client = http_client is None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get HTTP client for engine requests."""
        if not self.http_client:
            self.http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=httpx.Limits(max_keepalive_connections=5, max_connections=10)
            )
        return self.http_client

    async def close(self) -> None:
        if self.http_client and self._owns_client:
            await self.http_client.aclose()
            self.http_client = None

    async def detect_language(self, text: str) -> str:
        return detect_script_language(text)

    async def translate(self, request: TranslationRequest) -> str:
        logger.debug(
            f"Starting translation: {request.from_language} -> {request.to_language}",
            event="ollama_translate"
        )
        prompt = build_translation_prompt(request.text, request.from_language, request.to_language)
        return await self._generate(prompt)

    async def improve_text(self, text: str, language: str) -> str:
        return await self._generate(build_improvement_prompt(text, language))

    def _generation_body(self, model: str, prompt: str) -> Dict[str, Any]:
        return {
            "model": model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": self.engine_config.temperature,
                "top_p": self.engine_config.top_p,
                "num_predict": self.engine_config.num_predict,
                "stop": list(self.engine_config.stop_sequences)
            }
        }

    async def _generate(self, prompt: str) -> str:
        http_client = await self._get_http_client()
        last_error: Optional[str] = None

        for model in self.models:
            try:
                response = await http_client.post(
                    f"{self.base_url}/api/generate",
                    json=self._generation_body(model, prompt)
                )
            except httpx.ConnectError as e:
                logger.error(
                    "Cannot connect to Ollama",
                    event="ollama_connect_failed",
                    metadata={"base_url": self.base_url, "error": str(e)}
                )
                raise EngineConnectionError(
                    f"Cannot connect to Ollama server at {self.base_url}. "
                    "Please make sure Ollama is running.",
                    engine=self.kind.value
                )
            except httpx.RequestError as e:
                logger.warning(
                    f"Request failed for {model}: {str(e)}",
                    event="ollama_request_failed",
                    metadata={"model": model}
                )
                last_error = str(e) or e.__class__.__name__
                continue

            if response.is_success:
                try:
                    payload = response.json()
                    translated = payload["response"]
                except (ValueError, KeyError, TypeError) as e:
                    logger.warning(
                        f"Failed to parse response for {model}: {str(e)}",
                        event="ollama_bad_response",
                        metadata={"model": model}
                    )
                    continue

                logger.debug(f"Generation successful with model: {model}", event="ollama_generated")
                return translated.strip()

            error_text = response.text
            logger.warning(
                f"API error for {model} ({response.status_code})",
                event="ollama_api_error",
                metadata={"model": model, "status_code": response.status_code, "response_text": error_text[:500]}
            )
            if response.status_code != 404 and "model" not in error_text.lower():
                last_error = f"HTTP {response.status_code}: {error_text[:200]}"

        if last_error:
            raise TransportError(f"Ollama request failed: {last_error}", engine=self.kind.value)

        raise ModelUnavailableError(
            f"No suitable model available. Please install one of: {', '.join(self.models)}",
            engine=self.kind.value,
            details={"models": list(self.models)}
        )

    async def check_health(self) -> bool:
        """Healthy when the server answers and lists at least one configured model."""
        try:
            http_client = await self._get_http_client()
            response = await http_client.get(f"{self.base_url}/api/tags")
        except httpx.HTTPError as e:
            logger.warning(
                f"Cannot connect to Ollama: {str(e)}",
                event="ollama_health",
                metadata={"base_url": self.base_url}
            )
            return False

        if not response.is_success:
            logger.warning(f"Ollama API returned error: {response.status_code}", event="ollama_health")
            return False

        available = [model for model in self.models if model in response.text]
        if not available:
            logger.warning(
                "Ollama is running but no suitable translation models found",
                event="ollama_health",
                metadata={"recommended": self.models}
            )
            return False

        logger.debug(
            "Ollama is healthy",
            event="ollama_health",
            metadata={"available_models": available}
        )
        return True
