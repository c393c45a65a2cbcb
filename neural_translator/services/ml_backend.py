"""
Accelerated local translation engine built on Hugging Face translation pipelines.

The heavy libraries (torch, transformers, accelerate) ship in the optional
``accelerated`` extra and are only imported when a model is first loaded.
"""

import asyncio
import gc
import importlib.util
from datetime import datetime, timezone
from typing import Any, Dict

from neural_translator.config.config import EngineConfig, EngineKind, config
from neural_translator.models.interfaces import TranslationBackend, TranslationRequest
from neural_translator.models.languages import detect_script_language, iso_code
from neural_translator.utils.exceptions import ModelUnavailableError, TransportError
from neural_translator.utils.logging import engine_logger as logger

REQUIRED_MODULES = ("torch", "transformers", "accelerate")


class AcceleratedBackend(TranslationBackend):
    """Runs one opus-mt pipeline per language pair, loaded on first use."""

    kind = EngineKind.ML

    def __init__(self, engine_config: EngineConfig = None):
        self.engine_config = engine_config or config.engine
        self.model_template = self.engine_config.ml_model_template
        self.max_length = self.engine_config.ml_max_length
        self.use_gpu = self.engine_config.ml_use_gpu
        self.loaded_models: Dict[str, Dict[str, Any]] = {}
        self._model_lock = asyncio.Lock()

    def _get_model_id(self, source_lang: str, target_lang: str) -> str:
        src, tgt = iso_code(source_lang), iso_code(target_lang)
        if not src or not tgt or src == tgt:
            raise ModelUnavailableError(
                f"Language pair {source_lang}->{target_lang} not supported",
                engine=self.kind.value
            )
        return self.model_template.format(src=src, tgt=tgt)

    def _load_translator(self, model_id: str):
        """Build a translation pipeline. Runs in a worker thread."""
        try:
            from accelerate import Accelerator
            from transformers import pipeline
        except ImportError as e:
            raise ModelUnavailableError(
                "Accelerated engine requires the 'accelerated' extra "
                "(torch, transformers, accelerate)",
                engine=self.kind.value,
                details={"error": str(e)}
            )

        device = Accelerator(cpu=not self.use_gpu).device
        return pipeline("translation", model=model_id, device=device)

    async def _ensure_model_loaded(self, model_id: str):
        async with self._model_lock:
            model_info = self.loaded_models.get(model_id)
            if model_info:
                model_info["last_used"] = datetime.now(timezone.utc)
                return model_info["translator"]

            logger.info(f"Loading model {model_id}", event="model_load")
            try:
                translator = await asyncio.to_thread(self._load_translator, model_id)
            except TransportError:
                raise
            except Exception as e:
                logger.error(f"Failed to load model {model_id}: {str(e)}", event="model_load", exc_info=True)
                raise ModelUnavailableError(
                    f"Failed to load model: {model_id}",
                    engine=self.kind.value,
                    details={"error": str(e)}
                )

            now = datetime.now(timezone.utc)
            self.loaded_models[model_id] = {
                "translator": translator,
                "loaded_at": now,
                "last_used": now,
                "usage_count": 0
            }
            return translator

    async def translate(self, request: TranslationRequest) -> str:
        model_id = self._get_model_id(request.from_language, request.to_language)
        translator = await self._ensure_model_loaded(model_id)

        try:
            result = await asyncio.to_thread(translator, request.text, max_length=self.max_length)
        except Exception as e:
            logger.error(f"Translation execution failed: {str(e)}", event="ml_translate", exc_info=True)
            raise TransportError(f"Translation execution failed: {str(e)}", engine=self.kind.value)

        if not result:
            raise TransportError("Translation model returned empty result", engine=self.kind.value)

        self.loaded_models[model_id]["usage_count"] += 1
        return result[0]["translation_text"].strip()

    async def detect_language(self, text: str) -> str:
        return detect_script_language(text)

    async def improve_text(self, text: str, language: str) -> str:
        raise ModelUnavailableError(
            "Text improvement is not supported by the accelerated engine",
            engine=self.kind.value
        )

    async def check_health(self) -> bool:
        missing = [name for name in REQUIRED_MODULES if importlib.util.find_spec(name) is None]
        if missing:
            logger.debug(
                "Accelerated engine unavailable",
                event="ml_health",
                metadata={"missing_modules": missing}
            )
            return False
        return True

    async def close(self) -> None:
        """Unload all models."""
        self.loaded_models.clear()
        gc.collect()
