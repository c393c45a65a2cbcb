"""
Structured logging utilities for the translation orchestration core.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from neural_translator.config.config import config


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": getattr(record, 'service', 'neural-translator'),
            "request_id": getattr(record, 'request_id', None),
            "event": getattr(record, 'event', None) or record.funcName,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }

        if getattr(record, 'metrics', None):
            log_entry["metrics"] = record.metrics

        if getattr(record, 'metadata', None):
            log_entry["metadata"] = record.metadata

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class TranslationLogger:
    """Logger wrapper that attaches structured fields to every record."""

    def __init__(self, name: str, service: str = "neural-translator"):
        self.logger = logging.getLogger(name)
        self.service = service
        self._setup_logger()

    def _setup_logger(self):
        """Configure logger with structured formatting."""
        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)
            self.logger.setLevel(getattr(logging, config.monitoring.log_level.upper(), logging.INFO))

    def _extra(self, request_id: Optional[int], event: Optional[str],
               metrics: Optional[Dict[str, Any]], metadata: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            'service': self.service,
            'request_id': request_id,
            'event': event,
            'metrics': metrics,
            'metadata': metadata
        }

    def info(self, message: str, request_id: Optional[int] = None, event: Optional[str] = None,
             metrics: Optional[Dict[str, Any]] = None,
             metadata: Optional[Dict[str, Any]] = None):
        self.logger.info(message, extra=self._extra(request_id, event, metrics, metadata))

    def warning(self, message: str, request_id: Optional[int] = None, event: Optional[str] = None,
                metrics: Optional[Dict[str, Any]] = None,
                metadata: Optional[Dict[str, Any]] = None, exc_info: bool = False):
        self.logger.warning(message, extra=self._extra(request_id, event, metrics, metadata),
                            exc_info=exc_info)

    def error(self, message: str, request_id: Optional[int] = None, event: Optional[str] = None,
              metrics: Optional[Dict[str, Any]] = None,
              metadata: Optional[Dict[str, Any]] = None, exc_info: bool = False):
        self.logger.error(message, extra=self._extra(request_id, event, metrics, metadata),
                          exc_info=exc_info)

    def debug(self, message: str, request_id: Optional[int] = None, event: Optional[str] = None,
              metrics: Optional[Dict[str, Any]] = None,
              metadata: Optional[Dict[str, Any]] = None):
        self.logger.debug(message, extra=self._extra(request_id, event, metrics, metadata))

    def translation_completed(self, request_id: int, engine: str, latency_ms: int,
                              source_lang: str, target_lang: str, char_count: int):
        """Log a settled translation that came from an engine."""
        self.info(
            "Translation completed",
            request_id=request_id,
            event="translation_completed",
            metrics={
                "latency_ms": latency_ms,
                "char_count": char_count
            },
            metadata={
                "engine": engine,
                "source_language": source_lang,
                "target_language": target_lang,
                "cache_hit": False
            }
        )

    def cache_hit(self, request_id: int, source_lang: str, target_lang: str, cache_size: int):
        """Log a translation served from the in-memory cache."""
        self.debug(
            "Translation served from cache",
            request_id=request_id,
            event="cache_hit",
            metrics={"cache_size": cache_size},
            metadata={
                "source_language": source_lang,
                "target_language": target_lang,
                "cache_hit": True
            }
        )

    def translation_failed(self, request_id: int, error_code: str, error_message: str,
                           source_lang: str, target_lang: str):
        """Log a request that ended in the error state."""
        self.error(
            f"Translation failed: {error_message}",
            request_id=request_id,
            event="translation_failed",
            metadata={
                "error_code": error_code,
                "source_language": source_lang,
                "target_language": target_lang
            }
        )

    def engine_fallback(self, failed_engine: str, fallback_engine: str, operation: str, reason: str):
        """Log a switch from the preferred backend to the alternate one."""
        self.warning(
            f"{failed_engine} failed for {operation}, falling back to {fallback_engine}",
            event="engine_fallback",
            metadata={
                "failed_engine": failed_engine,
                "fallback_engine": fallback_engine,
                "operation": operation,
                "reason": reason
            }
        )

    def detection_failed(self, request_id: int, error_message: str, fallback_language: str):
        """Log a non-fatal detection failure."""
        self.warning(
            f"Language detection failed: {error_message}",
            request_id=request_id,
            event="detection_failed",
            metadata={"fallback_language": fallback_language}
        )


# Global logger instances
engine_logger = TranslationLogger("engine", "engine-gateway")
cache_logger = TranslationLogger("cache", "translation-cache")
orchestrator_logger = TranslationLogger("orchestrator", "request-orchestrator")
trigger_logger = TranslationLogger("triggers", "trigger-sources")
history_logger = TranslationLogger("history", "history-service")
app_logger = TranslationLogger("app", "translator-app")
