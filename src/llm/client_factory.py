# src/llm/client_factory.py - v3
"""Factory: instantiate a model backend from its provider name."""

from __future__ import annotations

import importlib
import logging

from jurisdraft.config.settings import Settings
from jurisdraft.llm.base_client import BaseModelBackend

logger = logging.getLogger(__name__)

# Registry of provider name -> backend class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "ollama": "jurisdraft.llm.adapters.ollama_adapter.OllamaBackend",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def create_backend(
    provider: str | None = None,
    settings: Settings | None = None,
    **kwargs: object,
) -> BaseModelBackend:
    """Instantiate the configured backend adapter.

    Args:
        provider: Provider identifier. Defaults to settings.llm_provider.
        settings: Application settings (host, model, timeouts).
        **kwargs: Explicit constructor arguments; they win over settings.

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    settings = settings or Settings()
    provider = provider or settings.llm_provider
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported model provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    backend_cls = _import_class(_PROVIDER_REGISTRY[provider])

    init_kwargs = dict(kwargs)
    if provider == "ollama":
        init_kwargs.setdefault("model", settings.ollama_model)
        init_kwargs.setdefault("base_url", settings.ollama_base_url)
        init_kwargs.setdefault("timeout_s", settings.llm_timeout_s)
        init_kwargs.setdefault("probe_timeout_s", settings.llm_probe_timeout_s)

    logger.debug("Creating model backend: provider=%s, model=%s", provider, init_kwargs.get("model"))
    return backend_cls(**init_kwargs)


def register_provider(name: str, class_path: str) -> None:
    """Register a custom backend implementing BaseModelBackend."""
    _PROVIDER_REGISTRY[name] = class_path
    logger.info("Registered model provider: %s -> %s", name, class_path)


def _import_class(class_path: str) -> type:
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
