# src/llm/base_client.py - v2
"""Abstract model backend interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from jurisdraft.llm.models import BackendReply, GenerateRequest


class BaseModelBackend(ABC):
    """Single generate endpoint plus an advisory reachability probe.

    Implementations translate library failures into TransportError,
    BackendError or DecodeError from jurisdraft.core.errors.
    """

    @abstractmethod
    async def generate(self, request: GenerateRequest) -> BackendReply:
        """Run one non-streaming generation."""

    @abstractmethod
    async def probe(self) -> bool:
        """Return True when the backend answers a lightweight status call.

        Never raises.
        """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (e.g. ollama)."""
