"""In-process conversion registry."""

from __future__ import annotations

import threading


class InMemoryConversionRegistry:
    """Idempotent encoder/decoder registry keyed by converter identity."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._encoders: list[str] = []
        self._decoders: list[str] = []

    def register_encoder(self, identity: str) -> None:
        with self._lock:
            if identity not in self._encoders:
                self._encoders.append(identity)

    def register_decoder(self, identity: str) -> None:
        with self._lock:
            if identity not in self._decoders:
                self._decoders.append(identity)

    @property
    def encoders(self) -> tuple[str, ...]:
        return tuple(self._encoders)

    @property
    def decoders(self) -> tuple[str, ...]:
        return tuple(self._decoders)
