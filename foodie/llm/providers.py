"""
Provider selection and tiered fallback.

A ``ProviderStrategy`` owns the ordered list of language-model providers and
remembers when the primary one has failed, so later calls go straight to the
secondary until the failover expires. ``escalate`` runs a list of ``Tier``
callables that share one signature and returns the first successful answer.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Generic, Sequence, TypeVar

from ..errors import ProviderError
from . import gemini_client, groq_client
from .config import DEFAULT_FAILOVER_CONFIG

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Provider:
    name: str
    complete_json: Callable[[str, str], dict[str, Any]]
    complete_text: Callable[[str, str], str]


@dataclass(frozen=True)
class Tier(Generic[T]):
    name: str
    run: Callable[..., T]


def default_providers() -> list[Provider]:
    return [
        Provider("groq", groq_client.complete_json, groq_client.complete_text),
        Provider("gemini", gemini_client.complete_json, gemini_client.complete_text),
    ]


class ProviderStrategy:
    """Ordered providers with a time-boxed sticky failover off the primary."""

    def __init__(
        self,
        providers: Sequence[Provider] | None = None,
        reset_after_seconds: float | None = DEFAULT_FAILOVER_CONFIG.reset_after_seconds,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.providers = list(providers) if providers is not None else default_providers()
        if not self.providers:
            raise ValueError("ProviderStrategy needs at least one provider")
        self.reset_after_seconds = reset_after_seconds
        self._clock = clock
        self._primary_failed_at: float | None = None

    @property
    def primary(self) -> Provider:
        return self.providers[0]

    @property
    def primary_failed(self) -> bool:
        if self._primary_failed_at is None:
            return False
        if self.reset_after_seconds is None:
            return True
        if self._clock() - self._primary_failed_at >= self.reset_after_seconds:
            logger.info("Failover window expired, re-enabling %s", self.primary.name)
            self._primary_failed_at = None
            return False
        return True

    def active_providers(self) -> list[Provider]:
        if self.primary_failed and len(self.providers) > 1:
            return self.providers[1:]
        return list(self.providers)

    def record_failure(self, tier_name: str, exc: Exception | None = None) -> None:
        if tier_name == self.primary.name and self._primary_failed_at is None:
            logger.warning("Primary provider %s failed, preferring backup", tier_name)
            self._primary_failed_at = self._clock()

    def reset(self) -> None:
        self._primary_failed_at = None

    def provider_tiers(self, task: Callable[..., T]) -> list[Tier[T]]:
        """Bind ``task(provider, *args)`` to each active provider."""
        return [Tier(p.name, partial(task, p)) for p in self.active_providers()]


def escalate(
    tiers: Sequence[Tier[T]],
    *args: Any,
    on_failure: Callable[[str, Exception], None] | None = None,
) -> T:
    """Try each tier in order and return the first result that does not raise."""
    last_exc: Exception | None = None
    for tier in tiers:
        try:
            return tier.run(*args)
        except Exception as exc:
            logger.warning("%s tier failed, escalating", tier.name, exc_info=True)
            if on_failure is not None:
                on_failure(tier.name, exc)
            last_exc = exc
    raise ProviderError("All tiers failed") from last_exc
