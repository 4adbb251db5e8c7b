"""
Rate limiting par client pour le proxy de géocodage.

Ce module implémente une limitation à fenêtre fixe: chaque client dispose d'un compteur remis à zéro
en bloc à la fin de sa fenêtre (pas de fenêtre glissante). L'état ne vit qu'en mémoire du processus;
c'est une protection anti-abus au mieux, pas un quota durable.

Identification du client: première adresse de `X-Forwarded-For`, sinon `X-Real-IP`, sinon la
sentinelle `"unknown"` (tous les clients indistinguables partagent alors le même compteur).
"""

from __future__ import annotations

import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Request

UNKNOWN_CLIENT = "unknown"


@dataclass
class RateLimitConfig:
    """Configuration du rate limiting par client."""

    max_requests: int = 20
    window_seconds: float = 60.0


@dataclass
class RateLimitResult:
    """Résultat d'une vérification de rate limit."""

    allowed: bool
    remaining: int
    reset_time: float
    retry_after: int | None = None


@dataclass
class _Counter:
    count: int
    reset_time: float


class FixedWindowRateLimiter:
    """Compteurs à fenêtre fixe, indexés par identifiant client."""

    def __init__(
        self,
        config: RateLimitConfig,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialise le limiteur.

        Args:
            config: seuil et durée de fenêtre.
            clock: horloge monotone en secondes (injectable pour les tests).
        """
        self.config = config
        self._clock = clock
        self._counters: dict[str, _Counter] = {}
        self._lock = threading.Lock()

    def check(self, client_id: str) -> RateLimitResult:
        """Comptabilise une requête du client et indique si elle est autorisée."""
        now = self._clock()
        with self._lock:
            counter = self._counters.get(client_id)
            if counter is None or now > counter.reset_time:
                counter = _Counter(count=1, reset_time=now + self.config.window_seconds)
                self._counters[client_id] = counter
                return RateLimitResult(
                    allowed=True,
                    remaining=self.config.max_requests - 1,
                    reset_time=counter.reset_time,
                )

            if counter.count >= self.config.max_requests:
                return RateLimitResult(
                    allowed=False,
                    remaining=0,
                    reset_time=counter.reset_time,
                    retry_after=max(1, math.ceil(counter.reset_time - now)),
                )

            counter.count += 1
            return RateLimitResult(
                allowed=True,
                remaining=self.config.max_requests - counter.count,
                reset_time=counter.reset_time,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._counters)


def client_identifier(request: Request) -> str:
    """Extrait l'identifiant réseau du client à partir des en-têtes de proxy."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip
    return UNKNOWN_CLIENT
