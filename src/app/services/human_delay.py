"""Atraso "humano" antes de entregar respostas."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from config.settings import LarkSettings

NATURAL_MIN_MS = 800
NATURAL_MAX_MS = 2500


@dataclass(frozen=True, slots=True)
class HumanDelayConfig:
    """Modo off | natural (800–2500 ms) | custom (min_ms–max_ms)."""

    mode: str = "off"
    min_ms: int = NATURAL_MIN_MS
    max_ms: int = NATURAL_MAX_MS

    @classmethod
    def from_settings(cls, settings: LarkSettings) -> HumanDelayConfig:
        return cls(
            mode=settings.human_delay_mode,
            min_ms=settings.human_delay_min_ms,
            max_ms=settings.human_delay_max_ms,
        )

    def bounds_ms(self) -> tuple[int, int] | None:
        """Faixa do atraso em ms, ou None quando desligado."""
        if self.mode == "natural":
            return NATURAL_MIN_MS, NATURAL_MAX_MS
        if self.mode == "custom":
            return self.min_ms, max(self.min_ms, self.max_ms)
        return None


def resolve_delay_seconds(config: HumanDelayConfig, rng: random.Random | None = None) -> float:
    """Sorteia o atraso (uniforme na faixa do modo); 0.0 com modo off."""
    bounds = config.bounds_ms()
    if bounds is None:
        return 0.0
    low, high = bounds
    return (rng or random).uniform(low, high) / 1000
