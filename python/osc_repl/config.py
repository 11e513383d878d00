"""Console configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ConsoleConfig:
    prompt: str = "# "
    json_output: bool = False
    query_timeout: float = 5.0
    query_resend_interval: float = 0.05
    effect_interval: float = 0.02
    # Level reached by ``@fade ... in`` when no explicit target is given.
    fade_in_level: float = 0.75
