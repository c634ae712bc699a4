"""Agregador de settings do gateway Lark.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    BaseSettings,
    Environment,
    get_base_settings,
)

# Channel-specific settings
from config.settings.lark import (
    DEFAULT_ACCOUNT_ID,
    LARK_API_BASE_URL,
    TEXT_CHUNK_LIMIT,
    LarkAccountSettings,
    LarkSettings,
    get_lark_settings,
    mask_secret,
)

__all__ = [
    # Constants
    "DEFAULT_ACCOUNT_ID",
    "LARK_API_BASE_URL",
    "TEXT_CHUNK_LIMIT",
    # Base
    "BaseSettings",
    "Environment",
    # Channels
    "LarkAccountSettings",
    "LarkSettings",
    "get_base_settings",
    "get_lark_settings",
    "mask_secret",
]
