"""Settings base do gateway Lark.

Ambiente de execução e saída de logs do processo. O ambiente decide se a
validação de startup bloqueia o boot (staging/production) ou só alerta.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from config.logging.config import VALID_LOG_LEVELS

Environment = Literal["development", "staging", "production"]
LogFormat = Literal["json", "text"]

_ENVIRONMENT_ALIASES: dict[str, Environment] = {
    "production": "production",
    "prod": "production",
    "staging": "staging",
    "stage": "staging",
}
_STRICT_ENVIRONMENTS = frozenset({"staging", "production"})


@dataclass(frozen=True)
class BaseSettings:
    """Configurações do processo.

    Attributes:
        environment: Ambiente de execução (development|staging|production)
        service_name: Nome injetado em todo log record
        log_level: Nível do logger raiz
        log_format: `json` em produção; `text` para leitura local
    """

    environment: Environment = "development"
    service_name: str = "lark_gateway"
    log_level: str = "INFO"
    log_format: LogFormat = "json"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def strict_validation(self) -> bool:
        """True quando settings inválidas devem impedir o boot."""
        return self.environment in _STRICT_ENVIRONMENTS

    @property
    def json_logs(self) -> bool:
        return self.log_format == "json"

    def validate(self) -> list[str]:
        """Valida configurações base.

        Returns:
            Lista de erros (vazia = OK).
        """
        errors: list[str] = []

        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")
        if self.log_level not in VALID_LOG_LEVELS:
            errors.append(f"LOG_LEVEL inválido: {self.log_level}")
        if self.log_format not in ("json", "text"):
            errors.append(f"LOG_FORMAT inválido: {self.log_format}")

        return errors


def _load_base_from_env() -> BaseSettings:
    raw_environment = os.getenv("ENVIRONMENT", "development").strip().lower()
    return BaseSettings(
        environment=_ENVIRONMENT_ALIASES.get(raw_environment, "development"),
        service_name=os.getenv("SERVICE_NAME", "lark_gateway"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_format="text" if os.getenv("LOG_FORMAT", "").lower() == "text" else "json",
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings."""
    return _load_base_from_env()
