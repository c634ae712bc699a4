"""Cliente HTTP base com backoff exponencial para a Open API Lark."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from utils.errors import TransportError

logger = logging.getLogger(__name__)


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP.

    `transport` permite injetar um httpx.MockTransport em testes.
    """

    timeout_seconds: float = 30.0
    max_retries: int = 5
    backoff_base_seconds: float = 1.0
    backoff_max_seconds: float = 32.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True
    transport: httpx.AsyncBaseTransport | None = None


class HttpClient:
    """Cliente HTTP com retry limitado.

    Só retenta em sinal explícito de rate limit ou falha de rede; qualquer
    outra resposta volta imediatamente para o chamador.
    """

    def __init__(self, config: HttpClientConfig | None = None) -> None:
        self._config = config or HttpClientConfig()

    def is_rate_limited(self, response: httpx.Response) -> bool:
        """Sinal de rate limit na resposta; subclasses podem inspecionar o corpo."""
        return response.status_code == 429

    async def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Executa request com backoff exponencial.

        Raises:
            TransportError: Rede indisponível ou rate limit após esgotar retries
        """
        merged_headers = {**self._config.default_headers, **(headers or {})}
        last_error: TransportError | None = None

        for attempt in range(self._config.max_retries + 1):
            try:
                response = await self._send(method, url, merged_headers, **kwargs)
            except httpx.TransportError as exc:
                last_error = TransportError(
                    f"http_connection_error: {type(exc).__name__}", is_retryable=True
                )
                last_error.__cause__ = exc
            else:
                if not self.is_rate_limited(response):
                    return response
                last_error = TransportError(
                    "http_rate_limited",
                    status_code=response.status_code,
                    error_code=_body_code(response),
                    is_retryable=True,
                )

            if attempt >= self._config.max_retries:
                break
            await _backoff_sleep(
                attempt,
                self._config.backoff_base_seconds,
                self._config.backoff_max_seconds,
            )

        raise last_error or TransportError("http_retry_exhausted", is_retryable=True)

    async def _send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        **kwargs: Any,
    ) -> httpx.Response:
        async with httpx.AsyncClient(
            verify=self._config.verify_ssl,
            transport=self._config.transport,
        ) as client:
            return await client.request(
                method,
                url,
                headers=headers,
                timeout=self._config.timeout_seconds,
                **kwargs,
            )


def _body_code(response: httpx.Response) -> int | None:
    try:
        data = response.json()
    except ValueError:
        return None
    code = data.get("code") if isinstance(data, dict) else None
    return code if isinstance(code, int) else None


def backoff_delay(attempt: int, base: float, max_seconds: float) -> float:
    """Atraso da tentativa `attempt` (0-based): base * 2^attempt, limitado ao teto."""
    return min((2**attempt) * base, max_seconds)


async def _backoff_sleep(attempt: int, base: float, max_seconds: float) -> None:
    backoff = backoff_delay(attempt, base, max_seconds)
    logger.info("http_backoff", extra={"attempt": attempt + 1, "backoff_seconds": backoff})
    await asyncio.sleep(backoff)
