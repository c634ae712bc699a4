"""Factory de wiring para Lark (bootstrap).

Conecta implementações concretas da camada api/ (cliente HTTP, normalizer,
payload builder) aos coordenadores de app/ via protocolos.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from app.coordinators.lark.inbound.handler import LarkInboundHandler
from app.coordinators.lark.outbound.reply_dispatcher import LarkReplyDispatcher
from app.coordinators.lark.outbound.sender import LarkOutboundSender
from app.infra.lark.media_downloader import LarkMediaDownloader
from app.infra.lark.token_manager import LarkTokenManager
from app.services.human_delay import HumanDelayConfig
from app.use_cases.lark.send_outbound_message import SendOutboundMessageUseCase
from config.settings import get_lark_settings

if TYPE_CHECKING:
    from app.coordinators.lark.inbound.handler import Scheduler
    from app.protocols.http_client import LarkApiClientProtocol
    from app.protocols.runtime import InboundRuntimeProtocol

logger = logging.getLogger(__name__)

_inbound_runtime: InboundRuntimeProtocol | None = None


def register_inbound_runtime(runtime: InboundRuntimeProtocol | None) -> None:
    """Registra (ou remove, com None) o runtime que consome mensagens inbound."""
    global _inbound_runtime
    _inbound_runtime = runtime
    logger.info(
        "lark_inbound_runtime_registered",
        extra={"channel": "lark", "registered": runtime is not None},
    )


def get_inbound_runtime() -> InboundRuntimeProtocol | None:
    return _inbound_runtime


@lru_cache(maxsize=1)
def get_lark_client() -> LarkApiClientProtocol:
    """Cliente da Open API (singleton)."""
    from api.connectors.lark.http_client import create_lark_http_client

    return create_lark_http_client(get_lark_settings())


@lru_cache(maxsize=1)
def get_token_manager() -> LarkTokenManager:
    """Cache de tokens compartilhado por todas as requisições (singleton)."""
    return LarkTokenManager(get_lark_client())


@lru_cache(maxsize=1)
def get_media_downloader() -> LarkMediaDownloader:
    settings = get_lark_settings()
    return LarkMediaDownloader(
        client=get_lark_client(),
        token_provider=get_token_manager(),
        max_size_bytes=settings.media_max_size_bytes,
        timeout_seconds=settings.request_timeout_seconds,
    )


def create_outbound_sender() -> LarkOutboundSender:
    from api.payload_builders.lark import LarkPayloadBuilder

    return LarkOutboundSender(
        client=get_lark_client(),
        token_provider=get_token_manager(),
        builder=LarkPayloadBuilder(),
        chunk_limit=get_lark_settings().text_chunk_limit,
        media_downloader=get_media_downloader(),
    )


@lru_cache(maxsize=1)
def get_reply_dispatcher() -> LarkReplyDispatcher:
    """Fila de respostas por conversa (singleton: a ordem depende de uma única instância)."""
    return LarkReplyDispatcher(
        sender=create_outbound_sender(),
        human_delay=HumanDelayConfig.from_settings(get_lark_settings()),
    )


@lru_cache(maxsize=1)
def get_outbound_use_case() -> SendOutboundMessageUseCase:
    return SendOutboundMessageUseCase(get_reply_dispatcher())


def create_inbound_handler(scheduler: Scheduler | None = None) -> LarkInboundHandler:
    """Cria handler inbound; com scheduler, o runtime roda em background."""
    from api.normalizers.lark import LarkMessageNormalizer

    return LarkInboundHandler(
        normalizer=LarkMessageNormalizer(),
        runtime_provider=get_inbound_runtime,
        dispatcher=get_reply_dispatcher(),
        scheduler=scheduler,
    )


def reset_lark_singletons() -> None:
    """Limpa singletons (testes e troca de configuração)."""
    for factory in (
        get_lark_client,
        get_token_manager,
        get_media_downloader,
        get_reply_dispatcher,
        get_outbound_use_case,
    ):
        factory.cache_clear()
