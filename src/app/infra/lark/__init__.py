"""Infra Lark: cache de tokens e download de mídia."""

from app.infra.lark.media_downloader import (
    LarkMediaDownloader,
    MediaDownloadResult,
    MediaReference,
    parse_media_url,
)
from app.infra.lark.token_manager import (
    REFRESH_BUFFER_SECONDS,
    CachedToken,
    CredentialCheck,
    LarkTokenManager,
)

__all__ = [
    "REFRESH_BUFFER_SECONDS",
    "CachedToken",
    "CredentialCheck",
    "LarkMediaDownloader",
    "LarkTokenManager",
    "MediaDownloadResult",
    "MediaReference",
    "parse_media_url",
]
