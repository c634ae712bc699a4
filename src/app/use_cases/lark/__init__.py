"""Use cases do canal Lark."""

from app.use_cases.lark.account_status import (
    AccountSnapshot,
    ProbeResult,
    describe_account,
    probe_account,
)
from app.use_cases.lark.send_outbound_message import SendOutboundMessageUseCase

__all__ = [
    "AccountSnapshot",
    "ProbeResult",
    "SendOutboundMessageUseCase",
    "describe_account",
    "probe_account",
]
