"""Processamento inbound Lark."""

from app.coordinators.lark.inbound.handler import LarkInboundHandler

__all__ = ["LarkInboundHandler"]
