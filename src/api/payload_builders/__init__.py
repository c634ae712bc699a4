"""Payload builders por canal — construção de payloads para APIs externas.

Estrutura:
- lark/: Lark/Feishu Open API (text, post, image)
"""

from .lark import LarkPayloadBuilder

__all__ = ["LarkPayloadBuilder"]
