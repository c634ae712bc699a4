"""Normalizers por canal — conversão de payloads externos para modelos internos.

Estrutura:
- lark/: normalizer Lark/Feishu (text, post, image, file)
"""

from .lark import LarkMessageNormalizer, normalize_message

__all__ = [
    "LarkMessageNormalizer",
    "normalize_message",
]
