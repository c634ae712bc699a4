"""Divisão de textos longos em fragmentos dentro do limite da plataforma.

Prioridade dos pontos de corte (sempre depois da metade do limite):
1. linha em branco (fim de parágrafo)
2. pontuação de fim de frase (latina ou CJK)
3. quebra de linha
4. espaço
5. corte seco no limite, quando o texto não tem estrutura nenhuma
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MAX_LENGTH = 4000
SENTENCE_ENDERS = frozenset("。！？.!?")


@dataclass(frozen=True, slots=True)
class MessageChunk:
    """Fragmento ordenado de um texto outbound."""

    index: int
    text: str

    @property
    def is_first(self) -> bool:
        return self.index == 0


def _find_split_point(text: str, max_length: int) -> int:
    """Índice (exclusivo) do corte, ou -1 se nenhum candidato passa da metade."""
    midpoint = max_length * 0.5

    paragraph_end = text.rfind("\n\n", 0, max_length + 2)
    if paragraph_end > midpoint:
        return paragraph_end + 2

    i = min(max_length - 1, len(text) - 1)
    while i > midpoint:
        if text[i] in SENTENCE_ENDERS:
            return i + 1
        i -= 1

    line_end = text.rfind("\n", 0, max_length + 1)
    if line_end > midpoint:
        return line_end + 1

    space_index = text.rfind(" ", 0, max_length + 1)
    if space_index > midpoint:
        return space_index + 1

    return -1


def split_long_message(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> list[str]:
    """Divide `text` em fragmentos de no máximo `max_length` caracteres.

    Texto que já cabe no limite volta intacto como lista de um item. Nos demais
    casos cada fragmento (e o restante) é aparado nas pontas.

    Raises:
        ValueError: Se max_length <= 0
    """
    if max_length <= 0:
        raise ValueError("max_length deve ser > 0")

    if len(text) <= max_length:
        return [text]

    chunks: list[str] = []
    remaining = text
    while remaining:
        if len(remaining) <= max_length:
            chunks.append(remaining)
            break

        split_index = _find_split_point(remaining, max_length)
        if split_index <= 0:
            split_index = max_length

        chunk = remaining[:split_index].strip()
        if chunk:
            chunks.append(chunk)
        remaining = remaining[split_index:].strip()

    return chunks


def chunk_message(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> list[MessageChunk]:
    """Como split_long_message, mas com a posição de cada fragmento."""
    return [
        MessageChunk(index=index, text=chunk)
        for index, chunk in enumerate(split_long_message(text, max_length))
    ]
