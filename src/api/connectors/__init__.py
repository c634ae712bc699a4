"""Connectors por canal — adapters de borda para APIs externas.

Estrutura:
- lark/: Lark/Feishu Open API (token, envio, upload, download) e ingestão de webhook

Cada canal tem seu próprio connector, garantindo SRP e isolamento de falhas.
"""

__all__: list[str] = []
