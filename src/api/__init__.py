"""API — camada de borda e adapters de canais.

Responsabilidades:
- Receber requests de canais externos (webhooks)
- Verificar assinatura, token e criptografia dos eventos
- Normalizar dados para modelos internos
- Construir payloads para APIs externas

Subpastas:
- connectors/: adapters HTTP por canal (cliente Open API + pipeline de webhook)
- normalizers/: conversão de payloads externos → modelos internos
- payload_builders/: construção de payloads para APIs externas
- routes/: endpoints HTTP por canal (webhooks, health)

NÃO PODE conter: orquestração de use cases nem filas de resposta.
"""
