"""App — coração do sistema: orquestração, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- coordinators/: fluxos end-to-end (inbound → runtime → fila de respostas → outbound)
- use_cases/: casos de uso (inputs/outputs, sem IO direto)
- services/: serviços de aplicação (chunking, política inbound, atraso humano)
- infra/: implementações concretas de IO (crypto, tokens, mídia)
- protocols/: contratos/interfaces e modelos canônicos
- observability/: correlation_id e métricas via logs estruturados

Padrão: app executa; api adapta; utils apoia.
"""
