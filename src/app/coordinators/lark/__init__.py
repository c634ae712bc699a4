"""Coordenadores do canal Lark (inbound e outbound)."""
