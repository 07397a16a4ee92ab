"""
Core Domain Layer - O Hexágono.

Lógica de negócio pura da Central de Chamados, sem dependências de frameworks:
- tickets: ciclo de vida dos chamados e métricas de atendimento
- usuarios: equipe de suporte (técnicos e administradores)
"""
