"""
Value Objects do Domínio de Tickets.

Enums fechados usados pelas entidades, pelas políticas de ciclo
de vida e pelas métricas.
"""

from enum import Enum

from src.core.shared.exceptions import ValidationError
from src.core.shared.papeis import PapelAtor


def _from_string(enum_cls, value: str, campo: str, rotulo: str):
    if value:
        normalizado = value.strip()
        for item in enum_cls:
            if item.value == normalizado.lower() or item.name == normalizado.upper():
                return item
    raise ValidationError(f"{rotulo} inválido(a): {value}", field=campo)


class TicketStatus(Enum):
    """
    Estados possíveis de um chamado.

    Fluxo de Estados:
        AGUARDANDO → ABERTO → EM_ANDAMENTO → RESOLVIDO
             └──────────────────┘   ↑
                   ABERTO ──────────┘

        RESOLVIDO só muda por ação de administrador.
    """

    AGUARDANDO = "waiting"
    ABERTO = "open"
    EM_ANDAMENTO = "in_progress"
    RESOLVIDO = "resolved"

    @classmethod
    def from_string(cls, value: str) -> "TicketStatus":
        """
        Converte string para enum (valor "in_progress" ou nome "EM_ANDAMENTO").

        Raises:
            ValidationError: Se valor inválido
        """
        return _from_string(cls, value, "status", "Status")


class TicketPriority(Enum):
    """
    Prioridades de um chamado.

    AGUARDANDO é atribuída pelo sistema na criação e indica que o
    chamado ainda não foi triado; não pode ser escolhida depois.
    """

    AGUARDANDO = "waiting"
    BAIXA = "low"
    MEDIA = "medium"
    ALTA = "high"

    @property
    def rank(self) -> int:
        """Posição na listagem (menor primeiro); AGUARDANDO fica por último."""
        ranks = {
            TicketPriority.ALTA: 0,
            TicketPriority.MEDIA: 1,
            TicketPriority.BAIXA: 2,
        }
        return ranks.get(self, 3)

    @property
    def definivel(self) -> bool:
        return self != TicketPriority.AGUARDANDO

    @classmethod
    def from_string(cls, value: str) -> "TicketPriority":
        """
        Converte string para enum (valor "high" ou nome "ALTA").

        Raises:
            ValidationError: Se valor inválido
        """
        return _from_string(cls, value, "prioridade", "Prioridade")


class TipoAutor(Enum):
    """Tipo de autor gravado no comentário."""

    USUARIO = "user"
    TECNICO = "technician"

    @classmethod
    def from_papel(cls, papel: PapelAtor) -> "TipoAutor":
        """Administradores são gravados como técnicos."""
        if papel == PapelAtor.USUARIO:
            return cls.USUARIO
        if papel in (PapelAtor.TECNICO, PapelAtor.ADMIN):
            return cls.TECNICO
        raise ValueError(f"Papel desconhecido: {papel}")

