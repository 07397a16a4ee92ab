"""
Domain Events do Domínio de Tickets.

Eventos:
- TicketCriadoEvent: Novo chamado aberto pelo solicitante
- TicketAtribuidoEvent: Chamado aceito/atribuído a técnico
- TicketDesatribuidoEvent: Técnico removido do chamado
- TicketStatusAlteradoEvent: Status mudou (exceto para resolvido)
- TicketResolvidoEvent: Chamado passou a resolvido
- TicketPrioridadeAlteradaEvent: Prioridade mudou
- ComentarioAdicionadoEvent: Novo comentário

Cada evento leva `ticket`, o snapshot serializado do chamado após a
mudança (TicketOutputDTO.to_dict()), para que o handler de
notificação não precise consultar o banco.

Uso:
    with uow:
        ...
        uow.publish_event(TicketCriadoEvent(aggregate_id=ticket.id, ticket=...))
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Type

from src.core.shared.events import DomainEvent


@dataclass
class TicketEvent(DomainEvent):
    """Base dos eventos do agregado Ticket."""

    ticket: Dict[str, Any] = field(default_factory=dict)

    @property
    def aggregate_type(self) -> str:
        return "Ticket"


@dataclass
class TicketCriadoEvent(TicketEvent):
    """
    Evento: Chamado foi criado.

    Handlers: e-mail de confirmação ao solicitante e aviso à equipe.
    """


@dataclass
class TicketAtribuidoEvent(TicketEvent):
    """
    Evento: Chamado foi atribuído a técnico.

    Handlers: avisar o solicitante que o chamado foi aceito.
    """

    tecnico_id: str = ""
    tecnico_nome: str = ""
    tecnico_email: Optional[str] = None


@dataclass
class TicketDesatribuidoEvent(TicketEvent):
    """Evento: Técnico removido; não gera notificação."""

    tecnico_anterior_id: Optional[str] = None


@dataclass
class TicketStatusAlteradoEvent(TicketEvent):
    status_anterior: str = ""
    status_novo: str = ""
    alterado_por: str = ""


@dataclass
class TicketResolvidoEvent(TicketEvent):
    """
    Evento: Chamado passou para resolvido.

    Handlers: avisar o solicitante com o nome de quem finalizou.
    """

    status_anterior: str = ""
    resolvido_por: str = ""


@dataclass
class TicketPrioridadeAlteradaEvent(TicketEvent):
    """Evento: Prioridade alterada (só é publicado quando o valor muda)."""

    prioridade_anterior: str = ""
    prioridade_nova: str = ""
    alterado_por: str = ""


@dataclass
class ComentarioAdicionadoEvent(TicketEvent):
    """
    Evento: Comentário adicionado.

    papel_autor guarda o papel de quem comentou (user, technician,
    admin); apenas comentários de técnicos notificam o solicitante.
    """

    comentario_id: str = ""
    autor_nome: str = ""
    papel_autor: str = ""


EVENTOS_POR_TIPO: Dict[str, Type[TicketEvent]] = {
    cls.__name__: cls
    for cls in (
        TicketCriadoEvent,
        TicketAtribuidoEvent,
        TicketDesatribuidoEvent,
        TicketStatusAlteradoEvent,
        TicketResolvidoEvent,
        TicketPrioridadeAlteradaEvent,
        ComentarioAdicionadoEvent,
    )
}


def evento_from_dict(data: Dict[str, Any]) -> TicketEvent:
    """
    Reconstrói evento serializado (payload recebido pelo Celery).

    Raises:
        KeyError: Se event_type desconhecido
    """
    return EVENTOS_POR_TIPO[data["event_type"]].from_dict(data)
