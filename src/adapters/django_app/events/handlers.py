"""
Event Handlers - Tasks Celery das notificações.

Executadas pelo worker quando o CeleryEventPublisher enfileira um
Domain Event. Cada task reconstrói o evento, chama o
NotificacaoEventHandler e, se alguma notificação falhar, agenda nova
tentativa. Esgotadas as tentativas, a falha é registrada e o evento
descartado.

Padrão:
    @shared_task(bind=True, max_retries=3, default_retry_delay=60, acks_late=True)
    def handle_<evento>(self, event_data: dict, entregues=None) -> bool:
        return _notificar(self, event_data, entregues)
"""

from typing import Any, Dict, List, Optional
import logging

from celery import shared_task
from celery.exceptions import MaxRetriesExceededError

from src.core.tickets.events import evento_from_dict

logger = logging.getLogger(__name__)

MAX_TENTATIVAS = 3
INTERVALO_TENTATIVAS = 60


def _notificar(task, event_data: Dict[str, Any], entregues: Optional[List[str]] = None) -> bool:
    """
    Processa o evento; pede retry quando a notificação falha.

    O retry leva as partes já entregues (kwarg `entregues`), então a
    nova tentativa só reenvia o que falhou.

    Returns:
        True se notificado; False se descartado após as tentativas
    """
    from src.config.container import get_container

    evento = evento_from_dict(event_data)
    handler = get_container().notificacao_handler()

    entregues = set(entregues or [])
    if handler.processar(evento, entregues):
        logger.info(f"[HANDLER] {evento.event_type} notificado | aggregate={evento.aggregate_id}")
        return True

    try:
        raise task.retry(args=[event_data], kwargs={"entregues": sorted(entregues)})
    except MaxRetriesExceededError:
        logger.error(
            f"[HANDLER] {evento.event_type} do chamado {evento.aggregate_id} "
            f"descartado após {task.max_retries} novas tentativas"
        )
        return False


# =============================================================================
# Event Handlers - Tickets
# =============================================================================

@shared_task(
    bind=True,
    max_retries=MAX_TENTATIVAS,
    default_retry_delay=INTERVALO_TENTATIVAS,
    acks_late=True,
)
def handle_ticket_criado(self, event_data: Dict[str, Any], entregues: Optional[List[str]] = None) -> bool:
    """Confirmação ao solicitante + aviso à equipe."""
    return _notificar(self, event_data, entregues)


@shared_task(
    bind=True,
    max_retries=MAX_TENTATIVAS,
    default_retry_delay=INTERVALO_TENTATIVAS,
    acks_late=True,
)
def handle_ticket_atribuido(self, event_data: Dict[str, Any], entregues: Optional[List[str]] = None) -> bool:
    return _notificar(self, event_data, entregues)


@shared_task(
    bind=True,
    max_retries=MAX_TENTATIVAS,
    default_retry_delay=INTERVALO_TENTATIVAS,
    acks_late=True,
)
def handle_comentario_adicionado(self, event_data: Dict[str, Any], entregues: Optional[List[str]] = None) -> bool:
    """Só comentários de técnicos chegam ao solicitante."""
    return _notificar(self, event_data, entregues)


@shared_task(
    bind=True,
    max_retries=MAX_TENTATIVAS,
    default_retry_delay=INTERVALO_TENTATIVAS,
    acks_late=True,
)
def handle_prioridade_alterada(self, event_data: Dict[str, Any], entregues: Optional[List[str]] = None) -> bool:
    return _notificar(self, event_data, entregues)


@shared_task(
    bind=True,
    max_retries=MAX_TENTATIVAS,
    default_retry_delay=INTERVALO_TENTATIVAS,
    acks_late=True,
)
def handle_ticket_resolvido(self, event_data: Dict[str, Any], entregues: Optional[List[str]] = None) -> bool:
    return _notificar(self, event_data, entregues)


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

HANDLERS_POR_EVENTO = {
    "TicketCriadoEvent": handle_ticket_criado,
    "TicketAtribuidoEvent": handle_ticket_atribuido,
    "ComentarioAdicionadoEvent": handle_comentario_adicionado,
    "TicketPrioridadeAlteradaEvent": handle_prioridade_alterada,
    "TicketResolvidoEvent": handle_ticket_resolvido,
}

EVENTOS_SEM_NOTIFICACAO = frozenset({"TicketDesatribuidoEvent", "TicketStatusAlteradoEvent"})


@shared_task(bind=True, ignore_result=True)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> None:
    """
    Dispatcher central para Domain Events.

    Args:
        event_type: Tipo do evento (ex: 'TicketCriadoEvent')
        event_data: Evento serializado por DomainEvent.to_dict()
    """
    handler = HANDLERS_POR_EVENTO.get(event_type)

    if handler:
        logger.info(f"[DISPATCHER] Roteando {event_type} para handler")
        handler.delay(event_data)
    elif event_type in EVENTOS_SEM_NOTIFICACAO:
        logger.debug(f"[DISPATCHER] {event_type} não gera notificação")
    else:
        logger.warning(f"[DISPATCHER] Handler não encontrado para {event_type}")
