"""
Event Publishers - Publicadores de Eventos de Domínio.

Entregam os eventos que o UnitOfWork libera após o commit.

Implementações:
- LoggingEventPublisher: Loga e processa no próprio processo (modo sync)
- CeleryEventPublisher: Enfileira no Celery (modo celery)
- InMemoryEventPublisher: Para testes

Nenhum publisher propaga exceções: a operação que gerou o evento
já foi gravada.
"""

from typing import Callable, List, Optional
import json
import logging

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher

logger = logging.getLogger(__name__)

Processador = Callable[[DomainEvent], bool]


class LoggingEventPublisher(EventPublisher):
    """
    Publisher síncrono.

    Loga o evento e, se configurado, chama o processador (o
    NotificacaoEventHandler) na mesma thread. O envio de e-mail é
    limitado por EMAIL_TIMEOUT.
    """

    def __init__(self, processador: Optional[Processador] = None, log_level: int = logging.INFO):
        self._processador = processador
        self._log_level = log_level

    def publish(self, event: DomainEvent) -> None:
        logger.log(
            self._log_level,
            f"[EVENT] {event.event_type} | "
            f"aggregate={event.aggregate_id} | "
            f"data={json.dumps(event.to_dict(), default=str)}"
        )

        if self._processador is None:
            return

        try:
            if not self._processador(event):
                logger.warning(f"Notificação de {event.event_type} não foi enviada")
        except Exception as e:
            logger.error(f"Erro ao processar {event.event_type}: {e}", exc_info=True)


class CeleryEventPublisher(EventPublisher):
    """
    Publisher que envia eventos para o Celery.

    O worker reconstrói o evento e aplica retry nas notificações.
    """

    def __init__(self, also_log: bool = True):
        self._also_log = also_log

    def publish(self, event: DomainEvent) -> None:
        if self._also_log:
            logger.info(
                f"[EVENT->CELERY] {event.event_type} | "
                f"aggregate={event.aggregate_id}"
            )

        try:
            from src.adapters.django_app.events.handlers import dispatch_domain_event
            dispatch_domain_event.delay(event.event_type, event.to_dict())
        except Exception as e:
            logger.error(f"Falha ao publicar evento no Celery: {e}", exc_info=True)


class InMemoryEventPublisher(EventPublisher):
    """
    Publisher em memória para testes.

    Armazena os eventos publicados.
    """

    def __init__(self):
        self._published_events: List[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()

    def get_events_by_type(self, event_type: str) -> List[DomainEvent]:
        return [e for e in self._published_events if e.event_type == event_type]


def get_event_publisher(mode: str = "sync", processador: Optional[Processador] = None) -> EventPublisher:
    """
    Factory do publisher conforme EVENT_PUBLISHER_MODE.

    Args:
        mode: 'sync' ou 'celery'
        processador: Handler usado no modo sync

    Raises:
        ValueError: Se modo desconhecido
    """
    if mode == "celery":
        return CeleryEventPublisher()
    if mode == "sync":
        return LoggingEventPublisher(processador=processador)
    raise ValueError(f"EVENT_PUBLISHER_MODE inválido: {mode!r}")
