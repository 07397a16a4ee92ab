"""
Unit of Work - Implementação Django.

Gerencia a transação de um use case e publica os eventos de
domínio depois do commit.

Responsabilidades:
- Abrir/fechar transação (django.db.transaction.atomic)
- Rollback em caso de exceção
- Publicar eventos apenas após commit bem-sucedido

Falhas na publicação são registradas e não desfazem a operação.
"""

from typing import List, Optional
import logging

from django.db import transaction

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher, UnitOfWork

logger = logging.getLogger(__name__)


def _publicar(eventos: List[DomainEvent], event_publisher: Optional[EventPublisher]) -> None:
    for event in eventos:
        logger.info(
            f"Publishing event: {event.event_type} "
            f"for aggregate {event.aggregate_id}"
        )

        if event_publisher is None:
            continue

        try:
            event_publisher.publish(event)
        except Exception as e:
            # Operação já comitada
            logger.error(f"Failed to publish event {event.event_type}: {e}", exc_info=True)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Cada `with` abre um bloco atomic; a mesma instância pode ser
    reutilizada em blocos sucessivos.

    Example:
        with DjangoUnitOfWork(event_publisher) as uow:
            repo.atualizar(ticket, versao)
            uow.publish_event(TicketAtribuidoEvent(...))
        # Commit + eventos publicados

    Example com rollback:
        with DjangoUnitOfWork() as uow:
            repo.save(ticket)
            uow.publish_event(TicketCriadoEvent(...))
            raise ValidationError("...")
        # Rollback, eventos descartados
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._atomic = None

    def _begin_transaction(self) -> None:
        self.clear_events()
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Ordem: commit no banco, publicação dos eventos, limpeza.

        Raises:
            DatabaseError: Se o commit falhar (eventos descartados)
        """
        atomic, self._atomic = self._atomic, None
        try:
            if atomic is not None:
                atomic.__exit__(None, None, None)
                logger.debug("Transaction committed")
        except Exception as e:
            logger.error(f"Commit failed: {e}")
            self.clear_events()
            raise

        eventos = self.collect_events()
        self.clear_events()
        _publicar(eventos, self._event_publisher)

    def rollback(self) -> None:
        atomic, self._atomic = self._atomic, None
        self.clear_events()
        if atomic is None:
            return

        transaction.set_rollback(True)
        atomic.__exit__(None, None, None)
        logger.debug("Transaction rolled back")


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes.

    Não persiste nada; guarda os eventos "publicados" e, se houver
    publisher, repassa a ele como a versão Django.

    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            uow.publish_event(event)

        assert uow.committed
        assert len(uow.published_events) == 1
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        self.clear_events()

    def commit(self) -> None:
        self._committed = True
        eventos = self.collect_events()
        self.clear_events()
        self._published_events.extend(eventos)
        _publicar(eventos, self._event_publisher)

    def rollback(self) -> None:
        self._rolled_back = True
        self.clear_events()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events

    def reset(self) -> None:
        self._committed = False
        self._rolled_back = False
        self._published_events.clear()
        self.clear_events()
