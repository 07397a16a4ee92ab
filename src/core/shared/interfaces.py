"""
Interfaces (Ports) compartilhadas entre Core e Adapters.

Driven Ports usados por todos os domínios:
- UnitOfWork: fronteira transacional + fila de eventos
- EventPublisher: entrega de eventos após o commit

Princípio: Core define interfaces; Adapters implementam.
"""

from abc import ABC, abstractmethod
from typing import List

from .events import DomainEvent


class UnitOfWork(ABC):
    """
    Unit of Work - Coordena transações atômicas.

    Pattern: Context Manager
        with uow:
            repo.atualizar(ticket, versao)
            uow.publish_event(event)
        # Commit ao sair sem erro, rollback se exceção

    Eventos enfileirados só são publicados após commit bem-sucedido.
    Uma falha na publicação não desfaz o commit.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    @abstractmethod
    def _begin_transaction(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """
        Persiste as mudanças e publica eventos.

        Ordem: commit no banco, publicação, limpeza da fila.
        Se o commit falhar, os eventos são descartados.
        """
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Desfaz as mudanças e descarta eventos."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """Enfileira evento para publicação após commit."""
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        return list(self._events)

    def clear_events(self) -> None:
        self._events.clear()


class EventPublisher(ABC):
    """
    Interface para publicação de eventos.

    Implementações nos adapters: LoggingEventPublisher (síncrono),
    CeleryEventPublisher (fila), InMemoryEventPublisher (testes).
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        raise NotImplementedError

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)
