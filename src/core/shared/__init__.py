"""
Shared Domain Components.

Contém componentes compartilhados entre todos os domínios:
- Exceções de domínio
- Papéis de ator e fonte de tempo
- Interfaces (Ports) e base de Domain Events
"""

from .exceptions import (
    DomainException,
    ValidationError,
    EntityNotFoundError,
    BusinessRuleViolationError,
    ConcurrencyError,
    AuthenticationError,
    DependencyFailureError,
)
from .events import DomainEvent
from .interfaces import UnitOfWork, EventPublisher
from .papeis import PapelAtor
from .clock import Clock, SystemClock, FixedClock

__all__ = [
    "DomainException",
    "ValidationError",
    "EntityNotFoundError",
    "BusinessRuleViolationError",
    "ConcurrencyError",
    "AuthenticationError",
    "DependencyFailureError",
    "DomainEvent",
    "UnitOfWork",
    "EventPublisher",
    "PapelAtor",
    "Clock",
    "SystemClock",
    "FixedClock",
]
