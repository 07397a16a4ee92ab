"""
Ports (Interfaces) do Domínio de Tickets.

Define os contratos que os Adapters de infraestrutura devem implementar.

Tipos de Ports:
- TicketRepository: persistência de chamados com controle de versão
- ComentarioRepository: persistência de comentários
- Notificador: envio de notificações (e-mail)

Implementações em memória (testes e modo local) ficam no final
do módulo.

Princípio:
    Core define interfaces → Adapters implementam
    Dependências sempre apontam para o Core
"""

from copy import deepcopy
from typing import Dict, List, Optional, Protocol, Sequence, runtime_checkable

from src.core.shared.exceptions import ConcurrencyError, EntityNotFoundError
from src.core.usuarios.entities import UsuarioEntity

from .entities import ComentarioEntity, TicketEntity
from .valores import TicketStatus


@runtime_checkable
class TicketRepository(Protocol):
    """
    Interface para persistência de Tickets.

    Implementações:
    - DjangoTicketRepository (PostgreSQL/SQLite via ORM)
    - InMemoryTicketRepository (testes)

    Toda alteração de chamado existente passa por atualizar(), que só
    grava se a versão persistida ainda for a lida pelo use case.
    """

    def save(self, ticket: TicketEntity) -> None:
        """Insere chamado novo."""
        ...

    def atualizar(self, ticket: TicketEntity, versao_esperada: int) -> None:
        """
        Grava alterações se a versão armazenada for versao_esperada.

        Em caso de sucesso ticket.versao passa a versao_esperada + 1.

        Raises:
            ConcurrencyError: Se outro processo alterou o chamado
            EntityNotFoundError: Se o chamado não existe mais
        """
        ...

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        ...

    def list_all(self) -> List[TicketEntity]:
        ...

    def list_by_status(self, status: TicketStatus) -> List[TicketEntity]:
        ...

    def list_fila_tecnico(self, tecnico_id: str) -> List[TicketEntity]:
        """Chamados atribuídos ao técnico ou ainda sem técnico."""
        ...

    def proximo_numero(self) -> int:
        """Próximo número público (maior existente + 1)."""
        ...


@runtime_checkable
class ComentarioRepository(Protocol):
    def add(self, comentario: ComentarioEntity) -> None:
        ...

    def list_by_ticket(self, ticket_id: str) -> List[ComentarioEntity]:
        """Comentários do chamado, mais antigos primeiro."""
        ...


@runtime_checkable
class Notificador(Protocol):
    """
    Interface de notificação.

    Cada método devolve True em caso de sucesso e nunca lança
    exceção: falhas são registradas pela implementação.

    Implementações:
    - DjangoEmailNotificador (django.core.mail)
    - NotificadorNulo (testes e ambientes sem e-mail)
    """

    def notificar_criacao(self, ticket: Dict) -> bool:
        ...

    def notificar_criacao_equipe(self, ticket: Dict, equipe: Sequence[UsuarioEntity]) -> bool:
        ...

    def notificar_atribuicao(self, ticket: Dict, tecnico: Dict) -> bool:
        ...

    def notificar_comentario(self, ticket: Dict, autor_nome: str) -> bool:
        ...

    def notificar_prioridade(self, ticket: Dict, nova_prioridade: str, alterado_por: str) -> bool:
        ...

    def notificar_resolucao(self, ticket: Dict, resolvido_por: str) -> bool:
        ...


# =============================================================================
# Implementações em memória
# =============================================================================

class InMemoryTicketRepository:
    """
    Implementação em memória do TicketRepository.

    Guarda cópias das entidades: alterações só valem depois de
    save()/atualizar(), como no banco.

    Example:
        repo = InMemoryTicketRepository()
        repo.save(ticket)
        found = repo.get_by_id(ticket.id)
    """

    def __init__(self):
        self._tickets: Dict[str, TicketEntity] = {}

    def save(self, ticket: TicketEntity) -> None:
        self._tickets[ticket.id] = deepcopy(ticket)

    def atualizar(self, ticket: TicketEntity, versao_esperada: int) -> None:
        armazenado = self._tickets.get(ticket.id)
        if armazenado is None:
            raise EntityNotFoundError(
                f"Ticket {ticket.id} não encontrado",
                entity_type="Ticket",
                entity_id=ticket.id,
            )
        if armazenado.versao != versao_esperada:
            raise ConcurrencyError(
                f"Chamado #{ticket.numero} foi alterado por outro processo"
            )

        ticket.versao = versao_esperada + 1
        self._tickets[ticket.id] = deepcopy(ticket)

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        ticket = self._tickets.get(ticket_id)
        return deepcopy(ticket) if ticket else None

    def list_all(self) -> List[TicketEntity]:
        return [deepcopy(t) for t in self._tickets.values()]

    def list_by_status(self, status: TicketStatus) -> List[TicketEntity]:
        return [deepcopy(t) for t in self._tickets.values() if t.status == status]

    def list_fila_tecnico(self, tecnico_id: str) -> List[TicketEntity]:
        return [
            deepcopy(t)
            for t in self._tickets.values()
            if t.atribuido_a_id in (tecnico_id, None)
        ]

    def proximo_numero(self) -> int:
        return max((t.numero for t in self._tickets.values()), default=0) + 1


class InMemoryComentarioRepository:
    def __init__(self):
        self._comentarios: List[ComentarioEntity] = []

    def add(self, comentario: ComentarioEntity) -> None:
        self._comentarios.append(deepcopy(comentario))

    def list_by_ticket(self, ticket_id: str) -> List[ComentarioEntity]:
        comentarios = [deepcopy(c) for c in self._comentarios if c.ticket_id == ticket_id]
        return sorted(comentarios, key=lambda c: c.criado_em)


class NotificadorNulo:
    """Notificador que só registra as chamadas (testes e modo sem e-mail)."""

    def __init__(self, sucesso: bool = True):
        self.sucesso = sucesso
        self.chamadas: List[tuple] = []

    def _registrar(self, metodo: str, *args) -> bool:
        self.chamadas.append((metodo, *args))
        return self.sucesso

    def notificar_criacao(self, ticket):
        return self._registrar("criacao", ticket)

    def notificar_criacao_equipe(self, ticket, equipe):
        return self._registrar("criacao_equipe", ticket, list(equipe))

    def notificar_atribuicao(self, ticket, tecnico):
        return self._registrar("atribuicao", ticket, tecnico)

    def notificar_comentario(self, ticket, autor_nome):
        return self._registrar("comentario", ticket, autor_nome)

    def notificar_prioridade(self, ticket, nova_prioridade, alterado_por):
        return self._registrar("prioridade", ticket, nova_prioridade, alterado_por)

    def notificar_resolucao(self, ticket, resolvido_por):
        return self._registrar("resolucao", ticket, resolvido_por)

    def metodos_chamados(self) -> List[str]:
        return [chamada[0] for chamada in self.chamadas]
