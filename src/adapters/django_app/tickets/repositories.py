"""
Repositórios Django para persistência de Tickets.

Implementam as interfaces (Ports) definidas no Core.
São DRIVEN ADAPTERS - acionados pelo Core em resposta a operações.

Responsabilidades:
- Implementar TicketRepository e ComentarioRepository
- Mapear entities para models e vice-versa
- Gravar alterações com verificação de versão (UPDATE condicional)
- Traduzir falhas do banco em exceções de domínio

Princípios:
- Repository não contém lógica de negócio
- Usa Mapper para conversões
"""

from typing import List, Optional
import logging

from django.db import transaction
from django.db.models import F, Max, Q

from src.core.shared.exceptions import ConcurrencyError, EntityNotFoundError
from src.core.tickets.entities import ComentarioEntity, TicketEntity
from src.core.tickets.valores import TicketStatus

from ..shared.database import erros_de_banco
from .mappers import ComentarioMapper, TicketMapper
from .models import ComentarioModel, TicketModel

logger = logging.getLogger(__name__)


class DjangoTicketRepository:
    """
    Implementação Django do TicketRepository.

    atualizar() executa
        UPDATE tickets SET ..., versao = versao + 1
        WHERE id = %s AND versao = %s
    e trata zero linhas afetadas como conflito.

    Example:
        repo = DjangoTicketRepository()
        repo.save(ticket)

        ticket = repo.get_by_id(ticket.id)
        versao = ticket.versao
        ticket.atribuir_a(tecnico.id, PapelAtor.TECNICO, clock.agora())
        repo.atualizar(ticket, versao)
    """

    def __init__(self):
        self._mapper = TicketMapper()

    def save(self, ticket: TicketEntity) -> None:
        """
        Insere chamado novo.

        Raises:
            ConcurrencyError: Se o número já foi usado por outra criação
        """
        logger.debug(f"Saving ticket: {ticket.id}")

        with erros_de_banco("salvar chamado", conflito=f"Número {ticket.numero} já utilizado, tente novamente"):
            with transaction.atomic():
                self._mapper.to_model(ticket).save(force_insert=True)

        logger.info(f"Ticket saved: #{ticket.numero} ({ticket.id})")

    def atualizar(self, ticket: TicketEntity, versao_esperada: int) -> None:
        with erros_de_banco("atualizar chamado"):
            linhas = TicketModel.objects.filter(
                id=ticket.id,
                versao=versao_esperada,
            ).update(
                versao=F('versao') + 1,
                **self._mapper.campos_atualizados(ticket),
            )

            if linhas == 0:
                if not TicketModel.objects.filter(id=ticket.id).exists():
                    raise EntityNotFoundError(
                        f"Ticket {ticket.id} não encontrado",
                        entity_type="Ticket",
                        entity_id=ticket.id,
                    )
                logger.warning(
                    f"Conflito de versão no chamado #{ticket.numero} "
                    f"(esperada {versao_esperada})"
                )
                raise ConcurrencyError(
                    f"Chamado #{ticket.numero} foi alterado por outro processo"
                )

        ticket.versao = versao_esperada + 1
        logger.debug(f"Ticket updated: #{ticket.numero} v{ticket.versao}")

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        with erros_de_banco("buscar chamado"):
            model = TicketModel.objects.filter(id=ticket_id).first()

        if model is None:
            logger.debug(f"Ticket not found: {ticket_id}")
            return None
        return self._mapper.to_entity(model)

    def list_all(self) -> List[TicketEntity]:
        with erros_de_banco("listar chamados"):
            return self._mapper.to_entity_list(TicketModel.objects.all())

    def list_by_status(self, status: TicketStatus) -> List[TicketEntity]:
        with erros_de_banco("listar chamados"):
            return self._mapper.to_entity_list(
                TicketModel.objects.filter(status=status.value)
            )

    def list_fila_tecnico(self, tecnico_id: str) -> List[TicketEntity]:
        with erros_de_banco("listar chamados"):
            return self._mapper.to_entity_list(
                TicketModel.objects.filter(
                    Q(atribuido_a_id=tecnico_id) | Q(atribuido_a_id__isnull=True)
                )
            )

    def proximo_numero(self) -> int:
        with erros_de_banco("gerar número do chamado"):
            maior = TicketModel.objects.aggregate(maior=Max('numero'))['maior']
        return (maior or 0) + 1


class DjangoComentarioRepository:
    """Comentários são só inseridos e lidos."""

    def add(self, comentario: ComentarioEntity) -> None:
        with erros_de_banco("salvar comentário"):
            ComentarioMapper.to_model(comentario).save(force_insert=True)

    def list_by_ticket(self, ticket_id: str) -> List[ComentarioEntity]:
        with erros_de_banco("listar comentários"):
            models = ComentarioModel.objects.filter(ticket_id=ticket_id).order_by('criado_em')
            return [ComentarioMapper.to_entity(model) for model in models]
