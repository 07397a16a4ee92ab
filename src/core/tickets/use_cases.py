"""
Use Cases (Application Services) do Domínio de Tickets.

Este módulo contém os casos de uso da aplicação, que orquestram
a lógica de negócio coordenando entidades, repositórios e eventos.

Use Cases implementados:
- CriarTicketService: Abre novo chamado
- ObterTicketService: Chamado + comentários + técnico
- ListarTicketsService: Lista ordenada por prioridade
- AtribuirTicketService: Atribui chamado a técnico
- DesatribuirTicketService: Remove técnico do chamado
- AlterarStatusService: Altera status
- AlterarPrioridadeService: Altera prioridade
- AdicionarComentarioService: Adiciona comentário
- ObterEstatisticasService: Estatísticas agregadas
- ObterDesempenhoTecnicosService: Desempenho por técnico

Responsabilidades dos Use Cases:
- Converter strings de entrada em enums do domínio
- Coordenar entidades
- Gerenciar transações e versão otimista (via UoW e repositório)
- Disparar eventos de domínio (notificações saem dos handlers)
- Retornar DTOs de saída

Princípios:
- Um Use Case = Uma operação de negócio
- Dependências injetadas (DI), inclusive o relógio
- Sem lógica de infraestrutura
"""

from typing import List
import logging

from src.core.shared.clock import Clock
from src.core.shared.exceptions import EntityNotFoundError, ValidationError
from src.core.shared.interfaces import UnitOfWork
from src.core.shared.papeis import PapelAtor
from src.core.usuarios.dtos import UsuarioOutputDTO
from src.core.usuarios.ports import UsuarioRepository

from .dtos import (
    AdicionarComentarioInputDTO,
    AlterarPrioridadeInputDTO,
    AlterarStatusInputDTO,
    AtribuirTicketInputDTO,
    ComentarioOutputDTO,
    CriarTicketInputDTO,
    DesatribuirTicketInputDTO,
    EstatisticasOutputDTO,
    FiltroRelatorioDTO,
    ListarTicketsQueryDTO,
    TicketDetalhesOutputDTO,
    TicketOutputDTO,
)
from .entities import TicketEntity
from .events import (
    ComentarioAdicionadoEvent,
    TicketAtribuidoEvent,
    TicketCriadoEvent,
    TicketDesatribuidoEvent,
    TicketPrioridadeAlteradaEvent,
    TicketResolvidoEvent,
    TicketStatusAlteradoEvent,
)
from .metricas import (
    DesempenhoTecnico,
    calcular_desempenho_tecnicos,
    calcular_estatisticas,
    distribuicao_prioridade,
    filtrar_tickets,
    ordenar_tickets,
)
from .ports import ComentarioRepository, TicketRepository
from .valores import TicketPriority, TicketStatus

logger = logging.getLogger(__name__)

ALTERADO_POR_MAX_LENGTH = 100


def _obter_ou_falhar(ticket_repo: TicketRepository, ticket_id: str) -> TicketEntity:
    ticket = ticket_repo.get_by_id(ticket_id)
    if not ticket:
        raise EntityNotFoundError(
            f"Ticket {ticket_id} não encontrado",
            entity_type="Ticket",
            entity_id=ticket_id,
        )
    return ticket


def _snapshot(ticket: TicketEntity) -> dict:
    return TicketOutputDTO.from_entity(ticket).to_dict()


class CriarTicketService:
    """
    Use Case: Abrir um novo chamado.

    Fluxo:
    1. Reservar o próximo número público
    2. Criar entidade (status e prioridade AGUARDANDO)
    3. Persistir via repositório
    4. Disparar evento TicketCriado (confirmação + aviso à equipe)
    5. Retornar DTO de saída

    Example:
        service = CriarTicketService(ticket_repo, uow, clock)
        output = service.execute(CriarTicketInputDTO(
            titulo="Sem acesso à rede",
            descricao="Cabo desconectado na sala 12",
            setor="Financeiro",
            tipo_problema="Rede",
            solicitante_nome="Maria",
            solicitante_email="maria@empresa.com",
        ))
        print(output.numero)
    """

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork, clock: Clock):
        """
        Args:
            ticket_repo: Repositório para persistência
            uow: Unit of Work para transação atômica
            clock: Fonte dos timestamps
        """
        self.ticket_repo = ticket_repo
        self.uow = uow
        self.clock = clock

    def execute(self, input_dto: CriarTicketInputDTO) -> TicketOutputDTO:
        """
        Raises:
            ValidationError: Se dados inválidos
            ConcurrencyError: Se o número reservado foi usado por outra criação
        """
        with self.uow:
            ticket = TicketEntity.criar(
                numero=self.ticket_repo.proximo_numero(),
                titulo=input_dto.titulo,
                descricao=input_dto.descricao,
                setor=input_dto.setor,
                tipo_problema=input_dto.tipo_problema,
                solicitante_nome=input_dto.solicitante_nome,
                solicitante_email=input_dto.solicitante_email,
                agora=self.clock.agora(),
                anexos=list(input_dto.anexos),
            )

            self.ticket_repo.save(ticket)

            # Publicado após commit
            self.uow.publish_event(
                TicketCriadoEvent(aggregate_id=ticket.id, ticket=_snapshot(ticket))
            )

        logger.info(f"Chamado #{ticket.numero} criado ({ticket.setor})")
        return TicketOutputDTO.from_entity(ticket)


class ObterTicketService:
    """
    Use Case: Detalhes do chamado.

    O técnico atribuído pode ter sido removido; nesse caso
    atribuido_a fica None e atribuido_a_id é mantido.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        comentario_repo: ComentarioRepository,
        usuario_repo: UsuarioRepository,
    ):
        self.ticket_repo = ticket_repo
        self.comentario_repo = comentario_repo
        self.usuario_repo = usuario_repo

    def execute(self, ticket_id: str) -> TicketDetalhesOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se chamado não existe
        """
        ticket = _obter_ou_falhar(self.ticket_repo, ticket_id)

        comentarios = self.comentario_repo.list_by_ticket(ticket.id)

        atribuido_a = None
        if ticket.atribuido_a_id:
            tecnico = self.usuario_repo.get_by_id(ticket.atribuido_a_id)
            if tecnico:
                atribuido_a = UsuarioOutputDTO.from_entity(tecnico)

        return TicketDetalhesOutputDTO(
            ticket=TicketOutputDTO.from_entity(ticket),
            comentarios=[ComentarioOutputDTO.from_entity(c) for c in comentarios],
            atribuido_a=atribuido_a,
        )


class ListarTicketsService:
    """
    Use Case: Listar chamados.

    Ordenação: prioridade alta, média, baixa, depois os não triados;
    empates pelo mais recente.
    """

    def __init__(self, ticket_repo: TicketRepository):
        self.ticket_repo = ticket_repo

    def execute(self, query: ListarTicketsQueryDTO = None) -> List[TicketOutputDTO]:
        """
        Raises:
            ValidationError: Se filtro de status inválido
        """
        query = query or ListarTicketsQueryDTO()
        status = TicketStatus.from_string(query.status) if query.status else None

        if query.tecnico_id:
            tickets = self.ticket_repo.list_fila_tecnico(query.tecnico_id)
            if status:
                tickets = [t for t in tickets if t.status == status]
        elif status:
            tickets = self.ticket_repo.list_by_status(status)
        else:
            tickets = self.ticket_repo.list_all()

        return [TicketOutputDTO.from_entity(t) for t in ordenar_tickets(tickets)]


class AtribuirTicketService:
    """
    Use Case: Atribuir chamado a um técnico.

    Fluxo:
    1. Buscar chamado e técnico
    2. Executar atribuição na entidade (guards de papel/estado)
    3. Persistir com verificação de versão
    4. Disparar evento TicketAtribuido

    Duas atribuições simultâneas leem a mesma versão; só a primeira
    grava, a segunda recebe ConcurrencyError.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        usuario_repo: UsuarioRepository,
        uow: UnitOfWork,
        clock: Clock,
    ):
        self.ticket_repo = ticket_repo
        self.usuario_repo = usuario_repo
        self.uow = uow
        self.clock = clock

    def execute(self, input_dto: AtribuirTicketInputDTO) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se chamado ou técnico não existe
            BusinessRuleViolationError: Se papel/estado não permite
            ConcurrencyError: Se o chamado mudou desde a leitura
        """
        papel = PapelAtor.from_string(input_dto.papel)

        with self.uow:
            ticket = _obter_ou_falhar(self.ticket_repo, input_dto.ticket_id)

            tecnico = self.usuario_repo.get_by_id(input_dto.tecnico_id) if input_dto.tecnico_id else None
            if not tecnico:
                raise EntityNotFoundError(
                    f"Técnico {input_dto.tecnico_id} não encontrado",
                    entity_type="Usuario",
                    entity_id=input_dto.tecnico_id,
                )

            versao = ticket.versao
            ticket.atribuir_a(tecnico.id, papel, self.clock.agora())
            self.ticket_repo.atualizar(ticket, versao)

            self.uow.publish_event(
                TicketAtribuidoEvent(
                    aggregate_id=ticket.id,
                    ticket=_snapshot(ticket),
                    tecnico_id=tecnico.id,
                    tecnico_nome=tecnico.nome,
                    tecnico_email=tecnico.email,
                )
            )

        logger.info(f"Chamado #{ticket.numero} atribuído a {tecnico.username}")
        return TicketOutputDTO.from_entity(ticket)


class DesatribuirTicketService:
    """Use Case: Remover técnico; o chamado volta para ABERTO."""

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork, clock: Clock):
        self.ticket_repo = ticket_repo
        self.uow = uow
        self.clock = clock

    def execute(self, input_dto: DesatribuirTicketInputDTO) -> TicketOutputDTO:
        papel = PapelAtor.from_string(input_dto.papel)

        with self.uow:
            ticket = _obter_ou_falhar(self.ticket_repo, input_dto.ticket_id)

            anterior = ticket.atribuido_a_id
            versao = ticket.versao
            ticket.desatribuir(papel, self.clock.agora())
            self.ticket_repo.atualizar(ticket, versao)

            self.uow.publish_event(
                TicketDesatribuidoEvent(
                    aggregate_id=ticket.id,
                    ticket=_snapshot(ticket),
                    tecnico_anterior_id=anterior,
                )
            )

        logger.info(f"Chamado #{ticket.numero} desatribuído")
        return TicketOutputDTO.from_entity(ticket)


class AlterarStatusService:
    """
    Use Case: Alterar status.

    Eventos:
    - TicketResolvido quando o chamado passa a resolvido
    - TicketStatusAlterado nas demais mudanças
    - nenhum quando o status pedido é o atual
    """

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork, clock: Clock):
        self.ticket_repo = ticket_repo
        self.uow = uow
        self.clock = clock

    def execute(self, input_dto: AlterarStatusInputDTO) -> TicketOutputDTO:
        """
        Raises:
            ValidationError: Se status desconhecido
            EntityNotFoundError: Se chamado não existe
            BusinessRuleViolationError: Se papel/transição não permitidos
            ConcurrencyError: Se o chamado mudou desde a leitura
        """
        novo_status = TicketStatus.from_string(input_dto.novo_status)
        papel = PapelAtor.from_string(input_dto.papel)
        alterado_por = (input_dto.alterado_por or "Equipe Técnica")[:ALTERADO_POR_MAX_LENGTH]

        with self.uow:
            ticket = _obter_ou_falhar(self.ticket_repo, input_dto.ticket_id)

            anterior = ticket.status
            versao = ticket.versao
            if not ticket.alterar_status(novo_status, papel, self.clock.agora()):
                return TicketOutputDTO.from_entity(ticket)

            self.ticket_repo.atualizar(ticket, versao)

            if novo_status == TicketStatus.RESOLVIDO:
                evento = TicketResolvidoEvent(
                    aggregate_id=ticket.id,
                    ticket=_snapshot(ticket),
                    status_anterior=anterior.value,
                    resolvido_por=alterado_por,
                )
            else:
                evento = TicketStatusAlteradoEvent(
                    aggregate_id=ticket.id,
                    ticket=_snapshot(ticket),
                    status_anterior=anterior.value,
                    status_novo=novo_status.value,
                    alterado_por=alterado_por,
                )
            self.uow.publish_event(evento)

        logger.info(
            f"Chamado #{ticket.numero}: status {anterior.value} -> {novo_status.value}"
        )
        return TicketOutputDTO.from_entity(ticket)


class AlterarPrioridadeService:
    """
    Use Case: Alterar prioridade.

    O evento (e a notificação) só acontece quando o valor muda.
    """

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork, clock: Clock):
        self.ticket_repo = ticket_repo
        self.uow = uow
        self.clock = clock

    def execute(self, input_dto: AlterarPrioridadeInputDTO) -> TicketOutputDTO:
        """
        Raises:
            ValidationError: Se prioridade não é low, medium ou high
            EntityNotFoundError: Se chamado não existe
            BusinessRuleViolationError: Se papel/estado não permitem
            ConcurrencyError: Se o chamado mudou desde a leitura
        """
        nova = TicketPriority.from_string(input_dto.nova_prioridade)
        papel = PapelAtor.from_string(input_dto.papel)
        alterado_por = (input_dto.alterado_por or "Sistema")[:ALTERADO_POR_MAX_LENGTH]

        with self.uow:
            ticket = _obter_ou_falhar(self.ticket_repo, input_dto.ticket_id)

            anterior = ticket.prioridade
            versao = ticket.versao
            if not ticket.alterar_prioridade(nova, papel, self.clock.agora()):
                return TicketOutputDTO.from_entity(ticket)

            self.ticket_repo.atualizar(ticket, versao)

            self.uow.publish_event(
                TicketPrioridadeAlteradaEvent(
                    aggregate_id=ticket.id,
                    ticket=_snapshot(ticket),
                    prioridade_anterior=anterior.value,
                    prioridade_nova=nova.value,
                    alterado_por=alterado_por,
                )
            )

        logger.info(
            f"Chamado #{ticket.numero}: prioridade {anterior.value} -> {nova.value}"
        )
        return TicketOutputDTO.from_entity(ticket)


class AdicionarComentarioService:
    """
    Use Case: Comentar no chamado.

    Solicitantes só comentam antes do atendimento começar; técnicos
    até a resolução; administradores sempre.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        comentario_repo: ComentarioRepository,
        uow: UnitOfWork,
        clock: Clock,
    ):
        self.ticket_repo = ticket_repo
        self.comentario_repo = comentario_repo
        self.uow = uow
        self.clock = clock

    def execute(self, input_dto: AdicionarComentarioInputDTO) -> ComentarioOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se chamado não existe
            BusinessRuleViolationError: Se o papel não pode comentar agora
            ValidationError: Se conteúdo vazio
        """
        papel = PapelAtor.from_string(input_dto.papel)

        with self.uow:
            ticket = _obter_ou_falhar(self.ticket_repo, input_dto.ticket_id)

            comentario = ticket.comentar(
                conteudo=input_dto.conteudo,
                autor_nome=input_dto.autor_nome,
                papel=papel,
                agora=self.clock.agora(),
                anexos=list(input_dto.anexos),
            )
            self.comentario_repo.add(comentario)

            self.uow.publish_event(
                ComentarioAdicionadoEvent(
                    aggregate_id=ticket.id,
                    ticket=_snapshot(ticket),
                    comentario_id=comentario.id,
                    autor_nome=comentario.autor_nome,
                    papel_autor=papel.value,
                )
            )

        return ComentarioOutputDTO.from_entity(comentario)


# =============================================================================
# Relatórios
# =============================================================================

def _validar_periodo(filtro: FiltroRelatorioDTO) -> None:
    if filtro.data_inicio and filtro.data_fim and filtro.data_inicio > filtro.data_fim:
        raise ValidationError(
            "Data inicial deve ser anterior ou igual à data final",
            field="data_inicio",
        )


class ObterEstatisticasService:
    """
    Use Case: Estatísticas do atendimento.

    Filtros (período por dia de criação no fuso de referência e setor)
    são aplicados antes da agregação.
    """

    def __init__(self, ticket_repo: TicketRepository, clock: Clock):
        self.ticket_repo = ticket_repo
        self.clock = clock

    def execute(self, filtro: FiltroRelatorioDTO = None) -> EstatisticasOutputDTO:
        filtro = filtro or FiltroRelatorioDTO()
        _validar_periodo(filtro)

        tickets = filtrar_tickets(
            self.ticket_repo.list_all(),
            self.clock.fuso,
            data_inicio=filtro.data_inicio,
            data_fim=filtro.data_fim,
            setor=filtro.setor,
        )
        estatisticas = calcular_estatisticas(tickets)

        return EstatisticasOutputDTO(
            estatisticas=estatisticas,
            distribuicao_prioridade=distribuicao_prioridade(estatisticas),
        )


class ObterDesempenhoTecnicosService:
    """Use Case: Desempenho por técnico (mesmos filtros das estatísticas)."""

    def __init__(self, ticket_repo: TicketRepository, usuario_repo: UsuarioRepository, clock: Clock):
        self.ticket_repo = ticket_repo
        self.usuario_repo = usuario_repo
        self.clock = clock

    def execute(self, filtro: FiltroRelatorioDTO = None) -> List[DesempenhoTecnico]:
        filtro = filtro or FiltroRelatorioDTO()
        _validar_periodo(filtro)

        tickets = filtrar_tickets(
            self.ticket_repo.list_all(),
            self.clock.fuso,
            data_inicio=filtro.data_inicio,
            data_fim=filtro.data_fim,
            setor=filtro.setor,
        )
        nomes = {u.id: u.nome for u in self.usuario_repo.list_equipe()}

        return calcular_desempenho_tecnicos(tickets, nomes)
