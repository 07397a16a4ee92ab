"""
Data Transfer Objects (DTOs) do Domínio de Tickets.

DTOs são estruturas simples para transportar dados entre camadas,
evitando vazamento das entidades para as views e para os eventos.

Tipos de DTOs:
- Input DTOs: dados de entrada já validados estruturalmente (Forms/API)
- Query DTOs: filtros de listagem e de relatório
- Output DTOs: dados formatados para resposta e para snapshots de eventos
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional

from src.core.usuarios.dtos import UsuarioOutputDTO

from .entities import TicketEntity, ComentarioEntity
from .metricas import EstatisticasTickets, calcular_intervalos


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CriarTicketInputDTO:
    """
    DTO de entrada para abrir chamado.

    Attributes:
        titulo: Título do chamado
        descricao: Descrição detalhada
        setor: Setor do solicitante
        tipo_problema: Categoria do problema (Hardware, Rede, ...)
        solicitante_nome: Nome de quem abriu
        solicitante_email: E-mail para as notificações
        anexos: Referências de arquivos já armazenados
    """

    titulo: str
    descricao: str
    setor: str
    tipo_problema: str
    solicitante_nome: str
    solicitante_email: str
    anexos: tuple = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "titulo": self.titulo,
            "descricao": self.descricao,
            "setor": self.setor,
            "tipo_problema": self.tipo_problema,
            "solicitante_nome": self.solicitante_nome,
            "solicitante_email": self.solicitante_email,
            "anexos": list(self.anexos),
        }


@dataclass(frozen=True)
class AtribuirTicketInputDTO:
    ticket_id: str
    tecnico_id: str
    papel: str = "technician"


@dataclass(frozen=True)
class DesatribuirTicketInputDTO:
    ticket_id: str
    papel: str = "technician"


@dataclass(frozen=True)
class AlterarStatusInputDTO:
    """
    DTO de entrada para alterar status.

    Attributes:
        ticket_id: ID do chamado
        novo_status: waiting, open, in_progress ou resolved
        papel: Papel de quem altera
        alterado_por: Nome exibido na notificação de resolução
    """

    ticket_id: str
    novo_status: str
    papel: str = "technician"
    alterado_por: str = "Equipe Técnica"


@dataclass(frozen=True)
class AlterarPrioridadeInputDTO:
    """
    DTO de entrada para alterar prioridade.

    Attributes:
        ticket_id: ID do chamado
        nova_prioridade: low, medium ou high
        papel: Papel de quem altera
        alterado_por: Nome exibido na notificação
    """

    ticket_id: str
    nova_prioridade: str
    papel: str = "technician"
    alterado_por: str = "Sistema"


@dataclass(frozen=True)
class AdicionarComentarioInputDTO:
    ticket_id: str
    conteudo: str
    autor_nome: str
    papel: str
    anexos: tuple = field(default_factory=tuple)


# =============================================================================
# QUERY DTOs
# =============================================================================

@dataclass(frozen=True)
class ListarTicketsQueryDTO:
    """
    Filtros de listagem.

    Attributes:
        status: Apenas chamados neste status
        tecnico_id: Fila do técnico (atribuídos a ele e ainda sem técnico)
    """

    status: Optional[str] = None
    tecnico_id: Optional[str] = None


@dataclass(frozen=True)
class FiltroRelatorioDTO:
    """
    Filtros de relatório.

    Attributes:
        data_inicio: Primeiro dia (inclusive) de criação
        data_fim: Último dia (inclusive) de criação
        setor: Setor, sem diferenciar maiúsculas
    """

    data_inicio: Optional[date] = None
    data_fim: Optional[date] = None
    setor: Optional[str] = None


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

def _iso(valor: Optional[datetime]) -> Optional[str]:
    return valor.isoformat() if valor else None


@dataclass
class TicketOutputDTO:
    """
    DTO de saída com os dados do chamado e seus intervalos em minutos.

    Também é o snapshot carregado pelos eventos de domínio (to_dict).
    """

    id: str
    numero: int
    titulo: str
    descricao: str
    setor: str
    tipo_problema: str
    status: str
    prioridade: str
    solicitante_nome: str
    solicitante_email: str
    atribuido_a_id: Optional[str]
    criado_em: Optional[datetime]
    aceito_em: Optional[datetime]
    resolvido_em: Optional[datetime]
    atualizado_em: Optional[datetime]
    anexos: List[str] = field(default_factory=list)
    versao: int = 1
    tempo_espera_minutos: Optional[float] = None
    tempo_trabalho_minutos: Optional[float] = None
    tempo_total_minutos: Optional[float] = None

    @classmethod
    def from_entity(cls, entity: TicketEntity) -> "TicketOutputDTO":
        intervalos = calcular_intervalos(entity)
        return cls(
            id=entity.id,
            numero=entity.numero,
            titulo=entity.titulo,
            descricao=entity.descricao,
            setor=entity.setor,
            tipo_problema=entity.tipo_problema,
            status=entity.status.value,
            prioridade=entity.prioridade.value,
            solicitante_nome=entity.solicitante_nome,
            solicitante_email=entity.solicitante_email,
            atribuido_a_id=entity.atribuido_a_id,
            criado_em=entity.criado_em,
            aceito_em=entity.aceito_em,
            resolvido_em=entity.resolvido_em,
            atualizado_em=entity.atualizado_em,
            anexos=list(entity.anexos),
            versao=entity.versao,
            tempo_espera_minutos=intervalos.tempo_espera,
            tempo_trabalho_minutos=intervalos.tempo_trabalho,
            tempo_total_minutos=intervalos.tempo_total,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "numero": self.numero,
            "titulo": self.titulo,
            "descricao": self.descricao,
            "setor": self.setor,
            "tipo_problema": self.tipo_problema,
            "status": self.status,
            "prioridade": self.prioridade,
            "solicitante_nome": self.solicitante_nome,
            "solicitante_email": self.solicitante_email,
            "atribuido_a_id": self.atribuido_a_id,
            "criado_em": _iso(self.criado_em),
            "aceito_em": _iso(self.aceito_em),
            "resolvido_em": _iso(self.resolvido_em),
            "atualizado_em": _iso(self.atualizado_em),
            "anexos": list(self.anexos),
            "versao": self.versao,
            "tempo_espera_minutos": self.tempo_espera_minutos,
            "tempo_trabalho_minutos": self.tempo_trabalho_minutos,
            "tempo_total_minutos": self.tempo_total_minutos,
        }


@dataclass
class ComentarioOutputDTO:
    id: str
    ticket_id: str
    conteudo: str
    autor_nome: str
    tipo_autor: str
    anexos: List[str]
    criado_em: Optional[datetime]

    @classmethod
    def from_entity(cls, entity: ComentarioEntity) -> "ComentarioOutputDTO":
        return cls(
            id=entity.id,
            ticket_id=entity.ticket_id,
            conteudo=entity.conteudo,
            autor_nome=entity.autor_nome,
            tipo_autor=entity.tipo_autor.value,
            anexos=list(entity.anexos),
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ticket_id": self.ticket_id,
            "conteudo": self.conteudo,
            "autor_nome": self.autor_nome,
            "tipo_autor": self.tipo_autor,
            "anexos": list(self.anexos),
            "criado_em": _iso(self.criado_em),
        }


@dataclass
class TicketDetalhesOutputDTO:
    """Chamado + comentários (mais antigos primeiro) + técnico atribuído."""

    ticket: TicketOutputDTO
    comentarios: List[ComentarioOutputDTO] = field(default_factory=list)
    atribuido_a: Optional[UsuarioOutputDTO] = None

    def to_dict(self) -> dict:
        resultado = self.ticket.to_dict()
        resultado["comentarios"] = [c.to_dict() for c in self.comentarios]
        resultado["atribuido_a"] = self.atribuido_a.to_dict() if self.atribuido_a else None
        return resultado


@dataclass
class EstatisticasOutputDTO:
    """Estatísticas agregadas + distribuição percentual de prioridades."""

    estatisticas: EstatisticasTickets
    distribuicao_prioridade: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        resultado = self.estatisticas.to_dict()
        resultado["distribuicao_prioridade"] = dict(self.distribuicao_prioridade)
        return resultado
