"""
Motor de Métricas de Atendimento.

Calcula, a partir dos timestamps dos chamados:
- Intervalos por chamado (espera, trabalho, total) em minutos
- Estatísticas agregadas (contagens e médias)
- Desempenho por técnico
- Distribuição percentual de prioridades

Regras:
- Um chamado sem um dos extremos do intervalo fica fora da média
  correspondente (não conta como zero)
- Médias arredondadas para uma casa decimal; 0 quando não há dados
- Filtros de relatório são aplicados antes da agregação
"""

from collections import defaultdict
from dataclasses import dataclass, field, asdict
from datetime import date, datetime, tzinfo
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Mapping, Optional
import logging

from .entities import TicketEntity
from .valores import TicketPriority, TicketStatus

logger = logging.getLogger(__name__)

NOME_TECNICO_PADRAO = "Técnico"

PRIORIDADES_RELATORIO = (TicketPriority.ALTA, TicketPriority.MEDIA, TicketPriority.BAIXA)


def arredondar(valor: float, casas: int = 1) -> float:
    """Arredonda com meio para cima (2.25 -> 2.3), sem o arredondamento bancário de round()."""
    quantum = Decimal(1).scaleb(-casas)
    return float(Decimal(str(valor)).quantize(quantum, rounding=ROUND_HALF_UP))


def percentual(parte: int, total: int) -> int:
    if total <= 0:
        return 0
    return int(arredondar(parte / total * 100, casas=0))


def _media(valores: List[float]) -> float:
    if not valores:
        return 0
    return arredondar(sum(valores) / len(valores))


def _minutos(inicio: Optional[datetime], fim: Optional[datetime]) -> Optional[float]:
    if inicio is None or fim is None:
        return None
    return (fim - inicio).total_seconds() / 60


# =============================================================================
# Intervalos por chamado
# =============================================================================

@dataclass(frozen=True)
class IntervalosTicket:
    """Intervalos de um chamado em minutos (None quando falta um extremo)."""

    tempo_espera: Optional[float] = None
    tempo_trabalho: Optional[float] = None
    tempo_total: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "tempo_espera_minutos": self.tempo_espera,
            "tempo_trabalho_minutos": self.tempo_trabalho,
            "tempo_total_minutos": self.tempo_total,
        }


def calcular_intervalos(ticket: TicketEntity) -> IntervalosTicket:
    """
    tempo_espera = aceito_em - criado_em
    tempo_trabalho = resolvido_em - aceito_em
    tempo_total = resolvido_em - criado_em
    """
    problemas = ticket.problemas_de_integridade()
    if problemas:
        logger.warning(
            f"Chamado #{ticket.numero} com timestamps inconsistentes: {', '.join(problemas)}"
        )

    return IntervalosTicket(
        tempo_espera=_minutos(ticket.criado_em, ticket.aceito_em),
        tempo_trabalho=_minutos(ticket.aceito_em, ticket.resolvido_em),
        tempo_total=_minutos(ticket.criado_em, ticket.resolvido_em),
    )


# =============================================================================
# Estatísticas agregadas
# =============================================================================

@dataclass
class EstatisticasTickets:
    total: int = 0
    por_status: Dict[str, int] = field(default_factory=dict)
    por_prioridade: Dict[str, int] = field(default_factory=dict)
    tempo_medio_resolucao_minutos: float = 0
    tempo_medio_espera_minutos: float = 0
    tempo_total_resolucao_minutos: float = 0

    def to_dict(self) -> dict:
        return asdict(self)


def calcular_estatisticas(tickets: Iterable[TicketEntity]) -> EstatisticasTickets:
    """
    Agrega contagens e médias sobre o conjunto recebido.

    - tempo_medio_resolucao_minutos: média de tempo_trabalho dos
      chamados com aceito_em e resolvido_em
    - tempo_medio_espera_minutos: média de tempo_espera dos chamados aceitos
    - tempo_total_resolucao_minutos: média de tempo_total dos resolvidos
    """
    tickets = list(tickets)

    por_status = {status.value: 0 for status in TicketStatus}
    por_prioridade = {prioridade.value: 0 for prioridade in PRIORIDADES_RELATORIO}

    esperas: List[float] = []
    trabalhos: List[float] = []
    totais: List[float] = []

    for ticket in tickets:
        por_status[ticket.status.value] += 1
        if ticket.prioridade in PRIORIDADES_RELATORIO:
            por_prioridade[ticket.prioridade.value] += 1

        intervalos = calcular_intervalos(ticket)
        if intervalos.tempo_espera is not None:
            esperas.append(intervalos.tempo_espera)
        if intervalos.tempo_trabalho is not None:
            trabalhos.append(intervalos.tempo_trabalho)
        if intervalos.tempo_total is not None:
            totais.append(intervalos.tempo_total)

    return EstatisticasTickets(
        total=len(tickets),
        por_status=por_status,
        por_prioridade=por_prioridade,
        tempo_medio_resolucao_minutos=_media(trabalhos),
        tempo_medio_espera_minutos=_media(esperas),
        tempo_total_resolucao_minutos=_media(totais),
    )


def distribuicao_prioridade(estatisticas: EstatisticasTickets) -> Dict[str, int]:
    """Percentual de cada prioridade sobre o total (0 quando não há chamados)."""
    return {
        prioridade.value: percentual(
            estatisticas.por_prioridade.get(prioridade.value, 0),
            estatisticas.total,
        )
        for prioridade in PRIORIDADES_RELATORIO
    }


# =============================================================================
# Desempenho por técnico
# =============================================================================

@dataclass
class DesempenhoTecnico:
    tecnico_id: str
    tecnico_nome: str
    total_tickets: int = 0
    tickets_resolvidos: int = 0
    tempo_medio_resolucao_minutos: float = 0
    taxa_resolucao: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def calcular_desempenho_tecnicos(
    tickets: Iterable[TicketEntity],
    nomes: Mapping[str, str],
) -> List[DesempenhoTecnico]:
    """
    Agrupa chamados por técnico atribuído.

    Chamados sem técnico ficam de fora. O tempo médio considera só
    os chamados resolvidos do grupo que têm aceito_em e resolvido_em.

    Args:
        tickets: Chamados já filtrados
        nomes: tecnico_id -> nome; técnicos removidos recebem o nome padrão
    """
    grupos: Dict[str, List[TicketEntity]] = defaultdict(list)
    for ticket in tickets:
        if ticket.atribuido_a_id:
            grupos[ticket.atribuido_a_id].append(ticket)

    resultado = []
    for tecnico_id, grupo in grupos.items():
        resolvidos = [t for t in grupo if t.status == TicketStatus.RESOLVIDO]
        trabalhos = [
            intervalos.tempo_trabalho
            for intervalos in (calcular_intervalos(t) for t in resolvidos)
            if intervalos.tempo_trabalho is not None
        ]
        resultado.append(
            DesempenhoTecnico(
                tecnico_id=tecnico_id,
                tecnico_nome=nomes.get(tecnico_id) or NOME_TECNICO_PADRAO,
                total_tickets=len(grupo),
                tickets_resolvidos=len(resolvidos),
                tempo_medio_resolucao_minutos=_media(trabalhos),
                taxa_resolucao=percentual(len(resolvidos), len(grupo)),
            )
        )

    resultado.sort(key=lambda d: (d.tecnico_nome.lower(), d.tecnico_id))
    return resultado


# =============================================================================
# Filtros e ordenação
# =============================================================================

def filtrar_tickets(
    tickets: Iterable[TicketEntity],
    fuso: tzinfo,
    data_inicio: Optional[date] = None,
    data_fim: Optional[date] = None,
    setor: Optional[str] = None,
) -> List[TicketEntity]:
    """
    Restringe o conjunto antes da agregação.

    Datas comparadas por dia de calendário no fuso de referência,
    intervalo inclusivo. Setor comparado sem diferenciar maiúsculas.
    """
    setor_normalizado = setor.strip().casefold() if setor and setor.strip() else None

    selecionados = []
    for ticket in tickets:
        if data_inicio or data_fim:
            if ticket.criado_em is None:
                continue
            dia = ticket.criado_em.astimezone(fuso).date()
            if data_inicio and dia < data_inicio:
                continue
            if data_fim and dia > data_fim:
                continue

        if setor_normalizado and ticket.setor.strip().casefold() != setor_normalizado:
            continue

        selecionados.append(ticket)

    return selecionados


def ordenar_tickets(tickets: Iterable[TicketEntity]) -> List[TicketEntity]:
    """Prioridade alta, média, baixa, depois as não triadas; empates pelo mais recente."""
    def _timestamp(ticket: TicketEntity) -> float:
        return ticket.criado_em.timestamp() if ticket.criado_em else float("-inf")

    mais_recentes = sorted(tickets, key=_timestamp, reverse=True)
    return sorted(mais_recentes, key=lambda t: t.prioridade.rank)
