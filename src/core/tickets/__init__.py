"""
Domínio de Tickets - Central de Chamados.

Este módulo contém toda a lógica de negócio relacionada aos chamados
de suporte, incluindo:
- Entidades (TicketEntity, ComentarioEntity) e valores (status, prioridade)
- Políticas de ciclo de vida por papel (politicas.py)
- Motor de métricas (metricas.py)
- Use Cases (criar, atribuir, alterar status/prioridade, comentar, relatórios)
- Domain Events e o handler que os traduz em notificações
- Ports (repositórios e notificador)

Características do Domínio:
- Transições de status controladas por papel
- Versão otimista: alterações concorrentes geram ConcurrencyError
- Notificações disparadas por eventos, depois do commit
"""

from .valores import TicketStatus, TicketPriority, TipoAutor
from .entities import TicketEntity, ComentarioEntity
from .events import (
    TicketCriadoEvent,
    TicketAtribuidoEvent,
    TicketDesatribuidoEvent,
    TicketStatusAlteradoEvent,
    TicketResolvidoEvent,
    TicketPrioridadeAlteradaEvent,
    ComentarioAdicionadoEvent,
)
from .dtos import (
    CriarTicketInputDTO,
    AtribuirTicketInputDTO,
    DesatribuirTicketInputDTO,
    AlterarStatusInputDTO,
    AlterarPrioridadeInputDTO,
    AdicionarComentarioInputDTO,
    ListarTicketsQueryDTO,
    FiltroRelatorioDTO,
    TicketOutputDTO,
    ComentarioOutputDTO,
    TicketDetalhesOutputDTO,
    EstatisticasOutputDTO,
)
from .ports import TicketRepository, ComentarioRepository, Notificador
from .use_cases import (
    CriarTicketService,
    ObterTicketService,
    ListarTicketsService,
    AtribuirTicketService,
    DesatribuirTicketService,
    AlterarStatusService,
    AlterarPrioridadeService,
    AdicionarComentarioService,
    ObterEstatisticasService,
    ObterDesempenhoTecnicosService,
)
from .notificacoes import NotificacaoEventHandler

__all__ = [
    # Valores
    "TicketStatus",
    "TicketPriority",
    "TipoAutor",
    # Entities
    "TicketEntity",
    "ComentarioEntity",
    # Events
    "TicketCriadoEvent",
    "TicketAtribuidoEvent",
    "TicketDesatribuidoEvent",
    "TicketStatusAlteradoEvent",
    "TicketResolvidoEvent",
    "TicketPrioridadeAlteradaEvent",
    "ComentarioAdicionadoEvent",
    # DTOs
    "CriarTicketInputDTO",
    "AtribuirTicketInputDTO",
    "DesatribuirTicketInputDTO",
    "AlterarStatusInputDTO",
    "AlterarPrioridadeInputDTO",
    "AdicionarComentarioInputDTO",
    "ListarTicketsQueryDTO",
    "FiltroRelatorioDTO",
    "TicketOutputDTO",
    "ComentarioOutputDTO",
    "TicketDetalhesOutputDTO",
    "EstatisticasOutputDTO",
    # Ports
    "TicketRepository",
    "ComentarioRepository",
    "Notificador",
    # Use Cases
    "CriarTicketService",
    "ObterTicketService",
    "ListarTicketsService",
    "AtribuirTicketService",
    "DesatribuirTicketService",
    "AlterarStatusService",
    "AlterarPrioridadeService",
    "AdicionarComentarioService",
    "ObterEstatisticasService",
    "ObterDesempenhoTecnicosService",
    # Handlers
    "NotificacaoEventHandler",
]
