"""
Tradução de eventos de domínio em notificações.

NotificacaoEventHandler recebe um evento já publicado (após o commit)
e chama o Notificador correspondente. O resultado indica se todas as
notificações foram enviadas; quem chama (task Celery ou publisher
síncrono) decide se tenta de novo.

Mapeamento:
- TicketCriado: confirmação ao solicitante + aviso à equipe
- TicketAtribuido: solicitante avisado do aceite
- ComentarioAdicionado: solicitante avisado, só se o autor é técnico
- TicketPrioridadeAlterada: solicitante avisado
- TicketResolvido: solicitante avisado com o nome de quem finalizou
- TicketDesatribuido / TicketStatusAlterado: sem notificação
"""

import logging
from typing import Callable, Optional, Set

from src.core.shared.events import DomainEvent
from src.core.shared.papeis import PapelAtor
from src.core.usuarios.ports import UsuarioRepository

from .events import (
    ComentarioAdicionadoEvent,
    TicketAtribuidoEvent,
    TicketCriadoEvent,
    TicketPrioridadeAlteradaEvent,
    TicketResolvidoEvent,
)
from .ports import Notificador

logger = logging.getLogger(__name__)

SOLICITANTE = "solicitante"


class NotificacaoEventHandler:
    """
    Example:
        handler = NotificacaoEventHandler(notificador, usuario_repo)
        entregues = set()
        if not handler.processar(evento, entregues):
            raise self.retry(kwargs={"entregues": sorted(entregues)})
    """

    def __init__(self, notificador: Notificador, usuario_repo: UsuarioRepository):
        self.notificador = notificador
        self.usuario_repo = usuario_repo

    def processar(self, event: DomainEvent, entregues: Optional[Set[str]] = None) -> bool:
        """
        Args:
            event: evento publicado
            entregues: partes já enviadas em tentativas anteriores
                ("solicitante", "equipe:<id>"). É atualizado com o que
                for enviado nesta chamada, para que a próxima tentativa
                reenvie só o que falhou.

        Returns:
            True se todas as notificações do evento foram enviadas
            (ou se o evento não gera notificação)
        """
        if entregues is None:
            entregues = set()
        try:
            return self._despachar(event, entregues)
        except Exception as e:
            logger.error(
                f"Erro ao notificar {event.event_type} do chamado {event.aggregate_id}: {e}",
                exc_info=True,
            )
            return False

    def _enviar(self, parte: str, entregues: Set[str], enviar: Callable[..., bool], *args) -> bool:
        if parte in entregues:
            logger.debug(f"Parte '{parte}' já entregue, ignorada")
            return True
        if not enviar(*args):
            return False
        entregues.add(parte)
        return True

    def _despachar(self, event: DomainEvent, entregues: Set[str]) -> bool:
        if isinstance(event, TicketCriadoEvent):
            return self._ao_criar(event, entregues)

        if isinstance(event, TicketAtribuidoEvent):
            tecnico = {
                "id": event.tecnico_id,
                "nome": event.tecnico_nome,
                "email": event.tecnico_email,
            }
            return self._enviar(
                SOLICITANTE, entregues, self.notificador.notificar_atribuicao, event.ticket, tecnico
            )

        if isinstance(event, ComentarioAdicionadoEvent):
            if event.papel_autor != PapelAtor.TECNICO.value:
                return True
            return self._enviar(
                SOLICITANTE, entregues, self.notificador.notificar_comentario, event.ticket, event.autor_nome
            )

        if isinstance(event, TicketPrioridadeAlteradaEvent):
            return self._enviar(
                SOLICITANTE, entregues, self.notificador.notificar_prioridade,
                event.ticket, event.prioridade_nova, event.alterado_por,
            )

        if isinstance(event, TicketResolvidoEvent):
            return self._enviar(
                SOLICITANTE, entregues, self.notificador.notificar_resolucao, event.ticket, event.resolvido_por
            )

        logger.debug(f"{event.event_type} não gera notificação")
        return True

    def _ao_criar(self, event: TicketCriadoEvent, entregues: Set[str]) -> bool:
        ok = self._enviar(SOLICITANTE, entregues, self.notificador.notificar_criacao, event.ticket)

        # Um envio por membro: a falha de um não reenvia aos demais
        for membro in self.usuario_repo.list_equipe():
            if not membro.email:
                continue
            enviado = self._enviar(
                f"equipe:{membro.id}", entregues,
                self.notificador.notificar_criacao_equipe, event.ticket, [membro],
            )
            ok = enviado and ok

        return ok
