"""
Políticas do ciclo de vida de chamados.

Funções puras que decidem, a partir do estado do chamado e do
papel do ator, se uma ação é permitida. As entidades chamam estas
funções antes de mudar de estado; as views podem chamá-las para
saber o que exibir.

Toda decisão percorre os três papéis explicitamente. Um papel
novo precisa ser tratado aqui antes de ser aceito.
"""

from typing import Dict, FrozenSet

from src.core.shared.exceptions import BusinessRuleViolationError
from src.core.shared.papeis import PapelAtor

from .valores import TicketStatus


TRANSICOES_STATUS: Dict[TicketStatus, FrozenSet[TicketStatus]] = {
    TicketStatus.AGUARDANDO: frozenset({TicketStatus.ABERTO, TicketStatus.EM_ANDAMENTO}),
    TicketStatus.ABERTO: frozenset({TicketStatus.EM_ANDAMENTO, TicketStatus.RESOLVIDO}),
    TicketStatus.EM_ANDAMENTO: frozenset({TicketStatus.RESOLVIDO}),
    TicketStatus.RESOLVIDO: frozenset(),
}

STATUS_ABERTOS_AO_SOLICITANTE = frozenset({TicketStatus.AGUARDANDO, TicketStatus.ABERTO})


def _papel_desconhecido(papel) -> ValueError:
    return ValueError(f"Papel desconhecido: {papel!r}")


def verificar_alteracao(status: TicketStatus, papel: PapelAtor, acao: str) -> None:
    """
    Guard comum a atribuir, desatribuir e alterar prioridade.

    - user: nunca
    - technician: desde que o chamado não esteja resolvido
    - admin: sempre

    Raises:
        BusinessRuleViolationError: Se o papel não permite a ação
    """
    if papel == PapelAtor.USUARIO:
        raise BusinessRuleViolationError(
            f"Solicitantes não podem {acao}",
            rule="papel_sem_permissao",
        )
    elif papel == PapelAtor.TECNICO:
        if status == TicketStatus.RESOLVIDO:
            raise BusinessRuleViolationError(
                "Apenas administradores podem alterar chamados resolvidos",
                rule="chamado_resolvido_imutavel",
            )
    elif papel == PapelAtor.ADMIN:
        return
    else:
        raise _papel_desconhecido(papel)


def transicao_permitida(atual: TicketStatus, novo: TicketStatus, papel: PapelAtor) -> bool:
    """Versão booleana de verificar_transicao_status."""
    try:
        verificar_transicao_status(atual, novo, papel)
    except BusinessRuleViolationError:
        return False
    return True


def verificar_transicao_status(atual: TicketStatus, novo: TicketStatus, papel: PapelAtor) -> None:
    """
    Valida mudança de status.

    Repetir o status atual é sempre aceito para técnicos e
    administradores. Técnicos seguem TRANSICOES_STATUS;
    administradores podem ir para qualquer status, inclusive
    reabrir chamados resolvidos.

    Raises:
        BusinessRuleViolationError: Se a transição não é permitida
    """
    if papel == PapelAtor.USUARIO:
        raise BusinessRuleViolationError(
            "Solicitantes não podem alterar o status",
            rule="papel_sem_permissao",
        )
    elif papel == PapelAtor.TECNICO:
        if novo == atual:
            return
        if atual == TicketStatus.RESOLVIDO:
            raise BusinessRuleViolationError(
                "Apenas administradores podem alterar chamados resolvidos",
                rule="chamado_resolvido_imutavel",
            )
        if novo not in TRANSICOES_STATUS[atual]:
            raise BusinessRuleViolationError(
                f"Transição de {atual.value} para {novo.value} não é permitida",
                rule="transicao_status_invalida",
            )
    elif papel == PapelAtor.ADMIN:
        return
    else:
        raise _papel_desconhecido(papel)


def pode_comentar(status: TicketStatus, atribuido: bool, papel: PapelAtor) -> bool:
    """
    Decide se o papel pode comentar no chamado.

    - user: apenas sem técnico atribuído e com status waiting/open
    - technician: enquanto o chamado não estiver resolvido
    - admin: sempre
    """
    if papel == PapelAtor.USUARIO:
        return not atribuido and status in STATUS_ABERTOS_AO_SOLICITANTE
    elif papel == PapelAtor.TECNICO:
        return status != TicketStatus.RESOLVIDO
    elif papel == PapelAtor.ADMIN:
        return True
    else:
        raise _papel_desconhecido(papel)


def verificar_comentario(status: TicketStatus, atribuido: bool, papel: PapelAtor) -> None:
    """
    Raises:
        BusinessRuleViolationError: Se pode_comentar() é falso
    """
    if pode_comentar(status, atribuido, papel):
        return

    if papel == PapelAtor.USUARIO:
        mensagem = "Não é possível comentar: o chamado já está em atendimento"
    else:
        mensagem = "Não é possível comentar em chamado resolvido"

    raise BusinessRuleViolationError(mensagem, rule="comentario_nao_permitido")
