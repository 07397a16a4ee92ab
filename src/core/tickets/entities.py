"""
Entidades do Domínio de Tickets.

Entidades:
- TicketEntity: Agregado principal (chamado de suporte)
- ComentarioEntity: Comentário imutável pertencente a um chamado
- TicketStatus / TicketPriority / TipoAutor: reexportados de valores.py

Regras de Negócio Encapsuladas:
- Validação de dados na criação
- Transições de status controladas por papel (ver politicas.py)
- Timestamps de aceite/resolução mantidos junto com o status
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, List, Optional
import uuid

from src.core.shared.exceptions import ValidationError
from src.core.shared.papeis import PapelAtor

from . import politicas
from .valores import TicketStatus, TicketPriority, TipoAutor


@dataclass
class ComentarioEntity:
    """
    Comentário de um chamado.

    Imutável depois de criado: não existe edição nem remoção;
    é apagado junto com o chamado.
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    ticket_id: str = ""
    conteudo: str = ""
    autor_nome: str = ""
    tipo_autor: TipoAutor = TipoAutor.USUARIO
    anexos: List[str] = field(default_factory=list)
    criado_em: Optional[datetime] = None

    AUTOR_NOME_MAX_LENGTH: ClassVar[int] = 100
    CONTEUDO_MAX_LENGTH: ClassVar[int] = 5000

    @classmethod
    def criar(
        cls,
        ticket_id: str,
        conteudo: str,
        autor_nome: str,
        tipo_autor: TipoAutor,
        agora: datetime,
        anexos: Optional[List[str]] = None,
    ) -> "ComentarioEntity":
        if not conteudo or not conteudo.strip():
            raise ValidationError("Comentário é obrigatório", field="conteudo")
        if len(conteudo.strip()) > cls.CONTEUDO_MAX_LENGTH:
            raise ValidationError(
                f"Comentário deve ter no máximo {cls.CONTEUDO_MAX_LENGTH} caracteres",
                field="conteudo",
            )
        if not autor_nome or not autor_nome.strip():
            raise ValidationError("Nome do autor é obrigatório", field="autor_nome")

        return cls(
            ticket_id=ticket_id,
            conteudo=conteudo.strip(),
            autor_nome=autor_nome.strip()[:cls.AUTOR_NOME_MAX_LENGTH],
            tipo_autor=tipo_autor,
            anexos=_normalizar_anexos(anexos),
            criado_em=agora,
        )


def _normalizar_anexos(anexos: Optional[List[str]]) -> List[str]:
    if not anexos:
        return []
    if isinstance(anexos, str):
        raise ValidationError("Anexos devem ser uma lista", field="anexos")
    return [str(anexo) for anexo in anexos if anexo]


@dataclass
class TicketEntity:
    """
    Entidade de Domínio: Ticket (chamado).

    Invariantes:
    - resolvido_em está preenchido se e somente se status == RESOLVIDO
    - aceito_em está preenchido se e somente se há técnico atribuído
    - Atribuir força status EM_ANDAMENTO; desatribuir volta para ABERTO
    - Apenas administradores alteram chamados resolvidos
    - versao é incrementada pelo repositório a cada atualização

    Example:
        ticket = TicketEntity.criar(
            numero=1001,
            titulo="Impressora não liga",
            descricao="A impressora do 2º andar não liga desde ontem",
            setor="Financeiro",
            tipo_problema="Hardware",
            solicitante_nome="Maria",
            solicitante_email="maria@empresa.com",
            agora=clock.agora(),
        )
        ticket.atribuir_a("tecnico-1", PapelAtor.TECNICO, clock.agora())
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    numero: int = 0

    titulo: str = ""
    descricao: str = ""
    setor: str = ""
    tipo_problema: str = ""

    status: TicketStatus = TicketStatus.AGUARDANDO
    prioridade: TicketPriority = TicketPriority.AGUARDANDO

    solicitante_nome: str = ""
    solicitante_email: str = ""
    atribuido_a_id: Optional[str] = None

    criado_em: Optional[datetime] = None
    aceito_em: Optional[datetime] = None
    resolvido_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None

    anexos: List[str] = field(default_factory=list)
    versao: int = 1

    TITULO_MAX_LENGTH: ClassVar[int] = 200
    DESCRICAO_MAX_LENGTH: ClassVar[int] = 5000
    CAMPO_CURTO_MAX_LENGTH: ClassVar[int] = 100

    @classmethod
    def criar(
        cls,
        numero: int,
        titulo: str,
        descricao: str,
        setor: str,
        tipo_problema: str,
        solicitante_nome: str,
        solicitante_email: str,
        agora: datetime,
        anexos: Optional[List[str]] = None,
    ) -> "TicketEntity":
        """
        Factory method para criar chamado com validações.

        O chamado nasce AGUARDANDO, com prioridade AGUARDANDO e sem
        técnico atribuído.

        Raises:
            ValidationError: Se dados de entrada inválidos
        """
        cls._validar_obrigatorio(titulo, "titulo", "Título", cls.TITULO_MAX_LENGTH)
        cls._validar_obrigatorio(descricao, "descricao", "Descrição", cls.DESCRICAO_MAX_LENGTH)
        cls._validar_obrigatorio(setor, "setor", "Setor", cls.CAMPO_CURTO_MAX_LENGTH)
        cls._validar_obrigatorio(tipo_problema, "tipo_problema", "Tipo de problema", cls.CAMPO_CURTO_MAX_LENGTH)
        cls._validar_obrigatorio(solicitante_nome, "solicitante_nome", "Nome", cls.CAMPO_CURTO_MAX_LENGTH)
        cls._validar_email(solicitante_email)

        return cls(
            numero=numero,
            titulo=titulo.strip(),
            descricao=descricao.strip(),
            setor=setor.strip(),
            tipo_problema=tipo_problema.strip(),
            solicitante_nome=solicitante_nome.strip(),
            solicitante_email=solicitante_email.strip(),
            status=TicketStatus.AGUARDANDO,
            prioridade=TicketPriority.AGUARDANDO,
            criado_em=agora,
            atualizado_em=agora,
            anexos=_normalizar_anexos(anexos),
        )

    @classmethod
    def _validar_obrigatorio(cls, valor: str, campo: str, rotulo: str, max_length: int) -> None:
        if not valor or not valor.strip():
            raise ValidationError(f"{rotulo} é obrigatório", field=campo)

        if len(valor.strip()) > max_length:
            raise ValidationError(
                f"{rotulo} deve ter no máximo {max_length} caracteres",
                field=campo,
            )

    @classmethod
    def _validar_email(cls, email: str) -> None:
        if not email or not email.strip():
            raise ValidationError("Email é obrigatório", field="solicitante_email")

        local, _, dominio = email.strip().partition("@")
        if not local or "." not in dominio:
            raise ValidationError("Email inválido", field="solicitante_email")

    # =========================================================================
    # Transições
    # =========================================================================

    def atribuir_a(self, tecnico_id: str, papel: PapelAtor, agora: datetime) -> None:
        """
        Atribui o chamado a um técnico.

        Sempre leva o status para EM_ANDAMENTO e registra aceito_em.
        Reatribuir (troca de técnico) é permitido.

        Raises:
            ValidationError: Se tecnico_id vazio
            BusinessRuleViolationError: Se papel não permite
        """
        if not tecnico_id:
            raise ValidationError("ID do técnico é obrigatório", field="tecnico_id")

        politicas.verificar_alteracao(self.status, papel, "atribuir chamados")

        self.atribuido_a_id = tecnico_id
        self.status = TicketStatus.EM_ANDAMENTO
        self.aceito_em = agora
        self.resolvido_em = None
        self.atualizado_em = agora

    def desatribuir(self, papel: PapelAtor, agora: datetime) -> None:
        """Remove o técnico; o chamado volta para ABERTO."""
        politicas.verificar_alteracao(self.status, papel, "desatribuir chamados")

        self.atribuido_a_id = None
        self.status = TicketStatus.ABERTO
        self.aceito_em = None
        self.resolvido_em = None
        self.atualizado_em = agora

    def alterar_status(self, novo_status: TicketStatus, papel: PapelAtor, agora: datetime) -> bool:
        """
        Altera status respeitando papel e tabela de transições.

        Repetir o status atual não altera nada (resolvido_em não é
        renovado).

        Returns:
            True se o status mudou
        """
        politicas.verificar_transicao_status(self.status, novo_status, papel)

        if novo_status == self.status:
            return False

        if novo_status == TicketStatus.RESOLVIDO:
            self.resolvido_em = agora
        else:
            self.resolvido_em = None

        self.status = novo_status
        self.atualizado_em = agora
        return True

    def alterar_prioridade(self, nova_prioridade: TicketPriority, papel: PapelAtor, agora: datetime) -> bool:
        """
        Define a prioridade (BAIXA, MEDIA ou ALTA).

        Returns:
            True se a prioridade mudou
        """
        if not nova_prioridade.definivel:
            raise ValidationError(
                "Prioridade deve ser low, medium ou high",
                field="prioridade",
            )

        politicas.verificar_alteracao(self.status, papel, "alterar a prioridade")

        if nova_prioridade == self.prioridade:
            return False

        self.prioridade = nova_prioridade
        self.atualizado_em = agora
        return True

    def comentar(
        self,
        conteudo: str,
        autor_nome: str,
        papel: PapelAtor,
        agora: datetime,
        anexos: Optional[List[str]] = None,
    ) -> ComentarioEntity:
        """
        Cria comentário se o papel puder comentar neste estado.

        Raises:
            BusinessRuleViolationError: Se comentário não permitido
        """
        politicas.verificar_comentario(self.status, self.esta_atribuido, papel)

        return ComentarioEntity.criar(
            ticket_id=self.id,
            conteudo=conteudo,
            autor_nome=autor_nome,
            tipo_autor=TipoAutor.from_papel(papel),
            agora=agora,
            anexos=anexos,
        )

    # =========================================================================
    # Consultas
    # =========================================================================

    @property
    def esta_atribuido(self) -> bool:
        return self.atribuido_a_id is not None

    def problemas_de_integridade(self) -> List[str]:
        """
        Lista violações da ordem criado_em <= aceito_em <= resolvido_em.

        Não lança erro: dados antigos podem estar inconsistentes e
        as métricas apenas registram o aviso.
        """
        problemas = []
        if self.criado_em and self.aceito_em and self.aceito_em < self.criado_em:
            problemas.append("aceito_em anterior a criado_em")
        if self.aceito_em and self.resolvido_em and self.resolvido_em < self.aceito_em:
            problemas.append("resolvido_em anterior a aceito_em")
        if self.criado_em and self.resolvido_em and self.resolvido_em < self.criado_em:
            problemas.append("resolvido_em anterior a criado_em")
        if (self.resolvido_em is None) == (self.status == TicketStatus.RESOLVIDO):
            problemas.append("resolvido_em inconsistente com o status")
        return problemas

    def __repr__(self) -> str:
        return (
            f"TicketEntity("
            f"numero={self.numero}, "
            f"id={self.id[:8]}..., "
            f"status={self.status.value}, "
            f"prioridade={self.prioridade.value}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        """Comparação por ID (identidade de entidade)."""
        if not isinstance(other, TicketEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
