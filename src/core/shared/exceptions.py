"""
Exceções de Domínio da Central de Chamados.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas.

Hierarquia (e status HTTP aplicado pela API):
    DomainException (base)
    ├── ValidationError (valor fora do conjunto permitido) -> 400
    ├── EntityNotFoundError (entidade não existe) -> 404
    ├── BusinessRuleViolationError (papel/estado não permite) -> 403
    ├── ConcurrencyError (atualização concorrente) -> 409
    ├── AuthenticationError (credenciais inválidas) -> 401
    └── DependencyFailureError (banco ou colaborador falhou) -> 500
"""


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Todas as exceções específicas do domínio devem herdar desta classe.
    Isso permite capturar qualquer erro de domínio de forma genérica.

    Example:
        try:
            ticket.alterar_status(TicketStatus.ABERTO, PapelAtor.TECNICO, agora)
        except DomainException as e:
            logger.error(f"Erro de domínio: {e}")
    """

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (útil para APIs)."""
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Erro de validação de dados de entrada.

    Lançada quando dados fornecidos não atendem aos requisitos
    mínimos para processamento (campo obrigatório ausente,
    valor de enum desconhecido).

    Example:
        if not titulo:
            raise ValidationError("Título é obrigatório", field="titulo")
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

    Lançada quando uma busca por ID não retorna resultado.

    Example:
        ticket = repo.get_by_id(ticket_id)
        if not ticket:
            raise EntityNotFoundError(f"Ticket {ticket_id} não encontrado")
    """

    def __init__(self, message: str, entity_type: str = None, entity_id: str = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio.

    Lançada quando o papel do ator ou o estado do ticket não
    permitem a operação (ex: usuário comentando em chamado já
    atribuído, técnico alterando chamado resolvido).

    Example:
        if ticket.status == TicketStatus.RESOLVIDO:
            raise BusinessRuleViolationError(
                "Apenas administradores podem alterar chamados resolvidos",
                rule="chamado_resolvido_imutavel",
            )
    """

    def __init__(self, message: str, rule: str = None):
        self.rule = rule
        super().__init__(message, "BUSINESS_RULE_VIOLATION")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class ConcurrencyError(DomainException):
    """
    Erro de concorrência/conflito de versão.

    Lançada quando uma operação falha devido a modificação
    concorrente da entidade.

    Example:
        if entity.versao != versao_esperada:
            raise ConcurrencyError("Chamado foi modificado por outro processo")
    """

    def __init__(self, message: str):
        super().__init__(message, "CONCURRENCY_ERROR")


class AuthenticationError(DomainException):
    """Credenciais inválidas no login."""

    def __init__(self, message: str = "Usuário ou senha inválidos"):
        super().__init__(message, "AUTHENTICATION_ERROR")


class DependencyFailureError(DomainException):
    """
    Falha de um colaborador externo (banco de dados, broker).

    Não é tratada como erro do cliente: a API responde 500 e
    a operação pode ser repetida.
    """

    def __init__(self, message: str, dependency: str = None):
        self.dependency = dependency
        super().__init__(message, "DEPENDENCY_FAILURE")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.dependency:
            result["dependency"] = self.dependency
        return result
