"""
Use Cases do Domínio de Usuários.

- CriarUsuarioService: Cadastra técnico ou administrador
- RemoverUsuarioService: Remove usuário (chamados mantêm o ID antigo)
- ListarEquipeService: Lista a equipe ordenada por nome
- AutenticarUsuarioService: Confere credenciais e migra senhas legadas
"""

from typing import List
import logging

from src.core.shared.clock import Clock
from src.core.shared.exceptions import (
    AuthenticationError,
    BusinessRuleViolationError,
    EntityNotFoundError,
    ValidationError,
)
from src.core.shared.interfaces import UnitOfWork
from src.core.shared.papeis import PapelAtor

from .dtos import AutenticarUsuarioInputDTO, CriarUsuarioInputDTO, UsuarioOutputDTO
from .entities import UsuarioEntity
from .ports import PasswordHasher, UsuarioRepository

logger = logging.getLogger(__name__)


class CriarUsuarioService:
    """
    Use Case: Cadastrar membro da equipe.

    Fluxo:
    1. Validar papel e unicidade do username
    2. Processar a senha com o PasswordHasher
    3. Criar entidade e persistir

    Example:
        service = CriarUsuarioService(usuario_repo, hasher, uow, clock)
        output = service.execute(CriarUsuarioInputDTO(
            username="joao", senha="s3nha", nome="João", papel="technician"
        ))
    """

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        hasher: PasswordHasher,
        uow: UnitOfWork,
        clock: Clock,
    ):
        self.usuario_repo = usuario_repo
        self.hasher = hasher
        self.uow = uow
        self.clock = clock

    def execute(self, input_dto: CriarUsuarioInputDTO) -> UsuarioOutputDTO:
        """
        Raises:
            ValidationError: Se dados inválidos
            BusinessRuleViolationError: Se username já existe
        """
        papel = PapelAtor.from_string(input_dto.papel)
        if not input_dto.senha:
            raise ValidationError("Senha é obrigatória", field="senha")

        with self.uow:
            username = (input_dto.username or "").strip()
            if username and self.usuario_repo.get_by_username(username):
                raise BusinessRuleViolationError(
                    f"Usuário {username} já existe",
                    rule="username_unico",
                )

            usuario = UsuarioEntity.criar(
                username=username,
                senha_hash=self.hasher.hash(input_dto.senha),
                nome=input_dto.nome,
                papel=papel,
                agora=self.clock.agora(),
                email=input_dto.email,
            )
            self.usuario_repo.save(usuario)

        logger.info(f"Usuário {usuario.username} criado ({usuario.papel.value})")
        return UsuarioOutputDTO.from_entity(usuario)


class RemoverUsuarioService:
    """
    Use Case: Remover usuário.

    Chamados atribuídos continuam apontando para o ID removido; as
    métricas exibem o nome padrão para esse técnico.
    """

    def __init__(self, usuario_repo: UsuarioRepository, uow: UnitOfWork):
        self.usuario_repo = usuario_repo
        self.uow = uow

    def execute(self, usuario_id: str) -> None:
        with self.uow:
            if not self.usuario_repo.delete(usuario_id):
                raise EntityNotFoundError(
                    f"Usuário {usuario_id} não encontrado",
                    entity_type="Usuario",
                    entity_id=usuario_id,
                )

        logger.info(f"Usuário {usuario_id} removido")


class ListarEquipeService:
    def __init__(self, usuario_repo: UsuarioRepository):
        self.usuario_repo = usuario_repo

    def execute(self) -> List[UsuarioOutputDTO]:
        return [UsuarioOutputDTO.from_entity(u) for u in self.usuario_repo.list_equipe()]


class AutenticarUsuarioService:
    """
    Use Case: Login da equipe.

    Usuário inexistente e senha errada geram a mesma mensagem.
    Credenciais legadas em texto puro são reprocessadas e gravadas
    no primeiro login bem-sucedido.
    """

    def __init__(self, usuario_repo: UsuarioRepository, hasher: PasswordHasher, uow: UnitOfWork):
        self.usuario_repo = usuario_repo
        self.hasher = hasher
        self.uow = uow

    def execute(self, input_dto: AutenticarUsuarioInputDTO) -> UsuarioOutputDTO:
        """
        Raises:
            AuthenticationError: Se credenciais inválidas
        """
        with self.uow:
            usuario = self.usuario_repo.get_by_username((input_dto.username or "").strip())

            if not usuario or not self.hasher.verificar(input_dto.senha or "", usuario.senha):
                logger.info(f"Falha de login para {input_dto.username!r}")
                raise AuthenticationError()

            if self.hasher.eh_legado(usuario.senha):
                usuario.trocar_credencial(self.hasher.hash(input_dto.senha))
                self.usuario_repo.save(usuario)
                logger.info(f"Senha legada de {usuario.username} migrada")

        return UsuarioOutputDTO.from_entity(usuario)
