"""
Entidade de Usuário da equipe de suporte.

Regras:
- username único (verificado no use case, via repositório)
- papel restrito a technician ou admin
- senha guardada já processada pelo PasswordHasher; contas antigas
  podem ter senha em texto puro até o próximo login
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, Optional
import uuid

from src.core.shared.exceptions import ValidationError
from src.core.shared.papeis import PapelAtor


@dataclass
class UsuarioEntity:
    """
    Entidade de Domínio: Usuário (técnico ou administrador).

    Attributes:
        id: Identificador único (UUID)
        username: Login
        senha: Credencial armazenada (hash ou legado em texto puro)
        nome: Nome exibido nas notificações e relatórios
        email: E-mail opcional (recebe aviso de novos chamados)
        papel: PapelAtor.TECNICO ou PapelAtor.ADMIN
        criado_em: Data/hora de criação
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    username: str = ""
    senha: str = field(default="", repr=False)
    nome: str = ""
    email: Optional[str] = None
    papel: PapelAtor = PapelAtor.TECNICO
    criado_em: Optional[datetime] = None

    USERNAME_MAX_LENGTH: ClassVar[int] = 150
    NOME_MAX_LENGTH: ClassVar[int] = 100

    @classmethod
    def criar(
        cls,
        username: str,
        senha_hash: str,
        nome: str,
        papel: PapelAtor,
        agora: datetime,
        email: Optional[str] = None,
    ) -> "UsuarioEntity":
        """
        Factory method com validações.

        Raises:
            ValidationError: Se dados inválidos
        """
        if not username or not username.strip():
            raise ValidationError("Usuário é obrigatório", field="username")
        if len(username.strip()) > cls.USERNAME_MAX_LENGTH:
            raise ValidationError(
                f"Usuário deve ter no máximo {cls.USERNAME_MAX_LENGTH} caracteres",
                field="username",
            )
        if not nome or not nome.strip():
            raise ValidationError("Nome é obrigatório", field="nome")
        if not senha_hash:
            raise ValidationError("Senha é obrigatória", field="senha")
        if not papel.eh_equipe:
            raise ValidationError("Papel deve ser technician ou admin", field="papel")

        return cls(
            username=username.strip(),
            senha=senha_hash,
            nome=nome.strip()[:cls.NOME_MAX_LENGTH],
            email=email.strip() if email and email.strip() else None,
            papel=papel,
            criado_em=agora,
        )

    def trocar_credencial(self, senha_hash: str) -> None:
        """Substitui a credencial armazenada (migração de senha legada)."""
        self.senha = senha_hash

    @property
    def eh_admin(self) -> bool:
        return self.papel == PapelAtor.ADMIN

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UsuarioEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
