"""
DTOs do Domínio de Usuários.

UsuarioOutputDTO nunca expõe a credencial armazenada.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .entities import UsuarioEntity


@dataclass(frozen=True)
class CriarUsuarioInputDTO:
    username: str
    senha: str
    nome: str
    papel: str = "technician"
    email: Optional[str] = None


@dataclass(frozen=True)
class AutenticarUsuarioInputDTO:
    username: str
    senha: str


@dataclass
class UsuarioOutputDTO:
    id: str
    username: str
    nome: str
    email: Optional[str]
    papel: str
    criado_em: Optional[datetime] = None

    @classmethod
    def from_entity(cls, entity: UsuarioEntity) -> "UsuarioOutputDTO":
        return cls(
            id=entity.id,
            username=entity.username,
            nome=entity.nome,
            email=entity.email,
            papel=entity.papel.value,
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "nome": self.nome,
            "email": self.email,
            "papel": self.papel,
            "criado_em": self.criado_em.isoformat() if self.criado_em else None,
        }
