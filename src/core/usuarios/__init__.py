"""
Domínio de Usuários - Equipe de Suporte.

Técnicos e administradores que atendem os chamados. Solicitantes
não têm conta: são identificados por nome e e-mail no chamado.
"""

from .entities import UsuarioEntity
from .dtos import CriarUsuarioInputDTO, AutenticarUsuarioInputDTO, UsuarioOutputDTO
from .ports import UsuarioRepository, PasswordHasher, InMemoryUsuarioRepository
from .use_cases import (
    CriarUsuarioService,
    RemoverUsuarioService,
    ListarEquipeService,
    AutenticarUsuarioService,
)

__all__ = [
    "UsuarioEntity",
    "CriarUsuarioInputDTO",
    "AutenticarUsuarioInputDTO",
    "UsuarioOutputDTO",
    "UsuarioRepository",
    "PasswordHasher",
    "InMemoryUsuarioRepository",
    "CriarUsuarioService",
    "RemoverUsuarioService",
    "ListarEquipeService",
    "AutenticarUsuarioService",
]
