"""
Ports (Interfaces) do Domínio de Usuários.

- UsuarioRepository: persistência da equipe
- PasswordHasher: processamento de credenciais
- InMemoryUsuarioRepository: implementação para testes
"""

from copy import deepcopy
from typing import Dict, List, Optional, Protocol, runtime_checkable

from .entities import UsuarioEntity


@runtime_checkable
class UsuarioRepository(Protocol):
    """
    Interface para persistência de usuários.

    Implementações:
    - DjangoUsuarioRepository (ORM)
    - InMemoryUsuarioRepository (testes)
    """

    def save(self, usuario: UsuarioEntity) -> None:
        """Cria ou atualiza usuário."""
        ...

    def get_by_id(self, usuario_id: str) -> Optional[UsuarioEntity]:
        ...

    def get_by_username(self, username: str) -> Optional[UsuarioEntity]:
        ...

    def delete(self, usuario_id: str) -> bool:
        """
        Remove usuário.

        Returns:
            True se havia usuário com esse ID
        """
        ...

    def list_equipe(self) -> List[UsuarioEntity]:
        """Todos os usuários ordenados por nome."""
        ...


@runtime_checkable
class PasswordHasher(Protocol):
    """
    Interface para processamento de senhas.

    Implementação: DjangoPasswordHasher (django.contrib.auth.hashers).
    """

    def hash(self, senha: str) -> str:
        ...

    def verificar(self, senha: str, armazenada: str) -> bool:
        """Confere senha contra a credencial armazenada (hash ou legado)."""
        ...

    def eh_legado(self, armazenada: str) -> bool:
        """True se a credencial armazenada está em texto puro."""
        ...


class InMemoryUsuarioRepository:
    """
    Implementação em memória do UsuarioRepository.

    Guarda cópias para que alterações feitas fora do repositório
    só valham depois de save().
    """

    def __init__(self):
        self._usuarios: Dict[str, UsuarioEntity] = {}

    def save(self, usuario: UsuarioEntity) -> None:
        self._usuarios[usuario.id] = deepcopy(usuario)

    def get_by_id(self, usuario_id: str) -> Optional[UsuarioEntity]:
        usuario = self._usuarios.get(usuario_id)
        return deepcopy(usuario) if usuario else None

    def get_by_username(self, username: str) -> Optional[UsuarioEntity]:
        for usuario in self._usuarios.values():
            if usuario.username == username:
                return deepcopy(usuario)
        return None

    def delete(self, usuario_id: str) -> bool:
        return self._usuarios.pop(usuario_id, None) is not None

    def list_equipe(self) -> List[UsuarioEntity]:
        return [
            deepcopy(u)
            for u in sorted(self._usuarios.values(), key=lambda u: u.nome.lower())
        ]
