"""
Repositório Django para persistência de Usuários.

Implementa UsuarioRepository (src/core/usuarios/ports.py).
"""

from typing import List, Optional
import logging

from django.db.models.functions import Lower

from src.core.usuarios.entities import UsuarioEntity

from ..shared.database import erros_de_banco
from .mappers import UsuarioMapper
from .models import UsuarioModel

logger = logging.getLogger(__name__)


class DjangoUsuarioRepository:
    """
    Example:
        repo = DjangoUsuarioRepository()
        repo.save(usuario)
        repo.get_by_username("joao")
    """

    def __init__(self):
        self._mapper = UsuarioMapper()

    def save(self, usuario: UsuarioEntity) -> None:
        """
        Cria ou atualiza usuário.

        Raises:
            ConcurrencyError: Se o username foi cadastrado em paralelo
        """
        with erros_de_banco("salvar usuário", conflito=f"Usuário {usuario.username} já existe"):
            UsuarioModel.objects.update_or_create(
                id=usuario.id,
                defaults=self._mapper.campos(usuario),
            )
        logger.debug(f"User saved: {usuario.username} ({usuario.id})")

    def get_by_id(self, usuario_id: str) -> Optional[UsuarioEntity]:
        with erros_de_banco("buscar usuário"):
            model = UsuarioModel.objects.filter(id=usuario_id).first()
        return self._mapper.to_entity(model) if model else None

    def get_by_username(self, username: str) -> Optional[UsuarioEntity]:
        with erros_de_banco("buscar usuário"):
            model = UsuarioModel.objects.filter(username=username).first()
        return self._mapper.to_entity(model) if model else None

    def delete(self, usuario_id: str) -> bool:
        with erros_de_banco("remover usuário"):
            removidos, _ = UsuarioModel.objects.filter(id=usuario_id).delete()
        return removidos > 0

    def list_equipe(self) -> List[UsuarioEntity]:
        with erros_de_banco("listar equipe"):
            models = UsuarioModel.objects.order_by(Lower('nome'))
            return [self._mapper.to_entity(model) for model in models]
