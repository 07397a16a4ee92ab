"""
Mapper UsuarioEntity <-> UsuarioModel.
"""

from src.core.shared.papeis import PapelAtor
from src.core.usuarios.entities import UsuarioEntity

from .models import UsuarioModel


class UsuarioMapper:

    @staticmethod
    def campos(entity: UsuarioEntity) -> dict:
        """Valores gravados (tudo menos o ID)."""
        return {
            'username': entity.username,
            'senha': entity.senha,
            'nome': entity.nome,
            'email': entity.email,
            'papel': entity.papel.value,
            'criado_em': entity.criado_em,
        }

    @staticmethod
    def to_model(entity: UsuarioEntity) -> UsuarioModel:
        return UsuarioModel(id=entity.id, **UsuarioMapper.campos(entity))

    @staticmethod
    def to_entity(model: UsuarioModel) -> UsuarioEntity:
        return UsuarioEntity(
            id=model.id,
            username=model.username,
            senha=model.senha,
            nome=model.nome,
            email=model.email or None,
            papel=PapelAtor(model.papel),
            criado_em=model.criado_em,
        )
