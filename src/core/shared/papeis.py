"""
Papéis de ator.

Todo guard do domínio recebe o papel de quem executa a operação.
O conjunto é fechado: user (solicitante), technician e admin.
"""

from enum import Enum

from .exceptions import ValidationError


class PapelAtor(Enum):
    """Permissão de quem chama a operação."""

    USUARIO = "user"
    TECNICO = "technician"
    ADMIN = "admin"

    @classmethod
    def from_string(cls, value: str) -> "PapelAtor":
        """
        Converte string para enum.

        Aceita o valor ("technician") ou o nome ("TECNICO").

        Raises:
            ValidationError: Se papel desconhecido
        """
        if not value:
            raise ValidationError("Papel é obrigatório", field="papel")

        normalizado = value.strip()
        for papel in cls:
            if papel.value == normalizado.lower() or papel.name == normalizado.upper():
                return papel

        raise ValidationError(f"Papel inválido: {value}", field="papel")

    @property
    def eh_equipe(self) -> bool:
        """Técnicos e administradores formam a equipe de suporte."""
        return self in (PapelAtor.TECNICO, PapelAtor.ADMIN)
