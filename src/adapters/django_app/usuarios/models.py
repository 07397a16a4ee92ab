"""
Django Models para o domínio de Usuários.

Adapter de persistência para src/core/usuarios/entities.py.
A tabela guarda apenas técnicos e administradores; solicitantes
não têm conta.
"""

from django.db import models


class PapelChoices(models.TextChoices):
    """Papéis com conta no sistema."""
    TECNICO = 'technician', 'Técnico'
    ADMIN = 'admin', 'Administrador'


class UsuarioModel(models.Model):
    """
    Fields:
        id: UUID como primary key (gerado pela Entity)
        username: Login único
        senha: Credencial processada (ou legado em texto puro)
    """

    id = models.CharField(max_length=36, primary_key=True, editable=False)
    username = models.CharField(max_length=150, unique=True)
    senha = models.CharField(max_length=255)
    nome = models.CharField(max_length=100)
    email = models.EmailField(null=True, blank=True)

    papel = models.CharField(
        max_length=20,
        choices=PapelChoices.choices,
        default=PapelChoices.TECNICO,
    )

    criado_em = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'usuarios'
        verbose_name = 'Usuário'
        verbose_name_plural = 'Usuários'
        ordering = ['nome']

    def __str__(self):
        return f"{self.nome} ({self.username})"
