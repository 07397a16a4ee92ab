"""
Configuração do Django App de Usuários (equipe de suporte).
"""

from django.apps import AppConfig


class UsuariosConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.usuarios'
    label = 'usuarios'
    verbose_name = 'Equipe de Suporte'
