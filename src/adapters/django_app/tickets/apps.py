"""
Configuração do Django App de Tickets.
"""

from django.apps import AppConfig


class TicketsConfig(AppConfig):
    """Chamados, comentários e a API JSON correspondente."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.tickets'
    label = 'tickets'
    verbose_name = 'Central de Chamados'
