"""
Configuração do projeto Central de Chamados.

Módulos:
- settings: Configurações Django
- urls: Rotas principais
- celery: App Celery das notificações
- container: Dependency Injection Container
"""

# Carrega o app Celery junto com o Django (shared_task usa este app)
from .celery import app as celery_app

__all__ = ('celery_app',)
