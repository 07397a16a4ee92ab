"""
URL Configuration da Central de Chamados.

Estrutura:
- /api/tickets/ - API de Chamados
- /api/usuarios/ - API da Equipe
- /health/ - Health check (banco de dados)
"""

from django.http import JsonResponse
from django.urls import include, path

from src.adapters.django_app.shared.database import check_database_connection


def health(request):
    banco = check_database_connection()
    saudavel = banco['status'] == 'healthy'
    return JsonResponse(
        {'status': 'ok' if saudavel else 'degraded', 'database': banco},
        status=200 if saudavel else 503,
    )


urlpatterns = [
    path('api/tickets/', include('src.adapters.django_app.tickets.urls')),
    path('api/usuarios/', include('src.adapters.django_app.usuarios.urls')),
    path('health/', health, name='health'),
]
