"""
URL patterns da API de Usuários (incluídas em /api/usuarios/).
"""

from django.urls import path

from . import api_views

app_name = 'usuarios'

urlpatterns = [
    path('', api_views.UsuarioAPIListView.as_view(), name='api_list'),
    path('login/', api_views.UsuarioAPILoginView.as_view(), name='api_login'),
    path('<str:pk>/', api_views.UsuarioAPIDetailView.as_view(), name='api_detail'),
]
