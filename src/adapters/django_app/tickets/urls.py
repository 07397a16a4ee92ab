"""
URL patterns da API de Tickets (incluídas em /api/tickets/).

- GET|POST /api/tickets/
- GET /api/tickets/estatisticas/
- GET /api/tickets/desempenho/
- GET /api/tickets/<id>/
- PATCH /api/tickets/<id>/prioridade/
- PATCH /api/tickets/<id>/status/
- POST /api/tickets/<id>/atribuir/
- POST /api/tickets/<id>/desatribuir/
- POST /api/tickets/<id>/comentarios/
"""

from django.urls import path

from . import api_views

app_name = 'tickets'

urlpatterns = [
    # Listagem e criação
    path('', api_views.TicketAPIListView.as_view(), name='api_list'),

    # Relatórios (antes do <pk> para não conflitar)
    path('estatisticas/', api_views.TicketAPIEstatisticasView.as_view(), name='api_estatisticas'),
    path('desempenho/', api_views.TicketAPIDesempenhoView.as_view(), name='api_desempenho'),

    # Detalhes
    path('<str:pk>/', api_views.TicketAPIDetailView.as_view(), name='api_detail'),

    # Ações
    path('<str:pk>/prioridade/', api_views.TicketAPIPrioridadeView.as_view(), name='api_prioridade'),
    path('<str:pk>/status/', api_views.TicketAPIStatusView.as_view(), name='api_status'),
    path('<str:pk>/atribuir/', api_views.TicketAPIAtribuirView.as_view(), name='api_atribuir'),
    path('<str:pk>/desatribuir/', api_views.TicketAPIDesatribuirView.as_view(), name='api_desatribuir'),
    path('<str:pk>/comentarios/', api_views.TicketAPIComentariosView.as_view(), name='api_comentarios'),
]
