"""
API Views JSON para o domínio de Tickets.

Endpoints (montados em /api/):
- GET  /tickets/ - Listar chamados (status, tecnico_id)
- POST /tickets/ - Abrir chamado
- GET  /tickets/estatisticas/ - Estatísticas (data_inicio, data_fim, setor)
- GET  /tickets/desempenho/ - Desempenho por técnico (mesmos filtros)
- GET  /tickets/<id>/ - Detalhes + comentários
- PATCH /tickets/<id>/prioridade/ - Alterar prioridade
- PATCH /tickets/<id>/status/ - Alterar status
- POST /tickets/<id>/atribuir/ - Atribuir técnico
- POST /tickets/<id>/desatribuir/ - Remover técnico
- POST /tickets/<id>/comentarios/ - Comentar

Formato:
- Entrada: JSON (validado por Django Forms)
- Saída: JSON com estrutura {success, data/error, meta}

Papel do ator: header X-User-Role (user, technician, admin).
"""

import logging

from django.http import HttpRequest, JsonResponse

from src.core.tickets.dtos import (
    AdicionarComentarioInputDTO,
    AlterarPrioridadeInputDTO,
    AlterarStatusInputDTO,
    AtribuirTicketInputDTO,
    CriarTicketInputDTO,
    DesatribuirTicketInputDTO,
    FiltroRelatorioDTO,
    ListarTicketsQueryDTO,
)

from ..shared.api import BaseAPIView, json_response, papel_da_requisicao, validar_form
from .forms import (
    ComentarioForm,
    RelatorioFiltroForm,
    TicketAtribuirForm,
    TicketCreateForm,
    TicketFiltroForm,
    TicketPrioridadeForm,
    TicketStatusForm,
)

logger = logging.getLogger(__name__)


def _filtro_relatorio(request: HttpRequest) -> FiltroRelatorioDTO:
    dados = validar_form(RelatorioFiltroForm(request.GET))
    return FiltroRelatorioDTO(
        data_inicio=dados.get('data_inicio'),
        data_fim=dados.get('data_fim'),
        setor=dados.get('setor') or None,
    )


class TicketAPIListView(BaseAPIView):
    """
    GET /api/tickets/ - Lista chamados
    POST /api/tickets/ - Abre chamado
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        """
        Query params:
        - status: waiting, open, in_progress ou resolved
        - tecnico_id: fila do técnico (atribuídos a ele e sem técnico)
        """
        try:
            filtros = validar_form(TicketFiltroForm(request.GET))

            tickets = self.get_service('listar_tickets_service').execute(
                ListarTicketsQueryDTO(
                    status=filtros.get('status') or None,
                    tecnico_id=filtros.get('tecnico_id') or None,
                )
            )

            return json_response(
                success=True,
                data=[t.to_dict() for t in tickets],
                meta={'total': len(tickets)},
            )

        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body JSON:
        {
            "titulo": "string",
            "descricao": "string",
            "setor": "string",
            "tipo_problema": "string",
            "solicitante_nome": "string",
            "solicitante_email": "email",
            "anexos": ["string"] (opcional)
        }
        """
        try:
            dados = validar_form(TicketCreateForm(self.parse_body(request)))

            output = self.get_service('criar_ticket_service').execute(
                CriarTicketInputDTO(
                    titulo=dados['titulo'],
                    descricao=dados['descricao'],
                    setor=dados['setor'],
                    tipo_problema=dados['tipo_problema'],
                    solicitante_nome=dados['solicitante_nome'],
                    solicitante_email=dados['solicitante_email'],
                    anexos=tuple(dados['anexos']),
                )
            )

            logger.info(f"API: Chamado #{output.numero} criado")

            return json_response(success=True, data=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIDetailView(BaseAPIView):
    """GET /api/tickets/<id>/"""

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            detalhes = self.get_service('obter_ticket_service').execute(pk)
            return json_response(success=True, data=detalhes.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIPrioridadeView(BaseAPIView):
    """PATCH /api/tickets/<id>/prioridade/"""

    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        """
        Body JSON:
        {
            "prioridade": "low|medium|high",
            "alterado_por": "string (opcional)"
        }
        """
        try:
            papel = papel_da_requisicao(request)
            dados = validar_form(TicketPrioridadeForm(self.parse_body(request)))

            output = self.get_service('alterar_prioridade_service').execute(
                AlterarPrioridadeInputDTO(
                    ticket_id=pk,
                    nova_prioridade=dados['prioridade'],
                    papel=papel.value,
                    alterado_por=dados['alterado_por'],
                )
            )

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIStatusView(BaseAPIView):
    """PATCH /api/tickets/<id>/status/"""

    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        """
        Body JSON:
        {
            "status": "waiting|open|in_progress|resolved",
            "alterado_por": "string (opcional, nome exibido ao solicitante)"
        }
        """
        try:
            papel = papel_da_requisicao(request)
            dados = validar_form(TicketStatusForm(self.parse_body(request)))

            output = self.get_service('alterar_status_service').execute(
                AlterarStatusInputDTO(
                    ticket_id=pk,
                    novo_status=dados['status'],
                    papel=papel.value,
                    alterado_por=dados['alterado_por'],
                )
            )

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIAtribuirView(BaseAPIView):
    """POST /api/tickets/<id>/atribuir/"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        """
        Body JSON:
        {
            "tecnico_id": "string"
        }
        """
        try:
            papel = papel_da_requisicao(request)
            dados = validar_form(TicketAtribuirForm(self.parse_body(request)))

            output = self.get_service('atribuir_ticket_service').execute(
                AtribuirTicketInputDTO(
                    ticket_id=pk,
                    tecnico_id=dados['tecnico_id'],
                    papel=papel.value,
                )
            )

            logger.info(f"API: Chamado #{output.numero} atribuído a {dados['tecnico_id']}")

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIDesatribuirView(BaseAPIView):
    """POST /api/tickets/<id>/desatribuir/"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            papel = papel_da_requisicao(request)

            output = self.get_service('desatribuir_ticket_service').execute(
                DesatribuirTicketInputDTO(ticket_id=pk, papel=papel.value)
            )

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIComentariosView(BaseAPIView):
    """POST /api/tickets/<id>/comentarios/"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        """
        Body JSON:
        {
            "conteudo": "string",
            "autor_nome": "string",
            "anexos": ["string"] (opcional)
        }
        """
        try:
            papel = papel_da_requisicao(request)
            dados = validar_form(ComentarioForm(self.parse_body(request)))

            output = self.get_service('adicionar_comentario_service').execute(
                AdicionarComentarioInputDTO(
                    ticket_id=pk,
                    conteudo=dados['conteudo'],
                    autor_nome=dados['autor_nome'],
                    papel=papel.value,
                    anexos=tuple(dados['anexos']),
                )
            )

            return json_response(success=True, data=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIEstatisticasView(BaseAPIView):
    """GET /api/tickets/estatisticas/"""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            resultado = self.get_service('obter_estatisticas_service').execute(
                _filtro_relatorio(request)
            )
            return json_response(success=True, data=resultado.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIDesempenhoView(BaseAPIView):
    """GET /api/tickets/desempenho/"""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            desempenho = self.get_service('obter_desempenho_tecnicos_service').execute(
                _filtro_relatorio(request)
            )
            return json_response(
                success=True,
                data=[d.to_dict() for d in desempenho],
                meta={'total': len(desempenho)},
            )

        except Exception as e:
            return self.handle_exception(e)
