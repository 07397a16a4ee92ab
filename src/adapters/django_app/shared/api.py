"""
Infraestrutura comum das API Views JSON.

- json_response: envelope {success, data/error, meta}
- parse_json_body: corpo JSON da requisição
- papel_da_requisicao: papel do ator (header X-User-Role)
- validar_form: erros de Django Form viram ValidationError do domínio
- BaseAPIView: acesso ao container e mapeamento exceção -> status HTTP
"""

import json
import logging
from typing import Any, Dict

from django import forms
from django.core.exceptions import NON_FIELD_ERRORS
from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from src.config.container import get_container
from src.core.shared.exceptions import (
    AuthenticationError,
    BusinessRuleViolationError,
    ConcurrencyError,
    DependencyFailureError,
    DomainException,
    EntityNotFoundError,
    ValidationError,
)
from src.core.shared.papeis import PapelAtor

logger = logging.getLogger(__name__)

HEADER_PAPEL = 'X-User-Role'


def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, meta: Dict = None) -> JsonResponse:
    """
    Cria resposta JSON padronizada.

    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: Mensagem de erro (se aplicável)
        status: HTTP status code
        meta: Metadados adicionais
    """
    response = {'success': success}

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    if meta is not None:
        response['meta'] = meta

    return JsonResponse(response, status=status, safe=False)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Raises:
        ValidationError: Se o corpo não é um objeto JSON
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"JSON inválido: {e}")

    if not isinstance(data, dict):
        raise ValidationError("Corpo da requisição deve ser um objeto JSON")
    return data


def papel_da_requisicao(request: HttpRequest) -> PapelAtor:
    """Papel do ator; sem header a requisição é tratada como solicitante."""
    return PapelAtor.from_string(request.headers.get(HEADER_PAPEL) or PapelAtor.USUARIO.value)


def validar_form(form: forms.Form) -> Dict[str, Any]:
    """
    Returns:
        form.cleaned_data

    Raises:
        ValidationError: Com o primeiro erro do form
    """
    if form.is_valid():
        return form.cleaned_data

    campo, erros = next(iter(form.errors.items()))
    raise ValidationError(
        erros[0],
        field=None if campo == NON_FIELD_ERRORS else campo,
    )


# =============================================================================
# Base API View
# =============================================================================

STATUS_POR_EXCECAO = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (BusinessRuleViolationError, 403),
    (EntityNotFoundError, 404),
    (ConcurrencyError, 409),
    (DependencyFailureError, 500),
)


@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Parsing de JSON
    - Acesso ao container DI
    - Tratamento de erros padronizado
    """

    def get_container(self):
        return get_container()

    def get_service(self, service_name: str):
        """Obtém provider do container e cria a instância."""
        return getattr(self.get_container(), service_name)()

    def parse_body(self, request: HttpRequest) -> Dict:
        return parse_json_body(request)

    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Trata exceções e retorna resposta apropriada.

        Erros de domínio usam STATUS_POR_EXCECAO; qualquer outra
        exceção é registrada com traceback e responde 500.
        """
        if isinstance(e, DomainException):
            status = next(
                (codigo for tipo, codigo in STATUS_POR_EXCECAO if isinstance(e, tipo)),
                400,
            )
            if status >= 500:
                logger.error(f"Falha de dependência na API: {e}")
                return json_response(
                    success=False,
                    error="Serviço temporariamente indisponível",
                    status=status,
                    meta=e.to_dict(),
                )
            return json_response(
                success=False,
                error=e.message,
                status=status,
                meta=e.to_dict(),
            )

        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(
            success=False,
            error="Erro interno do servidor",
            status=500,
        )
