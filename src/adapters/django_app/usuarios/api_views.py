"""
API Views JSON para o domínio de Usuários.

Endpoints:
- GET    /api/usuarios/ - Lista a equipe
- POST   /api/usuarios/ - Cadastra técnico/admin (somente admin)
- DELETE /api/usuarios/<id>/ - Remove usuário (somente admin)
- POST   /api/usuarios/login/ - Confere credenciais
"""

import logging

from django.http import HttpRequest, JsonResponse

from src.core.shared.exceptions import BusinessRuleViolationError
from src.core.shared.papeis import PapelAtor
from src.core.usuarios.dtos import AutenticarUsuarioInputDTO, CriarUsuarioInputDTO

from ..shared.api import BaseAPIView, json_response, papel_da_requisicao, validar_form
from .forms import LoginForm, UsuarioCreateForm

logger = logging.getLogger(__name__)


def _exigir_admin(request: HttpRequest) -> None:
    if papel_da_requisicao(request) != PapelAtor.ADMIN:
        raise BusinessRuleViolationError(
            "Apenas administradores podem gerenciar a equipe",
            rule="somente_admin",
        )


class UsuarioAPIListView(BaseAPIView):

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            equipe = self.get_service('listar_equipe_service').execute()
            return json_response(
                success=True,
                data=[u.to_dict() for u in equipe],
                meta={'total': len(equipe)},
            )

        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body JSON:
        {
            "username": "string",
            "senha": "string",
            "nome": "string",
            "email": "email" (opcional),
            "papel": "technician|admin" (opcional, padrão technician)
        }
        """
        try:
            _exigir_admin(request)
            dados = validar_form(UsuarioCreateForm(self.parse_body(request)))

            output = self.get_service('criar_usuario_service').execute(
                CriarUsuarioInputDTO(
                    username=dados['username'],
                    senha=dados['senha'],
                    nome=dados['nome'],
                    papel=dados['papel'],
                    email=dados.get('email') or None,
                )
            )

            return json_response(success=True, data=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class UsuarioAPIDetailView(BaseAPIView):

    def delete(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            _exigir_admin(request)
            self.get_service('remover_usuario_service').execute(pk)
            return json_response(success=True, data={'id': pk})

        except Exception as e:
            return self.handle_exception(e)


class UsuarioAPILoginView(BaseAPIView):

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body JSON:
        {
            "username": "string",
            "senha": "string"
        }
        """
        try:
            dados = validar_form(LoginForm(self.parse_body(request)))

            usuario = self.get_service('autenticar_usuario_service').execute(
                AutenticarUsuarioInputDTO(username=dados['username'], senha=dados['senha'])
            )

            return json_response(success=True, data=usuario.to_dict())

        except Exception as e:
            return self.handle_exception(e)
