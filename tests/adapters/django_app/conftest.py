"""
Fixtures dos testes de adapters Django.

- container: container de testes (repositórios em memória) injetado
  nas API Views
- api: atalho para requisições JSON com o papel no header
- ticket_model_factory / usuario_model_factory: registros no banco
"""

import json
import uuid
from unittest.mock import patch

import pytest


@pytest.fixture
def container(clock):
    """Container com Services reais sobre repositórios em memória."""
    from src.config.container import container_de_teste

    container = container_de_teste(clock)
    with patch('src.adapters.django_app.shared.api.get_container', return_value=container):
        yield container


@pytest.fixture
def tecnico_cadastrado(container, novo_usuario):
    usuario = novo_usuario()
    container.usuario_repository().save(usuario)
    return usuario


class ClienteAPI:
    """Django test Client com corpo JSON e header X-User-Role."""

    def __init__(self, client):
        self.client = client

    def _chamar(self, metodo, url, dados=None, papel=None):
        headers = {'X-User-Role': papel} if papel else {}
        response = getattr(self.client, metodo)(
            url,
            data=json.dumps(dados if dados is not None else {}),
            content_type='application/json',
            headers=headers,
        )
        return response, json.loads(response.content)

    def get(self, url, dados=None, papel=None):
        headers = {'X-User-Role': papel} if papel else {}
        response = self.client.get(url, data=dados or {}, headers=headers)
        return response, json.loads(response.content)

    def post(self, url, dados=None, papel=None):
        return self._chamar('post', url, dados, papel)

    def patch(self, url, dados=None, papel=None):
        return self._chamar('patch', url, dados, papel)

    def delete(self, url, papel=None):
        return self._chamar('delete', url, None, papel)


@pytest.fixture
def api(client):
    return ClienteAPI(client)


@pytest.fixture
def dados_ticket():
    return {
        'titulo': 'Sem acesso à rede',
        'descricao': 'Cabo desconectado na sala 12',
        'setor': 'Financeiro',
        'tipo_problema': 'Rede',
        'solicitante_nome': 'Maria Souza',
        'solicitante_email': 'maria@empresa.com',
    }


@pytest.fixture
def ticket_model_factory(instante_inicial):
    """Factory para criar TicketModel para testes."""
    from src.adapters.django_app.tickets.models import TicketModel

    numeros = iter(range(1, 10_000))

    def create(**kwargs):
        defaults = {
            'id': str(uuid.uuid4()),
            'numero': next(numeros),
            'titulo': 'Impressora não liga',
            'descricao': 'A impressora do 2º andar não liga',
            'setor': 'Financeiro',
            'tipo_problema': 'Hardware',
            'solicitante_nome': 'Maria Souza',
            'solicitante_email': 'maria@empresa.com',
            'status': 'waiting',
            'prioridade': 'waiting',
            'criado_em': instante_inicial,
            'atualizado_em': instante_inicial,
        }
        defaults.update(kwargs)
        return TicketModel.objects.create(**defaults)

    return create


@pytest.fixture
def usuario_model_factory(instante_inicial):
    from src.adapters.django_app.usuarios.models import UsuarioModel

    def create(**kwargs):
        defaults = {
            'id': str(uuid.uuid4()),
            'username': 'joao',
            'senha': 'segredo',
            'nome': 'João Lima',
            'email': 'joao@empresa.com',
            'papel': 'technician',
            'criado_em': instante_inicial,
        }
        defaults.update(kwargs)
        return UsuarioModel.objects.create(**defaults)

    return create
