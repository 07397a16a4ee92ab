"""
Testes de Integração End-to-End.

Fluxo completo com as implementações reais:
- Request HTTP → View → Use Case → Repository Django → Banco
- Domain Events → Publisher síncrono → NotificacaoEventHandler → E-mail

Só o relógio é substituído (FixedClock). Os e-mails vão para o
backend locmem (fixture mailoutbox).

Os testes marcados com `integration` usam broker real e só rodam
com --run-integration.
"""

import json
from unittest.mock import patch

import pytest
from dependency_injector import providers
from django.contrib.auth.hashers import check_password

from src.adapters.django_app.tickets.models import ComentarioModel, TicketModel
from src.adapters.django_app.usuarios.models import UsuarioModel
from src.config.container import Container
from src.core.tickets.dtos import AdicionarComentarioInputDTO, CriarTicketInputDTO


pytestmark = pytest.mark.django_db


@pytest.fixture
def container(clock):
    container = Container()
    container.clock.override(providers.Object(clock))
    with patch('src.adapters.django_app.shared.api.get_container', return_value=container):
        yield container


@pytest.fixture
def usuario_legado(instante_inicial):
    return UsuarioModel.objects.create(
        id='00000000-0000-0000-0000-000000000001',
        username='legado',
        senha='antiga',
        nome='Conta Antiga',
        papel='technician',
        criado_em=instante_inicial,
    )


def _json(client, metodo, url, dados=None, papel=None):
    headers = {'X-User-Role': papel} if papel else {}
    if metodo == 'get':
        response = client.get(url, data=dados or {}, headers=headers)
    else:
        response = getattr(client, metodo)(
            url,
            data=json.dumps(dados or {}),
            content_type='application/json',
            headers=headers,
        )
    return response.status_code, json.loads(response.content)


class TestCicloDeVidaCompleto:

    def test_abrir_atender_resolver(self, client, container, clock, mailoutbox):
        # Admin cadastra técnico
        status, tecnico = _json(client, 'post', '/api/usuarios/', {
            'username': 'joao',
            'senha': 's3nha',
            'nome': 'João Lima',
            'email': 'joao@empresa.com',
        }, papel='admin')
        assert status == 201
        tecnico_id = tecnico['data']['id']

        # Solicitante abre chamado: confirmação + aviso à equipe
        status, criado = _json(client, 'post', '/api/tickets/', {
            'titulo': 'Impressora não liga',
            'descricao': 'A impressora do 2º andar não liga',
            'setor': 'Financeiro',
            'tipo_problema': 'Hardware',
            'solicitante_nome': 'Maria Souza',
            'solicitante_email': 'maria@empresa.com',
        })
        assert status == 201
        ticket_id = criado['data']['id']
        assert TicketModel.objects.get(id=ticket_id).numero == 1
        assert [m.to for m in mailoutbox] == [['maria@empresa.com'], ['joao@empresa.com']]

        # Solicitante comenta antes do aceite: sem e-mail
        status, _ = _json(client, 'post', f'/api/tickets/{ticket_id}/comentarios/', {
            'conteudo': 'É urgente, temos fechamento hoje',
            'autor_nome': 'Maria Souza',
        })
        assert status == 201
        assert len(mailoutbox) == 2

        # Técnico define prioridade e assume
        clock.avancar(minutos=20)
        _json(client, 'patch', f'/api/tickets/{ticket_id}/prioridade/',
              {'prioridade': 'high', 'alterado_por': 'João Lima'}, papel='technician')
        status, atribuido = _json(client, 'post', f'/api/tickets/{ticket_id}/atribuir/',
                                  {'tecnico_id': tecnico_id}, papel='technician')
        assert status == 200
        assert atribuido['data']['versao'] == 3
        assert mailoutbox[-1].subject == 'Chamado #1 foi aceito por um técnico'

        # Técnico comenta e resolve
        clock.avancar(minutos=40)
        _json(client, 'post', f'/api/tickets/{ticket_id}/comentarios/',
              {'conteudo': 'Troquei o fusível', 'autor_nome': 'João Lima'}, papel='technician')
        status, resolvido = _json(client, 'patch', f'/api/tickets/{ticket_id}/status/',
                                  {'status': 'resolved', 'alterado_por': 'João Lima'}, papel='technician')
        assert status == 200
        assert resolvido['data']['tempo_espera_minutos'] == 20
        assert resolvido['data']['tempo_trabalho_minutos'] == 40

        assert [m.subject for m in mailoutbox[2:]] == [
            'Prioridade do chamado #1 foi alterada',
            'Chamado #1 foi aceito por um técnico',
            'Nova atualização no chamado #1',
            'Chamado #1 foi finalizado',
        ]

        # Chamado resolvido fica imutável para o técnico
        status, erro = _json(client, 'patch', f'/api/tickets/{ticket_id}/status/',
                             {'status': 'open'}, papel='technician')
        assert status == 403
        assert erro['meta']['rule'] == 'chamado_resolvido_imutavel'

        # Detalhes e relatórios
        _, detalhes = _json(client, 'get', f'/api/tickets/{ticket_id}/')
        assert [c['tipo_autor'] for c in detalhes['data']['comentarios']] == ['user', 'technician']
        assert detalhes['data']['atribuido_a']['nome'] == 'João Lima'

        _, estatisticas = _json(client, 'get', '/api/tickets/estatisticas/')
        assert estatisticas['data']['por_status']['resolved'] == 1
        assert estatisticas['data']['tempo_medio_resolucao_minutos'] == 40
        assert estatisticas['data']['distribuicao_prioridade']['high'] == 100

        _, desempenho = _json(client, 'get', '/api/tickets/desempenho/')
        assert desempenho['data'][0]['taxa_resolucao'] == 100

    def test_remover_tecnico_preserva_historico(self, client, container):
        _, tecnico = _json(client, 'post', '/api/usuarios/', {
            'username': 'ana', 'senha': 'x', 'nome': 'Ana Reis',
        }, papel='admin')
        _, criado = _json(client, 'post', '/api/tickets/', {
            'titulo': 'Sem rede',
            'descricao': 'Cabo solto',
            'setor': 'RH',
            'tipo_problema': 'Rede',
            'solicitante_nome': 'Carlos',
            'solicitante_email': 'carlos@empresa.com',
        })
        ticket_id = criado['data']['id']
        _json(client, 'post', f'/api/tickets/{ticket_id}/atribuir/',
              {'tecnico_id': tecnico['data']['id']}, papel='technician')

        status, _ = _json(client, 'delete', f"/api/usuarios/{tecnico['data']['id']}/", papel='admin')
        assert status == 200

        _, detalhes = _json(client, 'get', f'/api/tickets/{ticket_id}/')
        assert detalhes['data']['atribuido_a'] is None
        assert detalhes['data']['atribuido_a_id'] == tecnico['data']['id']

        _, desempenho = _json(client, 'get', '/api/tickets/desempenho/')
        assert desempenho['data'][0]['tecnico_nome'] == 'Técnico'

    def test_login_migra_senha_legada(self, client, container, usuario_legado):
        status, body = _json(client, 'post', '/api/usuarios/login/', {'username': 'legado', 'senha': 'antiga'})

        assert status == 200
        assert body['data']['username'] == 'legado'

        migrada = UsuarioModel.objects.get(id=usuario_legado.id).senha
        assert migrada != 'antiga'
        assert check_password('antiga', migrada)

    def test_cascata_de_comentarios(self, container):
        criado = container.criar_ticket_service().execute(CriarTicketInputDTO(
            titulo='Teclado', descricao='Teclas falhando', setor='TI',
            tipo_problema='Hardware', solicitante_nome='Bia',
            solicitante_email='bia@empresa.com',
        ))
        container.adicionar_comentario_service().execute(AdicionarComentarioInputDTO(
            ticket_id=criado.id, conteudo='Ainda falhando', autor_nome='Bia', papel='user',
        ))

        assert ComentarioModel.objects.filter(ticket_id=criado.id).count() == 1
        TicketModel.objects.filter(id=criado.id).delete()
        assert ComentarioModel.objects.count() == 0


@pytest.mark.integration
class TestCeleryIntegration:
    """Requer broker acessível em CELERY_BROKER_URL."""

    def test_evento_enfileirado(self):
        from src.adapters.django_app.events.handlers import dispatch_domain_event

        resultado = dispatch_domain_event.delay('TicketStatusAlteradoEvent', {})

        assert resultado.id
