"""
Configurações globais do Pytest para a Central de Chamados.

Django é configurado aqui (SQLite em memória, email locmem,
publisher síncrono) antes da coleta; pytest-django cuida do banco
de testes para os testes marcados com django_db.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest


FUSO = ZoneInfo("America/Sao_Paulo")


def pytest_configure(config):
    """Configura Django e registra markers."""
    import django
    from django.conf import settings

    if not settings.configured:
        settings.configure(
            DEBUG=True,
            SECRET_KEY='test-secret-key',
            DATABASES={
                'default': {
                    'ENGINE': 'django.db.backends.sqlite3',
                    'NAME': ':memory:',
                }
            },
            INSTALLED_APPS=[
                'django.contrib.contenttypes',
                'django.contrib.auth',
                'src.adapters.django_app.tickets',
                'src.adapters.django_app.usuarios',
            ],
            ROOT_URLCONF='src.config.urls',
            MIDDLEWARE=[],
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
            USE_TZ=True,
            TIME_ZONE='America/Sao_Paulo',
            PASSWORD_HASHERS=['django.contrib.auth.hashers.MD5PasswordHasher'],
            EMAIL_BACKEND='django.core.mail.backends.locmem.EmailBackend',
            DEFAULT_FROM_EMAIL='suporte@empresa.com',
            EVENT_PUBLISHER_MODE='sync',
        )
        django.setup()

    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (broker/SMTP reais)"
    )


def pytest_addoption(parser):
    """Adiciona opções de linha de comando."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="run integration tests",
    )


def pytest_collection_modifyitems(config, items):
    """Pula testes de integração sem --run-integration."""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="Integration tests require --run-integration")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


# =============================================================================
# Fixtures compartilhadas
# =============================================================================

@pytest.fixture
def instante_inicial():
    return datetime(2024, 3, 4, 9, 0, tzinfo=FUSO)


@pytest.fixture
def clock(instante_inicial):
    """Relógio fixo em 04/03/2024 09:00 (America/Sao_Paulo)."""
    from src.core.shared.clock import FixedClock
    return FixedClock(instante_inicial)


@pytest.fixture
def novo_ticket(clock):
    """Factory de TicketEntity válido."""
    from src.core.tickets.entities import TicketEntity

    numeros = iter(range(1, 10_000))

    def criar(**kwargs):
        dados = {
            'numero': next(numeros),
            'titulo': 'Impressora não liga',
            'descricao': 'A impressora do 2º andar não liga desde ontem',
            'setor': 'Financeiro',
            'tipo_problema': 'Hardware',
            'solicitante_nome': 'Maria Souza',
            'solicitante_email': 'maria@empresa.com',
            'agora': clock.agora(),
        }
        dados.update(kwargs)
        return TicketEntity.criar(**dados)

    return criar


@pytest.fixture
def novo_usuario(clock):
    """Factory de UsuarioEntity (senha já 'processada')."""
    from src.core.shared.papeis import PapelAtor
    from src.core.usuarios.entities import UsuarioEntity

    def criar(username='joao', nome='João Lima', papel=PapelAtor.TECNICO,
              email='joao@empresa.com', senha_hash='hash:segredo'):
        return UsuarioEntity.criar(
            username=username,
            senha_hash=senha_hash,
            nome=nome,
            papel=papel,
            agora=clock.agora(),
            email=email,
        )

    return criar
