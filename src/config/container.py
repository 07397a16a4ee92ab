"""
Dependency Injection Container.

Configura as dependências da aplicação com dependency-injector.
Implementações são importadas dentro dos providers (lazy) para que o
Core e os Models só sejam carregados quando o Django já está pronto.

Padrões:
- Singleton: repositórios, relógio, notificador, publisher
- Factory: Unit of Work e Services (nova instância por chamada)
"""

from typing import Optional

from dependency_injector import containers, providers


def _importar(modulo: str, nome: str):
    return getattr(__import__(modulo, fromlist=[nome]), nome)


def _settings(nome: str, padrao=None):
    from django.conf import settings
    return getattr(settings, nome, padrao)


TICKETS_USE_CASES = 'src.core.tickets.use_cases'
USUARIOS_USE_CASES = 'src.core.usuarios.use_cases'


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Repositories: persistência Django
    - Infrastructure: relógio, hasher, notificador, publisher
    - Unit of Work: transações (eventos publicados após commit)
    - Services: Use Cases

    Example:
        from src.config.container import get_container

        service = get_container().criar_ticket_service()
        result = service.execute(input_dto)
    """

    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================

    ticket_repository = providers.Singleton(
        lambda: _importar('src.adapters.django_app.tickets.repositories', 'DjangoTicketRepository')()
    )

    comentario_repository = providers.Singleton(
        lambda: _importar('src.adapters.django_app.tickets.repositories', 'DjangoComentarioRepository')()
    )

    usuario_repository = providers.Singleton(
        lambda: _importar('src.adapters.django_app.usuarios.repositories', 'DjangoUsuarioRepository')()
    )

    # =========================================================================
    # Infrastructure
    # =========================================================================

    clock = providers.Singleton(
        lambda: _importar('src.core.shared.clock', 'SystemClock')(
            _settings('TIME_ZONE', 'America/Sao_Paulo')
        )
    )

    password_hasher = providers.Singleton(
        lambda: _importar('src.adapters.django_app.usuarios.hashers', 'DjangoPasswordHasher')()
    )

    notificador = providers.Singleton(
        lambda: _importar('src.adapters.django_app.notificacoes.email', 'DjangoEmailNotificador')()
    )

    notificacao_handler = providers.Singleton(
        lambda notificador, usuario_repo: _importar('src.core.tickets.notificacoes', 'NotificacaoEventHandler')(
            notificador=notificador,
            usuario_repo=usuario_repo,
        ),
        notificador=notificador,
        usuario_repo=usuario_repository,
    )

    # 'sync' notifica no próprio processo; 'celery' enfileira para os workers
    event_publisher = providers.Singleton(
        lambda handler: _importar('src.adapters.django_app.events.publishers', 'get_event_publisher')(
            mode=_settings('EVENT_PUBLISHER_MODE', 'sync'),
            processador=handler.processar,
        ),
        handler=notificacao_handler,
    )

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        lambda event_publisher: _importar('src.adapters.django_app.shared.unit_of_work', 'DjangoUnitOfWork')(
            event_publisher=event_publisher,
        ),
        event_publisher=event_publisher,
    )

    # =========================================================================
    # Services / Use Cases - Tickets
    # =========================================================================

    criar_ticket_service = providers.Factory(
        lambda ticket_repo, uow, clock: _importar(TICKETS_USE_CASES, 'CriarTicketService')(
            ticket_repo=ticket_repo,
            uow=uow,
            clock=clock,
        ),
        ticket_repo=ticket_repository,
        uow=unit_of_work,
        clock=clock,
    )

    # Leitura (sem UoW)
    obter_ticket_service = providers.Factory(
        lambda ticket_repo, comentario_repo, usuario_repo: _importar(TICKETS_USE_CASES, 'ObterTicketService')(
            ticket_repo=ticket_repo,
            comentario_repo=comentario_repo,
            usuario_repo=usuario_repo,
        ),
        ticket_repo=ticket_repository,
        comentario_repo=comentario_repository,
        usuario_repo=usuario_repository,
    )

    listar_tickets_service = providers.Factory(
        lambda ticket_repo: _importar(TICKETS_USE_CASES, 'ListarTicketsService')(
            ticket_repo=ticket_repo,
        ),
        ticket_repo=ticket_repository,
    )

    atribuir_ticket_service = providers.Factory(
        lambda ticket_repo, usuario_repo, uow, clock: _importar(TICKETS_USE_CASES, 'AtribuirTicketService')(
            ticket_repo=ticket_repo,
            usuario_repo=usuario_repo,
            uow=uow,
            clock=clock,
        ),
        ticket_repo=ticket_repository,
        usuario_repo=usuario_repository,
        uow=unit_of_work,
        clock=clock,
    )

    desatribuir_ticket_service = providers.Factory(
        lambda ticket_repo, uow, clock: _importar(TICKETS_USE_CASES, 'DesatribuirTicketService')(
            ticket_repo=ticket_repo,
            uow=uow,
            clock=clock,
        ),
        ticket_repo=ticket_repository,
        uow=unit_of_work,
        clock=clock,
    )

    alterar_status_service = providers.Factory(
        lambda ticket_repo, uow, clock: _importar(TICKETS_USE_CASES, 'AlterarStatusService')(
            ticket_repo=ticket_repo,
            uow=uow,
            clock=clock,
        ),
        ticket_repo=ticket_repository,
        uow=unit_of_work,
        clock=clock,
    )

    alterar_prioridade_service = providers.Factory(
        lambda ticket_repo, uow, clock: _importar(TICKETS_USE_CASES, 'AlterarPrioridadeService')(
            ticket_repo=ticket_repo,
            uow=uow,
            clock=clock,
        ),
        ticket_repo=ticket_repository,
        uow=unit_of_work,
        clock=clock,
    )

    adicionar_comentario_service = providers.Factory(
        lambda ticket_repo, comentario_repo, uow, clock: _importar(TICKETS_USE_CASES, 'AdicionarComentarioService')(
            ticket_repo=ticket_repo,
            comentario_repo=comentario_repo,
            uow=uow,
            clock=clock,
        ),
        ticket_repo=ticket_repository,
        comentario_repo=comentario_repository,
        uow=unit_of_work,
        clock=clock,
    )

    # Relatórios
    obter_estatisticas_service = providers.Factory(
        lambda ticket_repo, clock: _importar(TICKETS_USE_CASES, 'ObterEstatisticasService')(
            ticket_repo=ticket_repo,
            clock=clock,
        ),
        ticket_repo=ticket_repository,
        clock=clock,
    )

    obter_desempenho_tecnicos_service = providers.Factory(
        lambda ticket_repo, usuario_repo, clock: _importar(TICKETS_USE_CASES, 'ObterDesempenhoTecnicosService')(
            ticket_repo=ticket_repo,
            usuario_repo=usuario_repo,
            clock=clock,
        ),
        ticket_repo=ticket_repository,
        usuario_repo=usuario_repository,
        clock=clock,
    )

    # =========================================================================
    # Services / Use Cases - Usuários
    # =========================================================================

    criar_usuario_service = providers.Factory(
        lambda usuario_repo, hasher, uow, clock: _importar(USUARIOS_USE_CASES, 'CriarUsuarioService')(
            usuario_repo=usuario_repo,
            hasher=hasher,
            uow=uow,
            clock=clock,
        ),
        usuario_repo=usuario_repository,
        hasher=password_hasher,
        uow=unit_of_work,
        clock=clock,
    )

    remover_usuario_service = providers.Factory(
        lambda usuario_repo, uow: _importar(USUARIOS_USE_CASES, 'RemoverUsuarioService')(
            usuario_repo=usuario_repo,
            uow=uow,
        ),
        usuario_repo=usuario_repository,
        uow=unit_of_work,
    )

    listar_equipe_service = providers.Factory(
        lambda usuario_repo: _importar(USUARIOS_USE_CASES, 'ListarEquipeService')(
            usuario_repo=usuario_repo,
        ),
        usuario_repo=usuario_repository,
    )

    autenticar_usuario_service = providers.Factory(
        lambda usuario_repo, hasher, uow: _importar(USUARIOS_USE_CASES, 'AutenticarUsuarioService')(
            usuario_repo=usuario_repo,
            hasher=hasher,
            uow=uow,
        ),
        usuario_repo=usuario_repository,
        hasher=password_hasher,
        uow=unit_of_work,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir (lazy initialization).
    """
    global _container

    if _container is None:
        _container = Container()

    return _container


def reset_container() -> None:
    """Descarta o container global (para testes)."""
    global _container
    _container = None


# =============================================================================
# Container de testes
# =============================================================================

def container_de_teste(clock=None) -> Container:
    """
    Container para testes com implementações em memória.

    Os Services são os reais; repositórios, relógio, notificador e
    Unit of Work são sobrescritos. Eventos são processados na hora
    (publisher síncrono) e registrados pelo NotificadorNulo.

    Example:
        container = container_de_teste(FixedClock(instante))
        container.criar_ticket_service().execute(input_dto)
        assert container.notificador().metodos_chamados() == ["criacao"]
    """
    from src.core.shared.clock import SystemClock

    container = Container()

    container.comentario_repository.override(
        providers.Singleton(
            lambda: _importar('src.core.tickets.ports', 'InMemoryComentarioRepository')()
        )
    )
    container.ticket_repository.override(
        providers.Singleton(
            lambda: _importar('src.core.tickets.ports', 'InMemoryTicketRepository')()
        )
    )
    container.usuario_repository.override(
        providers.Singleton(
            lambda: _importar('src.core.usuarios.ports', 'InMemoryUsuarioRepository')()
        )
    )
    container.clock.override(providers.Object(clock or SystemClock()))
    container.notificador.override(
        providers.Singleton(
            lambda: _importar('src.core.tickets.ports', 'NotificadorNulo')()
        )
    )
    container.event_publisher.override(
        providers.Singleton(
            lambda handler: _importar('src.adapters.django_app.events.publishers', 'LoggingEventPublisher')(
                processador=handler.processar,
            ),
            handler=container.notificacao_handler,
        )
    )
    container.unit_of_work.override(
        providers.Factory(
            lambda event_publisher: _importar('src.adapters.django_app.shared.unit_of_work', 'InMemoryUnitOfWork')(
                event_publisher=event_publisher,
            ),
            event_publisher=container.event_publisher,
        )
    )

    return container
