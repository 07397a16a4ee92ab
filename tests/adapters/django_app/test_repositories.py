"""
Testes dos repositórios Django (SQLite em memória via pytest-django).

Coverage:
- Ida e volta Entity -> Model -> Entity
- UPDATE condicional por versão (ConcurrencyError)
- Número público único e sequencial
- Fila do técnico, comentários e exclusão em cascata
- Repositório e hasher de usuários
"""

from datetime import timedelta

import pytest

from src.adapters.django_app.tickets.models import ComentarioModel, TicketModel
from src.adapters.django_app.tickets.repositories import (
    DjangoComentarioRepository,
    DjangoTicketRepository,
)
from src.adapters.django_app.usuarios.hashers import DjangoPasswordHasher
from src.adapters.django_app.usuarios.repositories import DjangoUsuarioRepository
from src.core.shared.exceptions import ConcurrencyError, EntityNotFoundError
from src.core.shared.papeis import PapelAtor
from src.core.tickets.valores import TicketPriority, TicketStatus, TipoAutor


pytestmark = pytest.mark.django_db


@pytest.fixture
def repo():
    return DjangoTicketRepository()


@pytest.fixture
def comentario_repo():
    return DjangoComentarioRepository()


class TestDjangoTicketRepository:

    def test_save_e_get_by_id(self, repo, novo_ticket):
        ticket = novo_ticket(anexos=["uploads/foto.png"])

        repo.save(ticket)
        carregado = repo.get_by_id(ticket.id)

        assert carregado.numero == ticket.numero
        assert carregado.titulo == ticket.titulo
        assert carregado.status == TicketStatus.AGUARDANDO
        assert carregado.prioridade == TicketPriority.AGUARDANDO
        assert carregado.criado_em == ticket.criado_em
        assert carregado.anexos == ["uploads/foto.png"]
        assert carregado.versao == 1

    def test_get_by_id_inexistente(self, repo):
        assert repo.get_by_id("nao-existe") is None

    def test_numero_duplicado_vira_conflito(self, repo, novo_ticket):
        repo.save(novo_ticket(numero=7))

        with pytest.raises(ConcurrencyError):
            repo.save(novo_ticket(numero=7))

        assert TicketModel.objects.count() == 1

    def test_proximo_numero(self, repo, novo_ticket):
        assert repo.proximo_numero() == 1

        repo.save(novo_ticket(numero=1))
        repo.save(novo_ticket(numero=5))

        assert repo.proximo_numero() == 6

    def test_atualizar_incrementa_versao(self, repo, novo_ticket, clock):
        ticket = novo_ticket()
        repo.save(ticket)

        ticket.atribuir_a("tec-1", PapelAtor.TECNICO, clock.avancar(minutos=20))
        repo.atualizar(ticket, 1)

        carregado = repo.get_by_id(ticket.id)
        assert ticket.versao == 2
        assert carregado.versao == 2
        assert carregado.atribuido_a_id == "tec-1"
        assert carregado.status == TicketStatus.EM_ANDAMENTO
        assert carregado.aceito_em == clock.agora()

    def test_atualizar_com_versao_antiga(self, repo, novo_ticket, clock):
        ticket = novo_ticket()
        repo.save(ticket)
        primeira = repo.get_by_id(ticket.id)
        segunda = repo.get_by_id(ticket.id)

        primeira.atribuir_a("tec-1", PapelAtor.TECNICO, clock.agora())
        repo.atualizar(primeira, 1)

        segunda.atribuir_a("tec-2", PapelAtor.TECNICO, clock.agora())
        with pytest.raises(ConcurrencyError):
            repo.atualizar(segunda, 1)

        assert repo.get_by_id(ticket.id).atribuido_a_id == "tec-1"

    def test_atualizar_removido(self, repo, novo_ticket):
        ticket = novo_ticket()

        with pytest.raises(EntityNotFoundError):
            repo.atualizar(ticket, 1)

    def test_listagens(self, repo, novo_ticket, clock):
        meu = novo_ticket()
        meu.atribuir_a("tec-1", PapelAtor.TECNICO, clock.agora())
        livre = novo_ticket()
        alheio = novo_ticket()
        alheio.atribuir_a("tec-2", PapelAtor.TECNICO, clock.agora())
        for ticket in (meu, livre, alheio):
            repo.save(ticket)

        assert len(repo.list_all()) == 3
        assert {t.id for t in repo.list_by_status(TicketStatus.EM_ANDAMENTO)} == {meu.id, alheio.id}
        assert {t.id for t in repo.list_fila_tecnico("tec-1")} == {meu.id, livre.id}

    def test_comentarios_removidos_em_cascata(self, repo, comentario_repo, novo_ticket, clock):
        ticket = novo_ticket()
        repo.save(ticket)
        comentario_repo.add(ticket.comentar("Oi", "Maria", PapelAtor.USUARIO, clock.agora()))

        TicketModel.objects.filter(id=ticket.id).delete()

        assert repo.get_by_id(ticket.id) is None
        assert ComentarioModel.objects.count() == 0


class TestDjangoComentarioRepository:

    def test_comentarios_em_ordem_cronologica(self, repo, comentario_repo, novo_ticket, clock):
        ticket = novo_ticket()
        repo.save(ticket)
        segundo = ticket.comentar("Segundo", "João", PapelAtor.TECNICO, clock.agora() + timedelta(minutes=5))
        primeiro = ticket.comentar("Primeiro", "Maria", PapelAtor.USUARIO, clock.agora(), anexos=["log.txt"])
        comentario_repo.add(segundo)
        comentario_repo.add(primeiro)

        comentarios = comentario_repo.list_by_ticket(ticket.id)

        assert [c.conteudo for c in comentarios] == ["Primeiro", "Segundo"]
        assert comentarios[0].tipo_autor == TipoAutor.USUARIO
        assert comentarios[0].anexos == ["log.txt"]
        assert comentarios[1].tipo_autor == TipoAutor.TECNICO


class TestDjangoUsuarioRepository:

    def test_save_get_e_atualizacao(self, novo_usuario):
        repo = DjangoUsuarioRepository()
        usuario = novo_usuario()

        repo.save(usuario)
        usuario.trocar_credencial("pbkdf2_sha256$novo")
        repo.save(usuario)

        carregado = repo.get_by_username("joao")
        assert carregado.id == usuario.id
        assert carregado.senha == "pbkdf2_sha256$novo"
        assert carregado.papel == PapelAtor.TECNICO
        assert repo.get_by_id(usuario.id).nome == "João Lima"

    def test_username_duplicado(self, novo_usuario):
        repo = DjangoUsuarioRepository()
        repo.save(novo_usuario(username="joao"))

        with pytest.raises(ConcurrencyError):
            repo.save(novo_usuario(username="joao", nome="Outro João"))

    def test_list_equipe_por_nome(self, novo_usuario):
        repo = DjangoUsuarioRepository()
        repo.save(novo_usuario(username="zeca", nome="zeca Alves"))
        repo.save(novo_usuario(username="ana", nome="Ana Reis", papel=PapelAtor.ADMIN))

        assert [u.username for u in repo.list_equipe()] == ["ana", "zeca"]

    def test_delete(self, novo_usuario):
        repo = DjangoUsuarioRepository()
        usuario = novo_usuario()
        repo.save(usuario)

        assert repo.delete(usuario.id) is True
        assert repo.delete(usuario.id) is False
        assert repo.get_by_id(usuario.id) is None


class TestDjangoPasswordHasher:

    def test_hash_e_verificacao(self):
        hasher = DjangoPasswordHasher()
        armazenada = hasher.hash("segredo")

        assert armazenada != "segredo"
        assert hasher.eh_legado(armazenada) is False
        assert hasher.verificar("segredo", armazenada) is True
        assert hasher.verificar("errada", armazenada) is False

    def test_credencial_legada(self):
        hasher = DjangoPasswordHasher()

        assert hasher.eh_legado("segredo") is True
        assert hasher.verificar("segredo", "segredo") is True
        assert hasher.verificar("outra", "segredo") is False

    def test_credencial_vazia(self):
        hasher = DjangoPasswordHasher()

        assert hasher.eh_legado("") is False
        assert hasher.verificar("", "") is False
