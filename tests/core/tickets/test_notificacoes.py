"""
Testes do NotificacaoEventHandler (evento -> Notificador).
"""

import pytest

from src.core.shared.papeis import PapelAtor
from src.core.tickets.dtos import TicketOutputDTO
from src.core.tickets.events import (
    ComentarioAdicionadoEvent,
    TicketAtribuidoEvent,
    TicketCriadoEvent,
    TicketDesatribuidoEvent,
    TicketPrioridadeAlteradaEvent,
    TicketResolvidoEvent,
    TicketStatusAlteradoEvent,
    evento_from_dict,
)
from src.core.tickets.notificacoes import NotificacaoEventHandler
from src.core.tickets.ports import NotificadorNulo
from src.core.usuarios.ports import InMemoryUsuarioRepository


@pytest.fixture
def snapshot(novo_ticket):
    return TicketOutputDTO.from_entity(novo_ticket()).to_dict()


@pytest.fixture
def usuarios():
    return InMemoryUsuarioRepository()


@pytest.fixture
def notificador():
    return NotificadorNulo()


@pytest.fixture
def handler(notificador, usuarios):
    return NotificacaoEventHandler(notificador, usuarios)


class TestTicketCriado:

    def test_confirma_e_avisa_equipe_com_email(self, handler, notificador, usuarios, novo_usuario, snapshot):
        joao = novo_usuario()
        sem_email = novo_usuario(username="ana", nome="Ana Reis", email=None)
        usuarios.save(joao)
        usuarios.save(sem_email)

        ok = handler.processar(TicketCriadoEvent(aggregate_id=snapshot["id"], ticket=snapshot))

        assert ok is True
        assert notificador.metodos_chamados() == ["criacao", "criacao_equipe"]
        assert notificador.chamadas[1][2] == [joao]

    def test_sem_equipe_apenas_confirma(self, handler, notificador, snapshot):
        handler.processar(TicketCriadoEvent(aggregate_id=snapshot["id"], ticket=snapshot))

        assert notificador.metodos_chamados() == ["criacao"]

    def test_falha_de_envio_reportada(self, usuarios, snapshot):
        handler = NotificacaoEventHandler(NotificadorNulo(sucesso=False), usuarios)

        assert handler.processar(TicketCriadoEvent(aggregate_id=snapshot["id"], ticket=snapshot)) is False


class TestDemaisEventos:

    def test_atribuicao(self, handler, notificador, snapshot):
        evento = TicketAtribuidoEvent(
            aggregate_id=snapshot["id"],
            ticket=snapshot,
            tecnico_id="tec-1",
            tecnico_nome="João Lima",
            tecnico_email="joao@empresa.com",
        )

        assert handler.processar(evento)
        metodo, ticket, tecnico = notificador.chamadas[0]
        assert metodo == "atribuicao"
        assert ticket["numero"] == snapshot["numero"]
        assert tecnico["nome"] == "João Lima"

    @pytest.mark.parametrize("papel,notifica", [
        (PapelAtor.TECNICO.value, True),
        (PapelAtor.USUARIO.value, False),
        (PapelAtor.ADMIN.value, False),
    ])
    def test_comentario_so_de_tecnico(self, handler, notificador, snapshot, papel, notifica):
        evento = ComentarioAdicionadoEvent(
            aggregate_id=snapshot["id"],
            ticket=snapshot,
            comentario_id="c-1",
            autor_nome="João Lima",
            papel_autor=papel,
        )

        assert handler.processar(evento) is True
        assert (notificador.metodos_chamados() == ["comentario"]) is notifica

    def test_prioridade(self, handler, notificador, snapshot):
        handler.processar(TicketPrioridadeAlteradaEvent(
            aggregate_id=snapshot["id"],
            ticket=snapshot,
            prioridade_anterior="waiting",
            prioridade_nova="high",
            alterado_por="João Lima",
        ))

        assert notificador.chamadas == [("prioridade", snapshot, "high", "João Lima")]

    def test_resolucao(self, handler, notificador, snapshot):
        handler.processar(TicketResolvidoEvent(
            aggregate_id=snapshot["id"],
            ticket=snapshot,
            status_anterior="in_progress",
            resolvido_por="João Lima",
        ))

        assert notificador.chamadas == [("resolucao", snapshot, "João Lima")]

    @pytest.mark.parametrize("evento_cls", [TicketDesatribuidoEvent, TicketStatusAlteradoEvent])
    def test_eventos_sem_notificacao(self, handler, notificador, snapshot, evento_cls):
        assert handler.processar(evento_cls(aggregate_id=snapshot["id"], ticket=snapshot)) is True
        assert notificador.chamadas == []

    def test_excecao_do_notificador_vira_falha(self, usuarios, snapshot):
        class NotificadorQuebrado(NotificadorNulo):
            def notificar_resolucao(self, ticket, resolvido_por):
                raise RuntimeError("SMTP fora do ar")

        handler = NotificacaoEventHandler(NotificadorQuebrado(), usuarios)
        evento = TicketResolvidoEvent(aggregate_id=snapshot["id"], ticket=snapshot)

        assert handler.processar(evento) is False


class TestSerializacao:

    def test_evento_reconstruido_do_payload(self, snapshot):
        original = TicketResolvidoEvent(
            aggregate_id=snapshot["id"],
            ticket=snapshot,
            status_anterior="open",
            resolvido_por="Ana",
        )

        copia = evento_from_dict(original.to_dict())

        assert isinstance(copia, TicketResolvidoEvent)
        assert copia.event_id == original.event_id
        assert copia.resolvido_por == "Ana"
        assert copia.ticket == snapshot

    def test_tipo_desconhecido(self, snapshot):
        with pytest.raises(KeyError):
            evento_from_dict({"event_type": "TicketApagadoEvent", "aggregate_id": snapshot["id"]})


class TestNovasTentativas:
    """Cada tentativa reenvia só as partes que falharam."""

    @pytest.fixture
    def evento(self, snapshot):
        return TicketCriadoEvent(aggregate_id=snapshot["id"], ticket=snapshot)

    def test_falha_da_equipe_nao_repete_confirmacao(self, usuarios, novo_usuario, evento):
        class EquipeFora(NotificadorNulo):
            def notificar_criacao_equipe(self, ticket, equipe):
                self._registrar("criacao_equipe", ticket, list(equipe))
                return False

        notificador = EquipeFora()
        usuarios.save(novo_usuario())
        handler = NotificacaoEventHandler(notificador, usuarios)
        entregues = set()

        # primeira execução + 3 novas tentativas
        resultados = [handler.processar(evento, entregues) for _ in range(4)]

        assert resultados == [False] * 4
        assert notificador.metodos_chamados().count("criacao") == 1
        assert notificador.metodos_chamados().count("criacao_equipe") == 4
        assert entregues == {"solicitante"}

    def test_falha_do_solicitante_nao_repete_aviso_a_equipe(self, usuarios, novo_usuario, evento):
        class SolicitanteFora(NotificadorNulo):
            def notificar_criacao(self, ticket):
                self._registrar("criacao", ticket)
                return False

        notificador = SolicitanteFora()
        joao = novo_usuario()
        ana = novo_usuario(username="ana", nome="Ana Reis", email="ana@empresa.com")
        usuarios.save(joao)
        usuarios.save(ana)
        handler = NotificacaoEventHandler(notificador, usuarios)
        entregues = set()

        for _ in range(4):
            handler.processar(evento, entregues)

        assert notificador.metodos_chamados().count("criacao") == 4
        assert notificador.metodos_chamados().count("criacao_equipe") == 2
        assert entregues == {f"equipe:{joao.id}", f"equipe:{ana.id}"}

    def test_reenvia_so_ao_membro_que_falhou(self, usuarios, novo_usuario, evento):
        joao = novo_usuario()
        ana = novo_usuario(username="ana", nome="Ana Reis", email="ana@empresa.com")

        class CaixaDaAnaCheia(NotificadorNulo):
            def notificar_criacao_equipe(self, ticket, equipe):
                self._registrar("criacao_equipe", ticket, list(equipe))
                return equipe[0].id != ana.id

        notificador = CaixaDaAnaCheia()
        usuarios.save(joao)
        usuarios.save(ana)
        handler = NotificacaoEventHandler(notificador, usuarios)
        entregues = set()

        assert handler.processar(evento, entregues) is False
        notificador.chamadas.clear()
        assert handler.processar(evento, entregues) is False

        assert [c[2] for c in notificador.chamadas] == [[ana]]

    def test_parte_ja_entregue_conta_como_sucesso(self, handler, notificador, snapshot):
        evento = TicketResolvidoEvent(aggregate_id=snapshot["id"], ticket=snapshot, resolvido_por="Ana")

        assert handler.processar(evento, {"solicitante"}) is True
        assert notificador.chamadas == []
