"""
Testes Unitários para Entidades e Políticas do Domínio de Tickets.

Coverage:
- TicketEntity.criar(): validações e valores iniciais
- atribuir_a / desatribuir: status e timestamps
- alterar_status: tabela de transições por papel
- alterar_prioridade: valores aceitos e chamados resolvidos
- comentar / pode_comentar: quem comenta em cada estado
- problemas_de_integridade
"""

from datetime import timedelta

import pytest

from src.core.shared.exceptions import BusinessRuleViolationError, ValidationError
from src.core.shared.papeis import PapelAtor
from src.core.tickets import politicas
from src.core.tickets.entities import TicketEntity
from src.core.tickets.valores import TicketPriority, TicketStatus, TipoAutor


USER = PapelAtor.USUARIO
TECH = PapelAtor.TECNICO
ADMIN = PapelAtor.ADMIN


class TestTicketEntityCriacao:

    def test_criar_ticket_valido(self, novo_ticket, clock):
        ticket = novo_ticket(titulo="  Sem rede  ", anexos=["uploads/foto.png", ""])

        assert len(ticket.id) == 36
        assert ticket.titulo == "Sem rede"
        assert ticket.status == TicketStatus.AGUARDANDO
        assert ticket.prioridade == TicketPriority.AGUARDANDO
        assert ticket.atribuido_a_id is None
        assert ticket.aceito_em is None
        assert ticket.resolvido_em is None
        assert ticket.criado_em == clock.agora()
        assert ticket.atualizado_em == clock.agora()
        assert ticket.anexos == ["uploads/foto.png"]
        assert ticket.versao == 1

    @pytest.mark.parametrize("campo", [
        "titulo", "descricao", "setor", "tipo_problema", "solicitante_nome",
    ])
    def test_campo_obrigatorio_vazio(self, novo_ticket, campo):
        with pytest.raises(ValidationError) as exc_info:
            novo_ticket(**{campo: "   "})

        assert exc_info.value.field == campo

    def test_titulo_muito_longo(self, novo_ticket):
        with pytest.raises(ValidationError) as exc_info:
            novo_ticket(titulo="x" * 201)

        assert "200" in exc_info.value.message

    @pytest.mark.parametrize("email", ["", "maria", "maria@", "@empresa.com", "maria@empresa"])
    def test_email_invalido(self, novo_ticket, email):
        with pytest.raises(ValidationError) as exc_info:
            novo_ticket(solicitante_email=email)

        assert exc_info.value.field == "solicitante_email"

    def test_anexos_como_texto_rejeitados(self, novo_ticket):
        with pytest.raises(ValidationError):
            novo_ticket(anexos="arquivo.pdf")


class TestAtribuicao:

    def test_tecnico_atribui_chamado_aguardando(self, novo_ticket, clock):
        ticket = novo_ticket()
        agora = clock.avancar(minutos=30)

        ticket.atribuir_a("tec-1", TECH, agora)

        assert ticket.atribuido_a_id == "tec-1"
        assert ticket.status == TicketStatus.EM_ANDAMENTO
        assert ticket.aceito_em == agora
        assert ticket.atualizado_em == agora

    def test_reatribuir_troca_tecnico_e_renova_aceite(self, novo_ticket, clock):
        ticket = novo_ticket()
        ticket.atribuir_a("tec-1", TECH, clock.avancar(minutos=10))
        segundo_aceite = clock.avancar(minutos=10)

        ticket.atribuir_a("tec-2", TECH, segundo_aceite)

        assert ticket.atribuido_a_id == "tec-2"
        assert ticket.aceito_em == segundo_aceite

    def test_solicitante_nao_atribui(self, novo_ticket, clock):
        ticket = novo_ticket()

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            ticket.atribuir_a("tec-1", USER, clock.agora())

        assert exc_info.value.rule == "papel_sem_permissao"
        assert ticket.atribuido_a_id is None

    def test_tecnico_nao_atribui_resolvido(self, novo_ticket, clock):
        ticket = novo_ticket()
        ticket.atribuir_a("tec-1", TECH, clock.agora())
        ticket.alterar_status(TicketStatus.RESOLVIDO, TECH, clock.avancar(horas=1))

        with pytest.raises(BusinessRuleViolationError):
            ticket.atribuir_a("tec-2", TECH, clock.agora())

    def test_admin_atribui_resolvido_e_reabre(self, novo_ticket, clock):
        ticket = novo_ticket()
        ticket.atribuir_a("tec-1", TECH, clock.agora())
        ticket.alterar_status(TicketStatus.RESOLVIDO, TECH, clock.avancar(horas=1))

        ticket.atribuir_a("tec-2", ADMIN, clock.avancar(horas=1))

        assert ticket.status == TicketStatus.EM_ANDAMENTO
        assert ticket.resolvido_em is None
        assert ticket.problemas_de_integridade() == []

    def test_tecnico_id_vazio(self, novo_ticket, clock):
        with pytest.raises(ValidationError):
            novo_ticket().atribuir_a("", TECH, clock.agora())

    def test_desatribuir_volta_para_aberto(self, novo_ticket, clock):
        ticket = novo_ticket()
        ticket.atribuir_a("tec-1", TECH, clock.agora())

        ticket.desatribuir(TECH, clock.avancar(minutos=5))

        assert ticket.atribuido_a_id is None
        assert ticket.status == TicketStatus.ABERTO
        assert ticket.aceito_em is None
        assert ticket.resolvido_em is None


class TestAlterarStatus:

    @pytest.mark.parametrize("atual,novo", [
        (TicketStatus.AGUARDANDO, TicketStatus.ABERTO),
        (TicketStatus.AGUARDANDO, TicketStatus.EM_ANDAMENTO),
        (TicketStatus.ABERTO, TicketStatus.EM_ANDAMENTO),
        (TicketStatus.ABERTO, TicketStatus.RESOLVIDO),
        (TicketStatus.EM_ANDAMENTO, TicketStatus.RESOLVIDO),
    ])
    def test_transicoes_permitidas_ao_tecnico(self, atual, novo):
        assert politicas.transicao_permitida(atual, novo, TECH)

    @pytest.mark.parametrize("atual,novo", [
        (TicketStatus.AGUARDANDO, TicketStatus.RESOLVIDO),
        (TicketStatus.ABERTO, TicketStatus.AGUARDANDO),
        (TicketStatus.EM_ANDAMENTO, TicketStatus.ABERTO),
        (TicketStatus.EM_ANDAMENTO, TicketStatus.AGUARDANDO),
        (TicketStatus.RESOLVIDO, TicketStatus.ABERTO),
        (TicketStatus.RESOLVIDO, TicketStatus.EM_ANDAMENTO),
    ])
    def test_transicoes_proibidas_ao_tecnico(self, atual, novo):
        assert not politicas.transicao_permitida(atual, novo, TECH)

    @pytest.mark.parametrize("novo", list(TicketStatus))
    def test_admin_vai_para_qualquer_status(self, novo):
        assert politicas.transicao_permitida(TicketStatus.RESOLVIDO, novo, ADMIN)

    @pytest.mark.parametrize("novo", list(TicketStatus))
    def test_solicitante_nunca_altera_status(self, novo):
        assert not politicas.transicao_permitida(TicketStatus.AGUARDANDO, novo, USER)

    def test_resolver_registra_resolvido_em(self, novo_ticket, clock):
        ticket = novo_ticket()
        ticket.atribuir_a("tec-1", TECH, clock.agora())
        resolvido = clock.avancar(horas=2)

        mudou = ticket.alterar_status(TicketStatus.RESOLVIDO, TECH, resolvido)

        assert mudou is True
        assert ticket.resolvido_em == resolvido

    def test_repetir_status_nao_renova_resolvido_em(self, novo_ticket, clock):
        ticket = novo_ticket()
        ticket.alterar_status(TicketStatus.ABERTO, TECH, clock.agora())
        primeiro = clock.avancar(minutos=1)
        ticket.alterar_status(TicketStatus.RESOLVIDO, TECH, primeiro)

        mudou = ticket.alterar_status(TicketStatus.RESOLVIDO, TECH, clock.avancar(minutos=1))

        assert mudou is False
        assert ticket.resolvido_em == primeiro

    def test_admin_reabre_resolvido_limpa_resolvido_em(self, novo_ticket, clock):
        ticket = novo_ticket()
        ticket.alterar_status(TicketStatus.ABERTO, TECH, clock.agora())
        ticket.alterar_status(TicketStatus.RESOLVIDO, TECH, clock.avancar(minutos=1))

        ticket.alterar_status(TicketStatus.ABERTO, ADMIN, clock.avancar(minutos=1))

        assert ticket.status == TicketStatus.ABERTO
        assert ticket.resolvido_em is None

    def test_transicao_invalida_informa_regra(self, novo_ticket, clock):
        ticket = novo_ticket()

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            ticket.alterar_status(TicketStatus.RESOLVIDO, TECH, clock.agora())

        assert exc_info.value.rule == "transicao_status_invalida"
        assert ticket.status == TicketStatus.AGUARDANDO


class TestAlterarPrioridade:

    def test_tecnico_define_prioridade(self, novo_ticket, clock):
        ticket = novo_ticket()

        assert ticket.alterar_prioridade(TicketPriority.ALTA, TECH, clock.agora()) is True
        assert ticket.prioridade == TicketPriority.ALTA

    def test_mesma_prioridade_nao_muda(self, novo_ticket, clock):
        ticket = novo_ticket()
        ticket.alterar_prioridade(TicketPriority.BAIXA, TECH, clock.agora())

        assert ticket.alterar_prioridade(TicketPriority.BAIXA, TECH, clock.agora()) is False

    def test_aguardando_nao_pode_ser_escolhida(self, novo_ticket, clock):
        with pytest.raises(ValidationError):
            novo_ticket().alterar_prioridade(TicketPriority.AGUARDANDO, ADMIN, clock.agora())

    def test_tecnico_nao_altera_prioridade_de_resolvido(self, novo_ticket, clock):
        ticket = novo_ticket()
        ticket.alterar_status(TicketStatus.ABERTO, TECH, clock.agora())
        ticket.alterar_status(TicketStatus.RESOLVIDO, TECH, clock.agora())

        with pytest.raises(BusinessRuleViolationError):
            ticket.alterar_prioridade(TicketPriority.ALTA, TECH, clock.agora())

        ticket.alterar_prioridade(TicketPriority.ALTA, ADMIN, clock.agora())
        assert ticket.prioridade == TicketPriority.ALTA

    def test_solicitante_nao_altera_prioridade(self, novo_ticket, clock):
        with pytest.raises(BusinessRuleViolationError):
            novo_ticket().alterar_prioridade(TicketPriority.ALTA, USER, clock.agora())

    def test_from_string_aceita_valor_e_nome(self):
        assert TicketPriority.from_string("high") == TicketPriority.ALTA
        assert TicketPriority.from_string("MEDIA") == TicketPriority.MEDIA

        with pytest.raises(ValidationError):
            TicketPriority.from_string("urgente")


class TestComentarios:

    @pytest.mark.parametrize("status,atribuido,papel,esperado", [
        (TicketStatus.AGUARDANDO, False, USER, True),
        (TicketStatus.ABERTO, False, USER, True),
        (TicketStatus.ABERTO, True, USER, False),
        (TicketStatus.EM_ANDAMENTO, True, USER, False),
        (TicketStatus.RESOLVIDO, False, USER, False),
        (TicketStatus.EM_ANDAMENTO, True, TECH, True),
        (TicketStatus.RESOLVIDO, True, TECH, False),
        (TicketStatus.RESOLVIDO, True, ADMIN, True),
    ])
    def test_pode_comentar(self, status, atribuido, papel, esperado):
        assert politicas.pode_comentar(status, atribuido, papel) is esperado

    def test_comentario_de_admin_gravado_como_tecnico(self, novo_ticket, clock):
        ticket = novo_ticket()

        comentario = ticket.comentar("Verificando", "Ana", ADMIN, clock.agora())

        assert comentario.ticket_id == ticket.id
        assert comentario.tipo_autor == TipoAutor.TECNICO
        assert comentario.criado_em == clock.agora()

    def test_solicitante_nao_comenta_apos_aceite(self, novo_ticket, clock):
        ticket = novo_ticket()
        ticket.atribuir_a("tec-1", TECH, clock.agora())

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            ticket.comentar("Alguma novidade?", "Maria", USER, clock.agora())

        assert exc_info.value.rule == "comentario_nao_permitido"

    def test_comentario_vazio(self, novo_ticket, clock):
        with pytest.raises(ValidationError):
            novo_ticket().comentar("   ", "Maria", USER, clock.agora())


class TestIntegridade:

    def test_chamado_novo_consistente(self, novo_ticket):
        assert novo_ticket().problemas_de_integridade() == []

    def test_aceite_anterior_a_criacao(self, novo_ticket):
        ticket = novo_ticket()
        ticket.aceito_em = ticket.criado_em - timedelta(minutes=5)

        assert "aceito_em anterior a criado_em" in ticket.problemas_de_integridade()

    def test_resolvido_sem_resolvido_em(self, novo_ticket):
        ticket = novo_ticket()
        ticket.status = TicketStatus.RESOLVIDO

        assert "resolvido_em inconsistente com o status" in ticket.problemas_de_integridade()

    def test_igualdade_por_id(self, novo_ticket):
        ticket = novo_ticket()
        copia = TicketEntity(id=ticket.id, titulo="outro")

        assert ticket == copia
        assert len({ticket, copia}) == 1
