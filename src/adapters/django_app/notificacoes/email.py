"""
Notificador por e-mail (django.core.mail).

DRIVEN ADAPTER que implementa o port Notificador do Core. Cada
mensagem sai em texto puro e HTML; todo valor vindo do chamado é
escapado antes de entrar no HTML.

O backend é escolhido em settings (console quando EMAIL_HOST está
vazio, SMTP caso contrário). Falhas de envio são registradas e
viram False; o handler de eventos decide sobre nova tentativa.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.utils.html import format_html, format_html_join

from src.core.usuarios.entities import UsuarioEntity

logger = logging.getLogger(__name__)

ROTULOS_PRIORIDADE = {
    'low': 'Baixa',
    'medium': 'Média',
    'high': 'Alta',
}

ROTULOS_STATUS = {
    'waiting': 'Aguardando',
    'open': 'Aberto',
    'in_progress': 'Em andamento',
    'resolved': 'Resolvido',
}

RODAPE = "Este é um email automático. Por favor, não responda."

Linhas = Sequence[Tuple[str, object]]


def _rotulo_prioridade(valor: Optional[str]) -> str:
    return ROTULOS_PRIORIDADE.get(valor, 'Aguardando triagem')


def _rotulo_status(valor: Optional[str]) -> str:
    return ROTULOS_STATUS.get(valor, valor or '')


def montar_mensagem(titulo: str, saudacao: Optional[str], paragrafos: Iterable[str],
                    linhas: Linhas) -> Tuple[str, str]:
    """
    Monta corpo texto e HTML de uma notificação.

    Returns:
        (texto, html)
    """
    paragrafos = list(paragrafos)

    texto: List[str] = [titulo, ""]
    if saudacao:
        texto += [f"Olá {saudacao},", ""]
    texto += paragrafos
    texto.append("")
    texto += [f"{rotulo}: {valor}" for rotulo, valor in linhas]
    texto += ["", RODAPE]

    html = format_html(
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        '<h2 style="color: #2563eb;">{}</h2>{}{}'
        '<div style="background-color: #f8fafc; padding: 20px; border-radius: 8px; margin: 20px 0;">{}</div>'
        '<hr style="margin: 30px 0;"><p style="color: #6b7280; font-size: 12px;">{}</p></div>',
        titulo,
        format_html('<p>Olá <strong>{}</strong>,</p>', saudacao) if saudacao else '',
        format_html_join('', '<p>{}</p>', ((p,) for p in paragrafos)),
        format_html_join('', '<p><strong>{}:</strong> {}</p>', linhas),
        RODAPE,
    )
    return "\n".join(texto), html


class DjangoEmailNotificador:
    """
    Example:
        notificador = DjangoEmailNotificador()
        notificador.notificar_criacao(evento.ticket)
    """

    def __init__(self, remetente: Optional[str] = None):
        self.remetente = remetente or settings.DEFAULT_FROM_EMAIL

    def _enviar(self, destinatario: Optional[str], assunto: str, texto: str, html: str) -> bool:
        if not destinatario:
            logger.warning(f"Email '{assunto}' sem destinatário")
            return False

        try:
            mensagem = EmailMultiAlternatives(
                subject=assunto,
                body=texto,
                from_email=self.remetente,
                to=[destinatario],
            )
            mensagem.attach_alternative(html, "text/html")
            mensagem.send()
        except Exception as e:
            logger.error(f"Falha ao enviar email '{assunto}' para {destinatario}: {e}")
            return False

        logger.info(f"Email enviado para {destinatario}: {assunto}")
        return True

    def notificar_criacao(self, ticket: Dict) -> bool:
        texto, html = montar_mensagem(
            "Chamado Criado com Sucesso",
            ticket['solicitante_nome'],
            [
                "Seu chamado foi criado com sucesso! Aqui estão os detalhes:",
                "Você receberá notificações por email quando ele for aceito, "
                "atualizado e finalizado.",
            ],
            [
                ("Número", f"#{ticket['numero']}"),
                ("Título", ticket['titulo']),
                ("Descrição", ticket['descricao']),
                ("Setor", ticket['setor']),
                ("Tipo de Problema", ticket['tipo_problema']),
                ("Prioridade", _rotulo_prioridade(ticket['prioridade'])),
                ("Status", _rotulo_status(ticket['status'])),
            ],
        )
        return self._enviar(
            ticket['solicitante_email'],
            f"Chamado #{ticket['numero']} criado com sucesso",
            texto,
            html,
        )

    def notificar_criacao_equipe(self, ticket: Dict, equipe: Sequence[UsuarioEntity]) -> bool:
        """
        Avisa cada membro com e-mail.

        Returns:
            True se todos os membros com e-mail foram avisados
        """
        destinatarios = [u.email for u in equipe if u.email]
        if not destinatarios:
            logger.info(f"Nenhum técnico com email para o chamado #{ticket['numero']}")
            return False

        texto, html = montar_mensagem(
            "Novo Chamado Aberto",
            None,
            [
                "Um novo chamado foi aberto no sistema e requer atenção.",
                "Para aceitar e trabalhar neste chamado, acesse o painel de técnicos.",
            ],
            [
                ("Número", f"#{ticket['numero']}"),
                ("Título", ticket['titulo']),
                ("Descrição", ticket['descricao']),
                ("Setor", ticket['setor']),
                ("Tipo de Problema", ticket['tipo_problema']),
                ("Prioridade", _rotulo_prioridade(ticket['prioridade'])),
                ("Solicitante", ticket['solicitante_nome']),
                ("Email do Solicitante", ticket['solicitante_email']),
            ],
        )
        assunto = f"Novo Chamado #{ticket['numero']} - {ticket['setor']}"

        enviados = [self._enviar(email, assunto, texto, html) for email in destinatarios]
        logger.info(
            f"Aviso do chamado #{ticket['numero']}: "
            f"{sum(enviados)}/{len(enviados)} técnicos notificados"
        )
        return all(enviados)

    def notificar_atribuicao(self, ticket: Dict, tecnico: Dict) -> bool:
        texto, html = montar_mensagem(
            "Chamado Aceito!",
            ticket['solicitante_nome'],
            ["Seu chamado foi aceito por um técnico e já está sendo trabalhado."],
            [
                ("Número", f"#{ticket['numero']}"),
                ("Título", ticket['titulo']),
                ("Técnico Responsável", tecnico.get('nome') or 'Técnico'),
                ("Status", _rotulo_status(ticket['status'])),
            ],
        )
        return self._enviar(
            ticket['solicitante_email'],
            f"Chamado #{ticket['numero']} foi aceito por um técnico",
            texto,
            html,
        )

    def notificar_comentario(self, ticket: Dict, autor_nome: str) -> bool:
        texto, html = montar_mensagem(
            "Nova Atualização no Seu Chamado",
            ticket['solicitante_nome'],
            ["Houve uma nova atualização no seu chamado. Confira os detalhes abaixo:"],
            [
                ("Número", f"#{ticket['numero']}"),
                ("Título", ticket['titulo']),
                ("Atualizado por", autor_nome),
                ("Status atual", _rotulo_status(ticket['status'])),
            ],
        )
        return self._enviar(
            ticket['solicitante_email'],
            f"Nova atualização no chamado #{ticket['numero']}",
            texto,
            html,
        )

    def notificar_prioridade(self, ticket: Dict, nova_prioridade: str, alterado_por: str) -> bool:
        texto, html = montar_mensagem(
            "Prioridade Alterada",
            ticket['solicitante_nome'],
            ["A prioridade do seu chamado foi alterada por nossa equipe técnica."],
            [
                ("Número do Chamado", f"#{ticket['numero']}"),
                ("Título", ticket['titulo']),
                ("Nova Prioridade", _rotulo_prioridade(nova_prioridade)),
                ("Alterado por", alterado_por),
            ],
        )
        return self._enviar(
            ticket['solicitante_email'],
            f"Prioridade do chamado #{ticket['numero']} foi alterada",
            texto,
            html,
        )

    def notificar_resolucao(self, ticket: Dict, resolvido_por: str) -> bool:
        texto, html = montar_mensagem(
            "Chamado Finalizado",
            ticket['solicitante_nome'],
            [
                "Seu chamado foi finalizado pela nossa equipe.",
                "Se o problema persistir, abra um novo chamado.",
            ],
            [
                ("Número", f"#{ticket['numero']}"),
                ("Título", ticket['titulo']),
                ("Finalizado por", resolvido_por),
            ],
        )
        return self._enviar(
            ticket['solicitante_email'],
            f"Chamado #{ticket['numero']} foi finalizado",
            texto,
            html,
        )
