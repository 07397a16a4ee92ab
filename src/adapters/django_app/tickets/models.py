"""
Django Models para o domínio de Tickets.

Estes models são ADAPTERS - implementam a persistência para as
entidades de domínio definidas em src/core/tickets/entities.py.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Lógica de negócio fica nas Entities do Core
- Models são mapeados para/de Entities via Mappers

Relacionamentos:
- TicketModel: Tabela principal de chamados
- ComentarioModel: Comentários (apagados junto com o chamado)
"""

from django.db import models


class TicketStatusChoices(models.TextChoices):
    """Espelha TicketStatus do Core."""
    AGUARDANDO = 'waiting', 'Aguardando'
    ABERTO = 'open', 'Aberto'
    EM_ANDAMENTO = 'in_progress', 'Em andamento'
    RESOLVIDO = 'resolved', 'Resolvido'


class TicketPriorityChoices(models.TextChoices):
    """Espelha TicketPriority do Core."""
    AGUARDANDO = 'waiting', 'Aguardando triagem'
    BAIXA = 'low', 'Baixa'
    MEDIA = 'medium', 'Média'
    ALTA = 'high', 'Alta'


class TipoAutorChoices(models.TextChoices):
    USUARIO = 'user', 'Solicitante'
    TECNICO = 'technician', 'Técnico'


class TicketModel(models.Model):
    """
    Model Django para persistência de chamados.

    Fields:
        id: UUID como primary key (gerado pela Entity)
        numero: Número público, único e crescente
        versao: Contador de versão otimista
        atribuido_a_id: ID do técnico (sem FK: o usuário pode ser removido)
        anexos: Lista de referências de arquivos (JSONField)
    """

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do chamado"
    )

    numero = models.PositiveIntegerField(
        unique=True,
        help_text="Número público do chamado"
    )

    titulo = models.CharField(max_length=200)
    descricao = models.TextField()
    setor = models.CharField(max_length=100, db_index=True)
    tipo_problema = models.CharField(max_length=100)

    status = models.CharField(
        max_length=20,
        choices=TicketStatusChoices.choices,
        default=TicketStatusChoices.AGUARDANDO,
        db_index=True,
    )

    prioridade = models.CharField(
        max_length=20,
        choices=TicketPriorityChoices.choices,
        default=TicketPriorityChoices.AGUARDANDO,
        db_index=True,
    )

    solicitante_nome = models.CharField(max_length=100)
    solicitante_email = models.EmailField()

    atribuido_a_id = models.CharField(
        max_length=36,
        null=True,
        blank=True,
        db_index=True,
        help_text="ID do técnico responsável"
    )

    # Timestamps (gravados a partir do Clock do domínio)
    criado_em = models.DateTimeField(db_index=True)
    aceito_em = models.DateTimeField(null=True, blank=True)
    resolvido_em = models.DateTimeField(null=True, blank=True)
    atualizado_em = models.DateTimeField()

    anexos = models.JSONField(
        default=list,
        blank=True,
        help_text="Referências de arquivos anexados"
    )

    versao = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = 'tickets'
        verbose_name = 'Chamado'
        verbose_name_plural = 'Chamados'
        ordering = ['-criado_em']
        indexes = [
            models.Index(fields=['status', 'criado_em'], name='tickets_status_criado_idx'),
            models.Index(fields=['atribuido_a_id', 'status'], name='tickets_tecnico_status_idx'),
        ]

    def __str__(self):
        return f"#{self.numero} {self.titulo}"

    def __repr__(self):
        return f"<TicketModel numero={self.numero} status={self.status} versao={self.versao}>"


class ComentarioModel(models.Model):
    """Comentário imutável de um chamado."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    ticket = models.ForeignKey(
        TicketModel,
        on_delete=models.CASCADE,
        related_name='comentarios',
    )

    conteudo = models.TextField()
    autor_nome = models.CharField(max_length=100)
    tipo_autor = models.CharField(max_length=20, choices=TipoAutorChoices.choices)
    anexos = models.JSONField(default=list, blank=True)
    criado_em = models.DateTimeField(db_index=True)

    class Meta:
        db_table = 'ticket_comentarios'
        verbose_name = 'Comentário'
        verbose_name_plural = 'Comentários'
        ordering = ['criado_em']
        indexes = [
            models.Index(fields=['ticket', 'criado_em'], name='comentarios_ticket_idx'),
        ]

    def __str__(self):
        return f"{self.autor_nome} @ {self.criado_em}"
