"""
Migration inicial para o domínio de Tickets.

Cria as tabelas:
- tickets: Chamados (com número público e versão otimista)
- ticket_comentarios: Comentários (CASCADE com o chamado)
"""

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        # =================================================================
        # Tabela: tickets
        # =================================================================
        migrations.CreateModel(
            name='TicketModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único do chamado'
                )),
                ('numero', models.PositiveIntegerField(
                    unique=True,
                    help_text='Número público do chamado'
                )),
                ('titulo', models.CharField(max_length=200)),
                ('descricao', models.TextField()),
                ('setor', models.CharField(max_length=100, db_index=True)),
                ('tipo_problema', models.CharField(max_length=100)),
                ('status', models.CharField(
                    max_length=20,
                    choices=[
                        ('waiting', 'Aguardando'),
                        ('open', 'Aberto'),
                        ('in_progress', 'Em andamento'),
                        ('resolved', 'Resolvido'),
                    ],
                    default='waiting',
                    db_index=True,
                )),
                ('prioridade', models.CharField(
                    max_length=20,
                    choices=[
                        ('waiting', 'Aguardando triagem'),
                        ('low', 'Baixa'),
                        ('medium', 'Média'),
                        ('high', 'Alta'),
                    ],
                    default='waiting',
                    db_index=True,
                )),
                ('solicitante_nome', models.CharField(max_length=100)),
                ('solicitante_email', models.EmailField(max_length=254)),
                ('atribuido_a_id', models.CharField(
                    max_length=36,
                    null=True,
                    blank=True,
                    db_index=True,
                    help_text='ID do técnico responsável'
                )),
                ('criado_em', models.DateTimeField(db_index=True)),
                ('aceito_em', models.DateTimeField(null=True, blank=True)),
                ('resolvido_em', models.DateTimeField(null=True, blank=True)),
                ('atualizado_em', models.DateTimeField()),
                ('anexos', models.JSONField(
                    default=list,
                    blank=True,
                    help_text='Referências de arquivos anexados'
                )),
                ('versao', models.PositiveIntegerField(default=1)),
            ],
            options={
                'verbose_name': 'Chamado',
                'verbose_name_plural': 'Chamados',
                'db_table': 'tickets',
                'ordering': ['-criado_em'],
            },
        ),
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(fields=['status', 'criado_em'], name='tickets_status_criado_idx'),
        ),
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(fields=['atribuido_a_id', 'status'], name='tickets_tecnico_status_idx'),
        ),

        # =================================================================
        # Tabela: ticket_comentarios
        # =================================================================
        migrations.CreateModel(
            name='ComentarioModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                )),
                ('conteudo', models.TextField()),
                ('autor_nome', models.CharField(max_length=100)),
                ('tipo_autor', models.CharField(
                    max_length=20,
                    choices=[('user', 'Solicitante'), ('technician', 'Técnico')],
                )),
                ('anexos', models.JSONField(default=list, blank=True)),
                ('criado_em', models.DateTimeField(db_index=True)),
                ('ticket', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='comentarios',
                    to='tickets.ticketmodel',
                )),
            ],
            options={
                'verbose_name': 'Comentário',
                'verbose_name_plural': 'Comentários',
                'db_table': 'ticket_comentarios',
                'ordering': ['criado_em'],
            },
        ),
        migrations.AddIndex(
            model_name='comentariomodel',
            index=models.Index(fields=['ticket', 'criado_em'], name='comentarios_ticket_idx'),
        ),
    ]
