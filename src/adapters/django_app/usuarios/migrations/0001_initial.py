"""
Migration inicial para o domínio de Usuários.

Cria a tabela:
- usuarios: Técnicos e administradores
"""

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='UsuarioModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                )),
                ('username', models.CharField(max_length=150, unique=True)),
                ('senha', models.CharField(max_length=255)),
                ('nome', models.CharField(max_length=100)),
                ('email', models.EmailField(max_length=254, null=True, blank=True)),
                ('papel', models.CharField(
                    max_length=20,
                    choices=[
                        ('technician', 'Técnico'),
                        ('admin', 'Administrador'),
                    ],
                    default='technician',
                )),
                ('criado_em', models.DateTimeField(null=True, blank=True)),
            ],
            options={
                'db_table': 'usuarios',
                'verbose_name': 'Usuário',
                'verbose_name_plural': 'Usuários',
                'ordering': ['nome'],
            },
        ),
    ]
