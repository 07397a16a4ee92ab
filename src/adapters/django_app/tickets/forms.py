"""
Django Forms para validação de entrada da API.

Forms são DRIVING ADAPTERS que validam o JSON recebido antes de
montar os DTOs dos Use Cases.

Responsabilidades:
- Validação estrutural (campos obrigatórios, tipos, tamanhos)
- Sanitização de entrada
- Mensagens de erro amigáveis

Princípios:
- Forms NÃO contêm lógica de negócio
- Regras de papel/estado ficam nas Entities e políticas do Core
"""

from django import forms

from .models import TicketStatusChoices


class AnexosField(forms.JSONField):
    """Lista de referências de arquivos (strings)."""

    def clean(self, value):
        value = super().clean(value)
        if value in (None, ''):
            return []
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise forms.ValidationError('Anexos devem ser uma lista de textos')
        return [item for item in value if item.strip()]


class TicketCreateForm(forms.Form):
    """Valida dados antes de passar para CriarTicketService."""

    titulo = forms.CharField(
        max_length=200,
        error_messages={
            'required': 'Título é obrigatório',
            'max_length': 'Título deve ter no máximo 200 caracteres',
        },
    )

    descricao = forms.CharField(
        max_length=5000,
        error_messages={
            'required': 'Descrição é obrigatória',
            'max_length': 'Descrição deve ter no máximo 5000 caracteres',
        },
    )

    setor = forms.CharField(
        max_length=100,
        error_messages={'required': 'Setor é obrigatório'},
    )

    tipo_problema = forms.CharField(
        max_length=100,
        error_messages={'required': 'Tipo de problema é obrigatório'},
    )

    solicitante_nome = forms.CharField(
        max_length=100,
        error_messages={'required': 'Nome é obrigatório'},
    )

    solicitante_email = forms.EmailField(
        error_messages={
            'required': 'Email é obrigatório',
            'invalid': 'Email inválido',
        },
    )

    anexos = AnexosField(required=False)


class TicketAtribuirForm(forms.Form):
    tecnico_id = forms.CharField(
        max_length=36,
        error_messages={'required': 'Técnico é obrigatório'},
    )


class TicketStatusForm(forms.Form):
    status = forms.ChoiceField(
        choices=TicketStatusChoices.choices,
        error_messages={
            'required': 'Status é obrigatório',
            'invalid_choice': 'Status inválido: %(value)s',
        },
    )

    alterado_por = forms.CharField(required=False)

    def clean_alterado_por(self):
        return self.cleaned_data.get('alterado_por') or 'Equipe Técnica'


class TicketPrioridadeForm(forms.Form):
    """Só low, medium e high podem ser escolhidas."""

    prioridade = forms.ChoiceField(
        choices=[
            ('low', 'Baixa'),
            ('medium', 'Média'),
            ('high', 'Alta'),
        ],
        error_messages={
            'required': 'Prioridade é obrigatória',
            'invalid_choice': 'Prioridade deve ser low, medium ou high',
        },
    )

    alterado_por = forms.CharField(required=False)

    def clean_alterado_por(self):
        return self.cleaned_data.get('alterado_por') or 'Sistema'


class ComentarioForm(forms.Form):
    conteudo = forms.CharField(
        max_length=5000,
        error_messages={'required': 'Comentário é obrigatório'},
    )

    autor_nome = forms.CharField(
        max_length=100,
        error_messages={'required': 'Nome do autor é obrigatório'},
    )

    anexos = AnexosField(required=False)


class TicketFiltroForm(forms.Form):
    """Filtros da listagem (query string)."""

    status = forms.ChoiceField(
        required=False,
        choices=[('', 'Todos')] + list(TicketStatusChoices.choices),
        error_messages={'invalid_choice': 'Status inválido: %(value)s'},
    )

    tecnico_id = forms.CharField(max_length=36, required=False)


class RelatorioFiltroForm(forms.Form):
    """Período (dias inclusivos) e setor dos relatórios."""

    data_inicio = forms.DateField(
        required=False,
        input_formats=['%Y-%m-%d'],
        error_messages={'invalid': 'Data inicial inválida (use AAAA-MM-DD)'},
    )

    data_fim = forms.DateField(
        required=False,
        input_formats=['%Y-%m-%d'],
        error_messages={'invalid': 'Data final inválida (use AAAA-MM-DD)'},
    )

    setor = forms.CharField(max_length=100, required=False)

    def clean(self):
        cleaned = super().clean()
        inicio = cleaned.get('data_inicio')
        fim = cleaned.get('data_fim')
        if inicio and fim and inicio > fim:
            raise forms.ValidationError('Data inicial deve ser anterior ou igual à data final')
        return cleaned
