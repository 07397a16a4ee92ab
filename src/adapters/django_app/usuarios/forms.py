"""
Django Forms da API de Usuários.
"""

from django import forms

from .models import PapelChoices


class UsuarioCreateForm(forms.Form):
    username = forms.CharField(
        max_length=150,
        error_messages={'required': 'Usuário é obrigatório'},
    )

    senha = forms.CharField(
        strip=False,
        error_messages={'required': 'Senha é obrigatória'},
    )

    nome = forms.CharField(
        max_length=100,
        error_messages={'required': 'Nome é obrigatório'},
    )

    email = forms.EmailField(
        required=False,
        error_messages={'invalid': 'Email inválido'},
    )

    papel = forms.ChoiceField(
        required=False,
        choices=PapelChoices.choices,
        error_messages={'invalid_choice': 'Papel deve ser technician ou admin'},
    )

    def clean_papel(self):
        return self.cleaned_data.get('papel') or PapelChoices.TECNICO.value


class LoginForm(forms.Form):
    username = forms.CharField(error_messages={'required': 'Usuário é obrigatório'})
    senha = forms.CharField(strip=False, error_messages={'required': 'Senha é obrigatória'})
