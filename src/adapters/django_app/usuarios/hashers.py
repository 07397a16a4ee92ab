"""
PasswordHasher baseado em django.contrib.auth.hashers.

Credenciais sem o prefixo de algoritmo reconhecido pelo Django são
tratadas como legado em texto puro: a conferência é feita em tempo
constante e o AutenticarUsuarioService grava o hash no login.
"""

from django.contrib.auth.hashers import check_password, identify_hasher, make_password
from django.utils.crypto import constant_time_compare


class DjangoPasswordHasher:

    def hash(self, senha: str) -> str:
        return make_password(senha)

    def eh_legado(self, armazenada: str) -> bool:
        if not armazenada:
            return False
        try:
            identify_hasher(armazenada)
        except ValueError:
            return True
        return False

    def verificar(self, senha: str, armazenada: str) -> bool:
        if not armazenada:
            return False
        if self.eh_legado(armazenada):
            return constant_time_compare(senha, armazenada)
        return check_password(senha, armazenada)
