from django.contrib.auth.hashers import check_password, make_password

from manuslibros.core.ports import IHasherSenha


class HasherSenhaDjango(IHasherSenha):
    """Hash de senhas com os hashers configurados em PASSWORD_HASHERS."""

    def gerar_hash(self, senha: str) -> str:
        return make_password(senha)

    def verificar(self, senha: str, senha_hash: str) -> bool:
        if not senha_hash:
            return False
        return check_password(senha, senha_hash)
