"""
User-facing (pt-BR) messages for auth errors.

The identity provider reports failures as English message strings; these
helpers match known substrings and fall back to a generic "try again" text.
"""

from typing import Optional

from .exceptions import WORKER_BLOCKED, PasswordPolicyError, SignInInterruptedError


SIGN_IN_MESSAGES: list[tuple[str, str]] = [
    ("Invalid login credentials", "E-mail ou senha incorretos."),
    ("Email not confirmed", "Confirme seu e-mail antes de entrar. Verifique sua caixa de entrada."),
    ("rate limit", "Muitas tentativas. Aguarde alguns minutos e tente novamente."),
]
SIGN_IN_BLOCKED = "Sua conta está desativada. Entre em contato com o suporte para mais informações."
SIGN_IN_FALLBACK = "Erro ao fazer login. Tente novamente."

SIGN_UP_MESSAGES: list[tuple[str, str]] = [
    ("already registered", "Este e-mail já está cadastrado."),
    ("Password should be", "A senha deve ter pelo menos 6 caracteres."),
    ("rate limit", "Muitas tentativas. Aguarde alguns minutos e tente novamente."),
]
SIGN_UP_FALLBACK = "Erro ao criar conta. Tente novamente."

RESET_REQUEST_MESSAGES: list[tuple[str, str]] = [
    ("rate limit", "Muitas tentativas. Aguarde alguns minutos e tente novamente."),
    ("User not found", "E-mail não encontrado."),
]
RESET_REQUEST_FALLBACK = "Erro ao enviar e-mail de recuperação. Tente novamente."

UPDATE_PASSWORD_MESSAGES: list[tuple[str, str]] = [
    ("same as old", "A nova senha deve ser diferente da senha atual."),
    ("weak", "A senha é muito fraca. Use letras, números e caracteres especiais."),
]
UPDATE_PASSWORD_FALLBACK = "Erro ao atualizar senha. O link pode ter expirado. Solicite um novo."

PASSWORD_POLICY_MESSAGES = {
    "mismatch": "As senhas não coincidem.",
    "too_short": "A senha deve ter pelo menos 6 caracteres.",
}


def _match(message: str, table: list[tuple[str, str]], fallback: str) -> str:
    lowered = message.lower()
    for needle, text in table:
        if needle.lower() in lowered:
            return text
    return fallback


def sign_in_error_message(error: Optional[Exception]) -> Optional[str]:
    """
    Map a sign_in error to the text shown on the login form.

    Returns None when there is no error.
    """
    if error is None:
        return None
    if str(error) == WORKER_BLOCKED:
        return SIGN_IN_BLOCKED
    if isinstance(error, SignInInterruptedError):
        return SIGN_IN_FALLBACK
    return _match(str(error), SIGN_IN_MESSAGES, SIGN_IN_FALLBACK)


def sign_up_error_message(error: Optional[Exception]) -> Optional[str]:
    if error is None:
        return None
    return _match(str(error), SIGN_UP_MESSAGES, SIGN_UP_FALLBACK)


def password_reset_error_message(error: Optional[Exception]) -> Optional[str]:
    if error is None:
        return None
    return _match(str(error), RESET_REQUEST_MESSAGES, RESET_REQUEST_FALLBACK)


def update_password_error_message(error: Optional[Exception]) -> Optional[str]:
    if error is None:
        return None
    if isinstance(error, PasswordPolicyError):
        return PASSWORD_POLICY_MESSAGES.get(error.reason, UPDATE_PASSWORD_FALLBACK)
    return _match(str(error), UPDATE_PASSWORD_MESSAGES, UPDATE_PASSWORD_FALLBACK)
