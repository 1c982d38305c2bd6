from passlib.context import CryptContext
import secrets
from ebbb_admin.core.config import settings

# Nunca menor que o custo 12 em produção
BCRYPT_ROUNDS = settings.PASSWORD_BCRYPT_ROUNDS
SESSION_TOKEN_BYTES = 32


def build_password_context(rounds: int = BCRYPT_ROUNDS) -> CryptContext:
    """
    Cria o contexto de criptografia (bcrypt com custo fixo)
    """
    return CryptContext(
        schemes=["bcrypt"],
        default="bcrypt",
        bcrypt__rounds=rounds,
        deprecated="auto",
    )


pwd_context = build_password_context()


def verify_password(plain_password: str, hashed_password: str, context: CryptContext = pwd_context) -> bool:
    """
    Verifica se a senha fornecida corresponde ao hash armazenado
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Hash malformado ou de um esquema desconhecido
        return False


def get_password_hash(password: str, context: CryptContext = pwd_context) -> str:
    """
    Gera um hash seguro para a senha fornecida
    """
    return context.hash(password)


def generate_session_token() -> str:
    """Random URL-safe bearer token (256 bits of entropy)."""
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)
