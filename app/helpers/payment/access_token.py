import secrets


def generate_access_token() -> str:
    """Token opaco de acesso. Usa o gerador criptográfico do sistema."""
    return secrets.token_urlsafe(32)
