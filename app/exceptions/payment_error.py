from typing import Optional

GENERIC_PROVIDER_MESSAGE = "Erro ao processar pagamento"
GENERIC_STORE_MESSAGE = "Erro ao acessar o cadastro do usuário"


class PaymentError(Exception):
    """Exceção base para erros do fluxo de pagamento."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PaymentError):
    """Dados da requisição não passaram na validação. Nenhuma chamada ao provedor é feita."""
    pass


class ProviderError(PaymentError):
    """Falha normalizada de uma chamada ao Mercado Pago."""

    def __init__(self, status_code: Optional[int] = None, message: Optional[str] = None):
        super().__init__(message or GENERIC_PROVIDER_MESSAGE)
        self.status_code = status_code or 500


class StoreError(PaymentError):
    """Falha de leitura ou escrita no banco de usuários."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or GENERIC_STORE_MESSAGE)


class ConfigurationError(Exception):
    """Configuração obrigatória ausente ou inválida."""
    pass
