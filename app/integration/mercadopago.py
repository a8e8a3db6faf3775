import logging
import uuid
from typing import Any, Callable, Dict, Optional

import mercadopago
from mercadopago.config import RequestOptions
from pydantic import ValidationError as PydanticValidationError

from app.exceptions.payment_error import GENERIC_PROVIDER_MESSAGE, ProviderError
from app.schemas.payment import ProviderPayment


class MercadoPagoClient:
    """
    Adaptador do SDK do Mercado Pago. Toda falha do provedor sai daqui
    como ProviderError(status_code, message), com a mensagem do próprio
    Mercado Pago quando existir.
    """

    def __init__(self, access_token: Optional[str] = None, sdk: Optional[Any] = None):
        if sdk is None:
            sdk = mercadopago.SDK(access_token)
        self.sdk = sdk

    def create(self, payload: Dict[str, Any], idempotency_key: Optional[str] = None) -> ProviderPayment:
        request_options = RequestOptions()
        request_options.custom_headers = {"x-idempotency-key": idempotency_key or str(uuid.uuid4())}

        return self._call("criar pagamento", lambda: self.sdk.payment().create(payload, request_options))

    def get_by_id(self, payment_id: str) -> ProviderPayment:
        return self._call(f"consultar pagamento {payment_id}", lambda: self.sdk.payment().get(payment_id))

    def _call(self, operation: str, request: Callable[[], Dict[str, Any]]) -> ProviderPayment:
        try:
            result = request()
        except Exception as e:
            logging.error(f"MERCADO PAGO >>> Falha ao {operation}: {e}", exc_info=True)
            raise ProviderError() from e

        status_code = result.get("status") if isinstance(result, dict) else None
        response = result.get("response") if isinstance(result, dict) else None

        if not isinstance(status_code, int) or status_code >= 400 or not isinstance(response, dict) or "id" not in response:
            message = self.extract_message(response)
            logging.error(f"MERCADO PAGO >>> Falha ao {operation}: status={status_code} resposta={response}")
            raise ProviderError(
                status_code=status_code if isinstance(status_code, int) and status_code >= 400 else None,
                message=message,
            )

        try:
            return ProviderPayment.from_response(response)
        except PydanticValidationError as e:
            logging.error(f"MERCADO PAGO >>> Resposta inesperada ao {operation}: {response}", exc_info=True)
            raise ProviderError(status_code=502) from e

    @staticmethod
    def extract_message(response: Any) -> str:
        """Mensagem de diagnóstico do Mercado Pago, se ele mandou alguma."""
        if not isinstance(response, dict):
            return GENERIC_PROVIDER_MESSAGE

        message = response.get("message")
        if message:
            return str(message)

        causes = response.get("cause")
        if isinstance(causes, list) and causes and isinstance(causes[0], dict):
            description = causes[0].get("description")
            if description:
                return str(description)

        return GENERIC_PROVIDER_MESSAGE
