import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from app.configuration.settings import Configuration
from app.exceptions.payment_error import ProviderError, ValidationError
from app.helpers.payment.formatters import format_currency, split_name
from app.integration.mercadopago import MercadoPagoClient
from app.schemas.payment import (
    CardPaymentRequest,
    CardPaymentResponse,
    PaymentIntentRequest,
    PaymentIntentResult,
    PixPaymentRequest,
    PixPaymentResponse,
)


class PaymentIntentService:
    """
    Cria a intenção de pagamento no Mercado Pago (Pix ou cartão).
    Nada é gravado localmente: o acesso só é liberado pelo webhook.
    """

    def __init__(self, provider: MercadoPagoClient, configuration: Configuration):
        self.provider = provider
        self.pix_price = configuration.pix_price
        self.description = configuration.product_description
        self.notification_url = configuration.mercado_pago_notification_url

    def create_intent(self, request: PaymentIntentRequest, idempotency_key: Optional[str] = None) -> PaymentIntentResult:
        logging.info(f"PAGAMENTO >>> Nova intenção de pagamento ({request.method.value})")
        if isinstance(request, PixPaymentRequest):
            return self.create_pix_intent(request, idempotency_key)
        return self.create_card_intent(request, idempotency_key)

    def create_pix_intent(self, request: PixPaymentRequest, idempotency_key: Optional[str] = None) -> PixPaymentResponse:
        payer_email = (request.payer_email or "").strip()
        if not payer_email:
            raise ValidationError("O e-mail do pagador é obrigatório")

        first_name, last_name = split_name(request.payer_name)

        # Valor fixo do produto, o cliente não escolhe o preço
        body = {
            "transaction_amount": float(self.pix_price),
            "description": self.description,
            "payment_method_id": "pix",
            "payer": {
                "email": payer_email,
                "first_name": first_name,
                "last_name": last_name,
            },
            "notification_url": self.notification_url,
        }

        payment = self.provider.create(body, idempotency_key)

        if not payment.qr_code:
            logging.error(f"PAGAMENTO >>> Pix {payment.id} criado sem QR Code")
            raise ProviderError(status_code=502, message="QR Code não gerado")

        logging.info(f"PAGAMENTO >>> Pix {payment.id} criado para {payer_email} ({format_currency(self.pix_price)})")
        return PixPaymentResponse(
            id=payment.id,
            qr_code=payment.qr_code,
            qr_code_base64=payment.qr_code_base64,
        )

    def create_card_intent(self, request: CardPaymentRequest, idempotency_key: Optional[str] = None) -> CardPaymentResponse:
        payer_email = (request.payer.email or "").strip() if request.payer else ""

        missing = [
            name for name, value in (
                ("token", request.token),
                ("transaction_amount", request.transaction_amount),
                ("installments", request.installments),
                ("payer.email", payer_email),
            )
            if value is None or value == ""
        ]
        if missing:
            raise ValidationError(f"Dados obrigatórios ausentes: {', '.join(missing)}")

        amount = self.parse_amount(request.transaction_amount)
        installments = self.parse_installments(request.installments)

        body: Dict[str, Any] = {
            "transaction_amount": float(amount),
            "token": request.token,
            "description": self.description,
            "installments": installments,
            "payment_method_id": request.payment_method_id,
            "issuer_id": request.issuer_id,
            "payer": {
                "email": payer_email,
            },
            "notification_url": self.notification_url,
        }

        identification = request.payer.identification
        if identification and (identification.type or identification.number):
            body["payer"]["identification"] = {
                "type": identification.type,
                "number": identification.number,
            }

        payment = self.provider.create(body, idempotency_key)

        logging.info(f"PAGAMENTO >>> Cartão {payment.id} processado ({format_currency(amount)} em {installments}x): {payment.status} / {payment.status_detail}")
        return CardPaymentResponse(
            id=payment.id,
            status=payment.status,
            status_detail=payment.status_detail,
        )

    @staticmethod
    def parse_amount(value: Any) -> Decimal:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError("Valor da transação inválido")
        if not amount.is_finite() or amount <= 0:
            raise ValidationError("Valor da transação inválido")
        return amount

    @staticmethod
    def parse_installments(value: Any) -> int:
        try:
            installments = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError("Número de parcelas inválido")
        if not installments.is_finite() or installments != installments.to_integral_value() or installments < 1:
            raise ValidationError("Número de parcelas inválido")
        return int(installments)
