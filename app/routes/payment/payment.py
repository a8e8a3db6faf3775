import logging
from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Header, Request
from fastapi.responses import PlainTextResponse

from app.core.exceptions.app_exception import AppHttpException
from app.exceptions.payment_error import ProviderError, ValidationError
from app.functions.payment.payment_intent import PaymentIntentService
from app.functions.payment.webhook_confirmation import WebhookConfirmationEngine
from app.schemas.payment import (
    CardPaymentRequest,
    CardPaymentResponse,
    PixPaymentRequest,
    PixPaymentResponse,
    WebhookNotification,
)


class PaymentRouter(APIRouter):
    def __init__(self, intent_service: PaymentIntentService, webhook_engine: WebhookConfirmationEngine, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.intent_service = intent_service
        self.webhook_engine = webhook_engine
        self.add_api_route("/create-payment", self.create_pix_payment, methods=["POST"], response_model=PixPaymentResponse)
        self.add_api_route("/process-card-payment", self.process_card_payment, methods=["POST"], response_model=CardPaymentResponse, status_code=201)
        self.add_api_route("/webhooks/mercadopago", self.handle_webhook, methods=["POST"], response_class=PlainTextResponse)

    def create_pix_payment(self, data: PixPaymentRequest, x_idempotency_key: Optional[str] = Header(default=None)):
        try:
            return self.intent_service.create_intent(data, x_idempotency_key)
        except ValidationError as e:
            raise AppHttpException.from_validation_error(e)
        except ProviderError as e:
            logging.error(f"PAGAMENTO >>> Erro ao criar Pix: {e.message} ({e.status_code})")
            raise AppHttpException.from_provider_error(e)

    def process_card_payment(self, data: CardPaymentRequest, x_idempotency_key: Optional[str] = Header(default=None)):
        try:
            return self.intent_service.create_intent(data, x_idempotency_key)
        except ValidationError as e:
            raise AppHttpException.from_validation_error(e)
        except ProviderError as e:
            logging.error(f"PAGAMENTO >>> Erro ao processar cartão: {e.message} ({e.status_code})")
            raise AppHttpException.from_provider_error(e)

    async def handle_webhook(self, request: Request, background_tasks: BackgroundTasks):
        try:
            body = await request.json()
        except ValueError:
            logging.warning("WEBHOOK >>> Corpo da notificação inválido")
            body = None

        logging.info(f"WEBHOOK >>> Notificação recebida: {body}")
        notification = WebhookNotification.from_request(body, dict(request.query_params))

        # Responde rápido; o processamento roda depois da resposta
        background_tasks.add_task(self.webhook_engine.handle_notification, notification)
        return PlainTextResponse("OK", status_code=200)
