import logging
from typing import Callable

from app.enums.payment_status import PaymentStatus, WebhookOutcome
from app.exceptions.payment_error import ProviderError, StoreError
from app.helpers.payment.access_token import generate_access_token
from app.integration.mercadopago import MercadoPagoClient
from app.schemas.payment import WebhookNotification
from app.storage.entitlement_store import EntitlementStore


class WebhookConfirmationEngine:
    """
    Processa uma notificação do Mercado Pago depois que ela já foi respondida.

    O corpo da notificação só diz QUAL pagamento mudou. Status e pagador vêm
    sempre da consulta ao Mercado Pago. A liberação de acesso é uma escrita
    condicional no banco, então notificações repetidas ou simultâneas para o
    mesmo e-mail liberam no máximo uma vez.
    """

    def __init__(
        self,
        provider: MercadoPagoClient,
        store: EntitlementStore,
        token_factory: Callable[[], str] = generate_access_token,
    ):
        self.provider = provider
        self.store = store
        self.token_factory = token_factory

    def handle_notification(self, notification: WebhookNotification) -> WebhookOutcome:
        outcome = self.process(notification)
        logging.info(f"WEBHOOK >>> Notificação {notification.type}/{notification.data.id} finalizada: {outcome.value}")
        return outcome

    def process(self, notification: WebhookNotification) -> WebhookOutcome:
        if notification.type != "payment":
            return WebhookOutcome.IGNORED

        payment_id = notification.data.id
        if not payment_id:
            logging.warning("WEBHOOK >>> Notificação de pagamento sem data.id")
            return WebhookOutcome.IGNORED

        # Consulta o status real no Mercado Pago
        try:
            payment = self.provider.get_by_id(payment_id)
        except ProviderError as e:
            logging.error(f"WEBHOOK >>> Não foi possível consultar o pagamento {payment_id}: {e.message} ({e.status_code})")
            return WebhookOutcome.FAILED

        if payment.status != PaymentStatus.APPROVED.value:
            logging.info(f"WEBHOOK >>> Pagamento {payment_id} com status {payment.status}, nada a fazer")
            return WebhookOutcome.SKIPPED

        email = payment.payer_email
        if not email:
            logging.warning(f"WEBHOOK >>> Pagamento {payment_id} aprovado sem e-mail do pagador")
            return WebhookOutcome.SKIPPED

        try:
            user = self.store.find_by_email(email)
        except StoreError:
            logging.error(f"WEBHOOK >>> Falha ao buscar usuário {email}; acesso não liberado para o pagamento {payment_id}")
            return WebhookOutcome.FAILED

        if user is None:
            logging.warning(f"WEBHOOK >>> Pagamento {payment_id} aprovado, mas não existe usuário {email}")
            return WebhookOutcome.SKIPPED

        if user.is_paid:
            logging.info(f"WEBHOOK >>> Usuário {email} já está pago, notificação repetida")
            return WebhookOutcome.SKIPPED

        try:
            result = self.store.grant_if_unpaid(email, self.token_factory())
        except StoreError:
            logging.error(f"WEBHOOK >>> Falha ao liberar acesso de {email} (pagamento {payment_id}); usuário continua não pago")
            return WebhookOutcome.FAILED

        if not result.applied:
            # Outra notificação liberou primeiro
            logging.info(f"WEBHOOK >>> Acesso de {email} já liberado por outra notificação")
            return WebhookOutcome.SKIPPED

        logging.info(f"WEBHOOK >>> Acesso liberado para {email} (pagamento {payment_id})")
        return WebhookOutcome.GRANTED
