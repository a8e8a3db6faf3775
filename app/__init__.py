import logging
from typing import Optional
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.configuration.settings import Configuration
from app.core.exceptions.app_exception import (
    AppHttpException,
    app_http_exception_handler,
    request_validation_exception_handler,
)
from app.database.connection import build_engine, init_db
from app.functions.payment.payment_intent import PaymentIntentService
from app.functions.payment.webhook_confirmation import WebhookConfirmationEngine
from app.integration.mercadopago import MercadoPagoClient
from app.routes.home import HomeRouter
from app.routes.payment.payment import PaymentRouter
from app.storage.entitlement_store import EntitlementStore


def create_app(
    configuration: Optional[Configuration] = None,
    provider: Optional[MercadoPagoClient] = None,
    store: Optional[EntitlementStore] = None,
):
    """
    Cria e configura a aplicação FastAPI, incluindo middlewares e rotas.
    Os adaptadores do Mercado Pago e do banco são criados uma vez aqui
    (ou recebidos prontos) e repassados aos serviços.
    """
    configuration = (configuration or Configuration()).validate()
    logging.info(f"SISTEMA >>> Ambiente carregado: {configuration.environment}")

    if provider is None:
        provider = MercadoPagoClient(configuration.mercado_pago_access_token)

    if store is None:
        logging.info("SISTEMA >>> Inicializando o banco de dados...")
        engine = build_engine(configuration)
        init_db(engine)
        store = EntitlementStore(engine)

    intent_service = PaymentIntentService(provider, configuration)
    webhook_engine = WebhookConfirmationEngine(provider, store)

    app = FastAPI(title="MenthorHub Payments")

    origins = configuration.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppHttpException, app_http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)

    app.include_router(HomeRouter())
    app.include_router(PaymentRouter(intent_service, webhook_engine))

    return app
