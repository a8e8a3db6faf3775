"""Fixtures dos testes do serviço de pagamentos."""
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app import create_app
from app.configuration.settings import Configuration
from app.integration.mercadopago import MercadoPagoClient
from app.models.user.user import User
from app.storage.entitlement_store import EntitlementStore

TEST_ENV = {
    "ENVIRONMENT": "development",
    "DATABASE_URL": "postgresql://postgres@db.example.supabase.co:5432/postgres",
    "DATABASE_PASSWORD": "service-credential",
    "MERCADO_PAGO_ACCESS_TOKEN_TEST": "TEST-access-token",
    "MERCADO_PAGO_NOTIFICATION_URL": "https://payments.example.com/webhooks/mercadopago",
    "PIX_PRICE": "19.90",
    "PRODUCT_DESCRIPTION": "Acesso Premium MenthorHub",
    "CORS_ORIGINS": "*",
}


def mp_payment(
    payment_id: str,
    status: str = "pending",
    email: Optional[str] = "a@x.com",
    qr_code: Optional[str] = None,
    qr_code_base64: Optional[str] = None,
    status_detail: Optional[str] = None,
) -> Dict[str, Any]:
    """Monta um pagamento no formato da resposta da API do Mercado Pago."""
    response: Dict[str, Any] = {
        "id": int(payment_id) if payment_id.isdigit() else payment_id,
        "status": status,
        "status_detail": status_detail,
        "payer": {"email": email},
    }
    if qr_code is not None:
        response["point_of_interaction"] = {
            "transaction_data": {"qr_code": qr_code, "qr_code_base64": qr_code_base64}
        }
    return response


class FakePaymentResource:
    def __init__(self, sdk: "FakeMercadoPagoSDK") -> None:
        self.sdk = sdk

    def create(self, body: Dict[str, Any], request_options: Any = None) -> Dict[str, Any]:
        self.sdk.created.append(body)
        self.sdk.request_options.append(request_options)
        if isinstance(self.sdk.create_result, Exception):
            raise self.sdk.create_result
        return self.sdk.create_result

    def get(self, payment_id: str) -> Dict[str, Any]:
        self.sdk.fetched.append(payment_id)
        if self.sdk.get_error is not None:
            raise self.sdk.get_error
        if payment_id not in self.sdk.payments:
            return {
                "status": 404,
                "response": {"message": "Payment not found", "error": "not_found", "status": 404, "cause": []},
            }
        return {"status": 200, "response": self.sdk.payments[payment_id]}


class FakeMercadoPagoSDK:
    """Substituto do ``mercadopago.SDK`` com o mesmo formato ``payment().create/get``."""

    def __init__(self) -> None:
        self.created: List[Dict[str, Any]] = []
        self.request_options: List[Any] = []
        self.fetched: List[str] = []
        self.payments: Dict[str, Dict[str, Any]] = {}
        self.get_error: Optional[Exception] = None
        self.create_result: Any = {
            "status": 201,
            "response": mp_payment("123", "pending", qr_code="Q", qr_code_base64="B"),
        }

    def payment(self) -> FakePaymentResource:
        return FakePaymentResource(self)


class RecordingStore(EntitlementStore):
    """Store de acesso que registra cada chamada recebida."""

    def __init__(self, engine) -> None:
        super().__init__(engine)
        self.calls: List[str] = []

    def find_by_email(self, email: str):
        self.calls.append(f"find:{email}")
        return super().find_by_email(email)

    def grant_if_unpaid(self, email: str, token: str):
        self.calls.append(f"grant:{email}")
        return super().grant_if_unpaid(email, token)


@pytest.fixture()
def configuration(monkeypatch: pytest.MonkeyPatch) -> Configuration:
    for name, value in TEST_ENV.items():
        monkeypatch.setenv(name, value)
    monkeypatch.delenv("MERCADO_PAGO_ACCESS_TOKEN_PROD", raising=False)
    return Configuration()


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def add_user(engine):
    def _add_user(email: str, is_paid: Optional[bool] = False, token: Optional[str] = None) -> None:
        with Session(engine) as session:
            session.add(User(email=email, is_paid=is_paid, token=token))
            session.commit()

    return _add_user


@pytest.fixture()
def get_user(engine):
    def _get_user(email: str) -> Optional[User]:
        return EntitlementStore(engine).find_by_email(email)

    return _get_user


@pytest.fixture()
def fake_sdk() -> FakeMercadoPagoSDK:
    return FakeMercadoPagoSDK()


@pytest.fixture()
def provider(fake_sdk: FakeMercadoPagoSDK) -> MercadoPagoClient:
    return MercadoPagoClient(sdk=fake_sdk)


@pytest.fixture()
def store(engine) -> RecordingStore:
    return RecordingStore(engine)


@pytest.fixture()
def client(configuration, provider, store):
    app = create_app(configuration, provider=provider, store=store)
    with TestClient(app) as test_client:
        yield test_client
