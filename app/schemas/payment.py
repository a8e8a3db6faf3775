# app/schemas/payment.py
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional, Union

from app.enums.payment_status import PaymentMethod


class PixPaymentRequest(BaseModel):
    payer_email: Optional[str] = Field(default=None, alias="payerEmail")
    payer_name: Optional[str] = Field(default=None, alias="payerName")

    class Config:
        populate_by_name = True

    @property
    def method(self) -> PaymentMethod:
        return PaymentMethod.PIX


class Identification(BaseModel):
    type: Optional[str] = None  # "CPF", "CNPJ"
    number: Optional[str] = None


class CardPayer(BaseModel):
    email: Optional[str] = None
    identification: Optional[Identification] = None


class CardPaymentRequest(BaseModel):
    token: Optional[str] = None  # Token do cartão, gerado no frontend
    issuer_id: Optional[Union[int, str]] = None
    payment_method_id: Optional[str] = None  # "visa", "master", etc.
    # Podem chegar como texto do formulário; a conversão é feita no serviço
    transaction_amount: Optional[Union[float, str]] = None
    installments: Optional[Union[int, str]] = None
    payer: Optional[CardPayer] = None

    @property
    def method(self) -> PaymentMethod:
        return PaymentMethod.CARD


PaymentIntentRequest = Union[PixPaymentRequest, CardPaymentRequest]


class PixPaymentResponse(BaseModel):
    id: str
    qr_code: str
    qr_code_base64: Optional[str] = None


class CardPaymentResponse(BaseModel):
    id: str
    status: Optional[str] = None
    status_detail: Optional[str] = None


PaymentIntentResult = Union[PixPaymentResponse, CardPaymentResponse]


class WebhookData(BaseModel):
    id: Optional[str] = None


class WebhookNotification(BaseModel):
    """Notificação do Mercado Pago. Só serve para saber QUAL pagamento consultar."""
    type: Optional[str] = None
    data: WebhookData = Field(default_factory=WebhookData)

    @classmethod
    def from_request(cls, body: Any, query: Dict[str, str]) -> "WebhookNotification":
        body = body if isinstance(body, dict) else {}
        data = body.get("data") if isinstance(body.get("data"), dict) else {}

        notification_type = body.get("type") or query.get("type") or query.get("topic")
        payment_id = data.get("id") or query.get("data.id") or query.get("id")

        return cls(
            type=str(notification_type) if notification_type is not None else None,
            data=WebhookData(id=str(payment_id) if payment_id is not None else None),
        )


def as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


class ProviderPayment(BaseModel):
    """Pagamento como o Mercado Pago o devolve, já normalizado."""
    id: str
    status: Optional[str] = None
    status_detail: Optional[str] = None
    payer_email: Optional[str] = None
    qr_code: Optional[str] = None
    qr_code_base64: Optional[str] = None

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> "ProviderPayment":
        payer = as_dict(response.get("payer"))
        poi = as_dict(response.get("point_of_interaction"))
        transaction_data = as_dict(poi.get("transaction_data"))

        return cls(
            id=str(response["id"]),
            status=response.get("status"),
            status_detail=response.get("status_detail"),
            payer_email=payer.get("email"),
            qr_code=transaction_data.get("qr_code"),
            qr_code_base64=transaction_data.get("qr_code_base64"),
        )
