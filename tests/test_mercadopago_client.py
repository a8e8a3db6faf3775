import pytest

from app.exceptions.payment_error import GENERIC_PROVIDER_MESSAGE, ProviderError
from app.integration.mercadopago import MercadoPagoClient

from conftest import FakeMercadoPagoSDK, mp_payment


def test_create_returns_normalized_payment(provider: MercadoPagoClient, fake_sdk: FakeMercadoPagoSDK) -> None:
    payment = provider.create({"transaction_amount": 19.9})

    assert payment.id == "123"
    assert payment.status == "pending"
    assert payment.qr_code == "Q"
    assert payment.qr_code_base64 == "B"
    assert payment.payer_email == "a@x.com"


def test_create_sends_idempotency_key(provider: MercadoPagoClient, fake_sdk: FakeMercadoPagoSDK) -> None:
    provider.create({}, idempotency_key="order-42")
    provider.create({})
    provider.create({})

    keys = [options.custom_headers["x-idempotency-key"] for options in fake_sdk.request_options]
    assert keys[0] == "order-42"
    assert keys[1] and keys[2] and keys[1] != keys[2]


def test_create_keeps_provider_status_and_message(provider: MercadoPagoClient, fake_sdk: FakeMercadoPagoSDK) -> None:
    fake_sdk.create_result = {
        "status": 400,
        "response": {"message": "Invalid transaction_amount", "error": "bad_request", "status": 400},
    }

    with pytest.raises(ProviderError) as excinfo:
        provider.create({})

    assert excinfo.value.status_code == 400
    assert excinfo.value.message == "Invalid transaction_amount"


def test_create_falls_back_to_cause_description(provider: MercadoPagoClient, fake_sdk: FakeMercadoPagoSDK) -> None:
    fake_sdk.create_result = {
        "status": 401,
        "response": {"cause": [{"code": 2, "description": "invalid access token"}]},
    }

    with pytest.raises(ProviderError) as excinfo:
        provider.create({})

    assert excinfo.value.status_code == 401
    assert excinfo.value.message == "invalid access token"


def test_sdk_exception_becomes_generic_error(provider: MercadoPagoClient, fake_sdk: FakeMercadoPagoSDK) -> None:
    fake_sdk.create_result = ConnectionError("socket closed at 10.0.0.3")

    with pytest.raises(ProviderError) as excinfo:
        provider.create({})

    assert excinfo.value.status_code == 500
    assert excinfo.value.message == GENERIC_PROVIDER_MESSAGE
    assert "10.0.0.3" not in excinfo.value.message


def test_success_status_without_payment_is_an_error(provider: MercadoPagoClient, fake_sdk: FakeMercadoPagoSDK) -> None:
    fake_sdk.create_result = {"status": 200, "response": {}}

    with pytest.raises(ProviderError) as excinfo:
        provider.create({})

    assert excinfo.value.status_code == 500
    assert excinfo.value.message == GENERIC_PROVIDER_MESSAGE


def test_get_by_id_reads_authoritative_payment(provider: MercadoPagoClient, fake_sdk: FakeMercadoPagoSDK) -> None:
    fake_sdk.payments["555"] = mp_payment("555", "approved", email="b@x.com")

    payment = provider.get_by_id("555")

    assert fake_sdk.fetched == ["555"]
    assert payment.id == "555"
    assert payment.status == "approved"
    assert payment.payer_email == "b@x.com"


def test_get_by_id_unknown_payment(provider: MercadoPagoClient) -> None:
    with pytest.raises(ProviderError) as excinfo:
        provider.get_by_id("999")

    assert excinfo.value.status_code == 404
    assert excinfo.value.message == "Payment not found"


def test_malformed_nested_fields_are_tolerated(provider: MercadoPagoClient, fake_sdk: FakeMercadoPagoSDK) -> None:
    fake_sdk.payments["7"] = {"id": 7, "status": "approved", "payer": "a@x.com", "point_of_interaction": "qr"}

    payment = provider.get_by_id("7")

    assert payment.id == "7"
    assert payment.status == "approved"
    assert payment.payer_email is None
    assert payment.qr_code is None


def test_unexpected_field_types_become_provider_error(provider: MercadoPagoClient, fake_sdk: FakeMercadoPagoSDK) -> None:
    fake_sdk.payments["8"] = {"id": 8, "status": {"code": "approved"}, "payer": {"email": "a@x.com"}}

    with pytest.raises(ProviderError) as excinfo:
        provider.get_by_id("8")

    assert excinfo.value.status_code == 502
    assert excinfo.value.message == GENERIC_PROVIDER_MESSAGE
