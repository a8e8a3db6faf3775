from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from typing import Any, Dict, Sequence

from app.exceptions.payment_error import ProviderError, ValidationError


class AppHttpException(HTTPException):
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)
        self.status_code = status_code
        self.detail = detail
        self.content = {"error": detail}

    @classmethod
    def from_validation_error(cls, error: ValidationError) -> "AppHttpException":
        return cls(status_code=400, detail=error.message)

    @classmethod
    def from_provider_error(cls, error: ProviderError) -> "AppHttpException":
        return cls(status_code=error.status_code, detail=error.message)


def describe_request_errors(errors: Sequence[Dict[str, Any]]) -> str:
    """Transforma os erros do pydantic numa frase curta para o cliente."""
    reasons = []
    for error in errors:
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        if not field and error.get("type") == "missing":
            reasons.append("corpo da requisição ausente")
        else:
            reasons.append(f"{field or 'corpo'}: {error.get('msg')}")
    return "Dados inválidos: " + "; ".join(reasons)


async def app_http_exception_handler(request: Request, exc: AppHttpException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.content)


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = AppHttpException(status_code=400, detail=describe_request_errors(exc.errors()))
    return JSONResponse(status_code=error.status_code, content=error.content)
