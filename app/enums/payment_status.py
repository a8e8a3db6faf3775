from enum import Enum


# Status devolvidos pelo Mercado Pago
class PaymentStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    AUTHORIZED = "authorized"
    IN_PROCESS = "in_process"
    IN_MEDIATION = "in_mediation"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    CHARGED_BACK = "charged_back"


class PaymentMethod(str, Enum):
    PIX = "pix"
    CARD = "card"


# Resultado do processamento de uma notificação
class WebhookOutcome(str, Enum):
    IGNORED = "ignored"
    SKIPPED = "skipped"
    GRANTED = "granted"
    FAILED = "failed"
