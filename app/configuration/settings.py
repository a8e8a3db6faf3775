import logging
import os
from decimal import Decimal, InvalidOperation
from typing import List

from dotenv import load_dotenv
from sqlalchemy.engine import URL, make_url

from app.exceptions.payment_error import ConfigurationError

# Configuração de logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

# Carrega as variáveis de ambiente
load_dotenv(dotenv_path=".env", encoding="utf-8")

# Silencia logs de SQLAlchemy
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

DEFAULT_PIX_PRICE = "19.90"
DEFAULT_PRODUCT_DESCRIPTION = "Acesso Premium MenthorHub"


class Configuration:
    def __init__(self):

        # Ambiente
        self.environment = os.getenv("ENVIRONMENT", "development").lower()
        self.port = int(os.getenv("PORT", 3000))

        # Banco de dados (Supabase / Postgres)
        self.database_url = os.getenv("DATABASE_URL")
        self.database_password = os.getenv("DATABASE_PASSWORD")

        # Mercado Pago
        self.mercado_pago_access_token_test = os.getenv("MERCADO_PAGO_ACCESS_TOKEN_TEST")
        self.mercado_pago_access_token_prod = os.getenv("MERCADO_PAGO_ACCESS_TOKEN_PROD")
        self.mercado_pago_notification_url = os.getenv("MERCADO_PAGO_NOTIFICATION_URL")

        # Produto
        self.pix_price_raw = os.getenv("PIX_PRICE", DEFAULT_PIX_PRICE)
        self.product_description = os.getenv("PRODUCT_DESCRIPTION", DEFAULT_PRODUCT_DESCRIPTION)

        # CORS
        self.cors_origins_raw = os.getenv("CORS_ORIGINS", "*")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def mercado_pago_access_token(self):
        if self.is_production:
            return self.mercado_pago_access_token_prod
        return self.mercado_pago_access_token_test

    @property
    def pix_price(self) -> Decimal:
        try:
            price = Decimal(self.pix_price_raw)
        except (InvalidOperation, TypeError):
            raise ConfigurationError(f"PIX_PRICE inválido: {self.pix_price_raw!r}")
        if not price.is_finite() or price <= 0:
            raise ConfigurationError(f"PIX_PRICE deve ser positivo: {self.pix_price_raw!r}")
        return price

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins_raw.split(",") if origin.strip()]

    def validate(self) -> "Configuration":
        """
        Garante que todas as variáveis obrigatórias estão presentes.
        A aplicação não sobe sem elas.
        """
        token_variable = "MERCADO_PAGO_ACCESS_TOKEN_PROD" if self.is_production else "MERCADO_PAGO_ACCESS_TOKEN_TEST"
        required = {
            "DATABASE_URL": self.database_url,
            "DATABASE_PASSWORD": self.database_password,
            token_variable: self.mercado_pago_access_token,
            "MERCADO_PAGO_NOTIFICATION_URL": self.mercado_pago_notification_url,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ConfigurationError(f"Variáveis de ambiente ausentes: {', '.join(missing)}")

        # Valida o preço já na subida
        self.pix_price
        return self

    def connect_to_database(self) -> URL:
        # Monta a URL de conexão com a credencial de serviço
        db_url = make_url(self.database_url).set(password=self.database_password)
        logging.info(f"BANCO DE DADOS >>> SELECIONADO ({self.environment}) -> : {db_url.render_as_string(hide_password=True)}")
        return db_url
