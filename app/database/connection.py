import logging
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from app.configuration.settings import Configuration
from app.models import User  # noqa: F401  registra a tabela no metadata


def build_engine(configuration: Configuration) -> Engine:
    db_url = configuration.connect_to_database()
    return create_engine(db_url, pool_pre_ping=True)


def init_db(engine: Engine) -> None:
    # Só cria a tabela se ela ainda não existir
    SQLModel.metadata.create_all(engine)
    logging.info("BANCO DE DADOS >>> Tabelas verificadas")
