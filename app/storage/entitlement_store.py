import logging
from typing import Optional

from pydantic import BaseModel
from sqlalchemy import update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.exceptions.payment_error import StoreError
from app.models.user.user import User


class GrantResult(BaseModel):
    applied: bool


class EntitlementStore:
    def __init__(self, engine: Engine):
        self.engine = engine

    def find_by_email(self, email: str) -> Optional[User]:
        """Retorna o cadastro do usuário ou None quando não existe."""
        try:
            with Session(self.engine) as session:
                return session.exec(select(User).where(User.email == email)).first()
        except SQLAlchemyError as e:
            logging.error(f"BANCO DE DADOS >>> Erro ao buscar usuário {email}: {e}", exc_info=True)
            raise StoreError() from e

    def grant_if_unpaid(self, email: str, token: str) -> GrantResult:
        """
        Libera o acesso numa única escrita condicional:
        só altera a linha se o usuário ainda não estiver pago (false ou NULL).
        Zero linhas afetadas significa que outra notificação chegou antes.
        """
        statement = (
            update(User)
            .where(User.email == email, User.is_paid.is_not(True))
            .values(is_paid=True, token=token)
        )
        try:
            with self.engine.begin() as connection:
                result = connection.execute(statement)
        except SQLAlchemyError as e:
            logging.error(f"BANCO DE DADOS >>> Erro ao liberar acesso para {email}: {e}", exc_info=True)
            raise StoreError() from e

        return GrantResult(applied=result.rowcount == 1)
