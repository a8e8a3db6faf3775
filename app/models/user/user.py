from typing import Optional
from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):
    """
    Cadastro de acesso do usuário. É criado fora deste serviço (no cadastro)
    e aqui só muda uma vez: de não pago para pago, com o token de acesso.
    Mapeia apenas as colunas que este serviço lê e escreve.
    """
    __tablename__ = "users"

    email: str = Field(primary_key=True)

    # Linhas antigas podem vir com NULL; NULL conta como não pago
    is_paid: Optional[bool] = Field(default=False)
    token: Optional[str] = Field(default=None)

    class Config:
        from_attributes = True
