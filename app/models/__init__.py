# app/models/__init__.py

from .user.user import User
