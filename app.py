# Ponto de entrada para o Uvicorn: uvicorn app:app
from ebbb_admin.main import app

__all__ = ["app"]
