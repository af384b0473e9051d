# src/scanner/core/security.py
from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from scanner.core.config import Settings, get_settings

_API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=True)


async def get_operator_id(
    api_key: str = Security(_API_KEY_HEADER),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    FastAPI Dependency: Validiert den API-Key und gibt die Operator-ID zurück.
    Jeder Operator hat seine eigene Scan-Session. Wirft HTTP 401 bei ungültigem Key.
    """
    operator_id = settings.api_keys.get(api_key)
    if operator_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key.",
            headers={"WWW-Authenticate": "ApiKey"},
        )
    return operator_id
