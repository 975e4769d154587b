# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Club settings endpoints.
Thin HTTP layer — delegates ALL logic to SettingsService.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from squarehead.core.dependencies import get_settings_service
from squarehead.services.settings_service import SettingsService

router = APIRouter(prefix="/api/v1", tags=["Settings"])


@router.get("/settings")
def get_settings(
    service: SettingsService = Depends(get_settings_service),
):
    """All stored club settings."""
    return service.get_all()


@router.get("/settings/{key}")
def get_setting(
    key: str,
    service: SettingsService = Depends(get_settings_service),
):
    try:
        return {"key": key, "value": service.get(key)}
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/settings")
def update_settings(
    payload: dict[str, Any] = Body(...),
    service: SettingsService = Depends(get_settings_service),
):
    """
    Store several settings at once. Each key is validated on its own;
    the request fails with 400 only when no key could be stored.
    """
    if not payload:
        raise HTTPException(status_code=400, detail="No settings provided")
    result = service.update(payload)
    if result["errors"] and not result["updated"]:
        raise HTTPException(status_code=400, detail=result["errors"])
    return result
