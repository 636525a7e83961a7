from fastapi import APIRouter, Body, Depends
from typing import Any, Dict

from app.api.deps import get_settings_store
from app.schemas.indexing import MessageResponse
from app.services.settings_store import SettingsStore

router = APIRouter()


@router.get("")
def get_settings(store: SettingsStore = Depends(get_settings_store)) -> Dict[str, Any]:
    """Get saved app settings ({} when nothing has been saved)."""
    return store.get()


@router.post("", response_model=MessageResponse)
def save_settings(payload: Any = Body(...), store: SettingsStore = Depends(get_settings_store)):
    """Replace app settings. googleApiKey and googleCxId must both be strings."""
    store.put(payload)
    return MessageResponse(message="Settings saved successfully.")
