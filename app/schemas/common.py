# app/schemas/common.py
from typing import Optional, Dict, Any
from pydantic import BaseModel


class ActionResponse(BaseModel):
    """Outcome of a state-changing action with no entity payload"""
    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    data: Dict[str, Any]
