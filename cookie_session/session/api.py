from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel
import logging

from cookie_session.middleware.binding import RequestBinding
from cookie_session.middleware.session import get_session_binding

logger = logging.getLogger(__name__)
router = APIRouter()


class SessionView(BaseModel):
    data: Dict[str, Any] = {}
    is_new: bool = False
    is_populated: bool = False
    is_changed: bool = False
    cleared: bool = False


def _view(binding: RequestBinding) -> SessionView:
    sess = binding.get_session()
    if sess is None:
        return SessionView(cleared=True)
    return SessionView(
        data=sess.to_dict(),
        is_new=sess.is_new,
        is_populated=sess.is_populated,
        is_changed=sess.is_changed,
    )


@router.get('/session', response_model=SessionView)
async def api_session_get(binding: RequestBinding = Depends(get_session_binding)):
    return _view(binding)


@router.patch('/session', response_model=SessionView)
async def api_session_patch(payload: Dict[str, Any] = Body(...), binding: RequestBinding = Depends(get_session_binding)):
    sess = binding.get_session()
    if sess is None:
        raise HTTPException(status_code=409, detail={'error': 'session_cleared', 'message': 'Session was cleared for this request'})
    sess.update(payload)
    logger.debug("Updated session keys %s", sorted(payload))
    return _view(binding)


@router.put('/session', response_model=SessionView)
async def api_session_put(payload: Any = Body(None), binding: RequestBinding = Depends(get_session_binding)):
    # InvalidSessionValue propagates to the app's exception handler
    binding.set_session(payload)
    return _view(binding)


@router.delete('/session', response_model=SessionView)
async def api_session_delete(binding: RequestBinding = Depends(get_session_binding)):
    binding.set_session(None)
    return SessionView(cleared=True)
