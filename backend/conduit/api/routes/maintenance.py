"""Maintenance Routes - development-only data reset.

Invariants:
    - Router is included by main.py only when settings.enable_dev_endpoints is true
"""

from fastapi import APIRouter, Depends, Response, status

from conduit.api.dependencies import get_dispatcher
from conduit.core.commands import WipeAllData
from conduit.core.errors import unwrap
from conduit.services.dispatch import Dispatcher

router = APIRouter(prefix="/api/dev", tags=["dev"])


@router.delete(
    "/data", status_code=status.HTTP_204_NO_CONTENT, response_class=Response,
)
async def wipe_all_data(dispatcher: Dispatcher = Depends(get_dispatcher)):
    unwrap(await dispatcher.send(WipeAllData()))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
