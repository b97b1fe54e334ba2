"""Tag Routes - public list of tag names."""

from fastapi import APIRouter, Depends

from conduit.api.dependencies import get_dispatcher
from conduit.core.commands import ListTags
from conduit.core.errors import unwrap
from conduit.schemas.views import TagListEnvelope
from conduit.services.dispatch import Dispatcher

router = APIRouter(prefix="/api/tags", tags=["tags"])


@router.get("", response_model=TagListEnvelope)
async def list_tags(dispatcher: Dispatcher = Depends(get_dispatcher)):
    return TagListEnvelope(tags=unwrap(await dispatcher.send(ListTags())))
