"""Tag Handlers - list known tag names (1 method).

Invariants:
    - Names are de-duplicated and sorted alphabetically
    - A data-access fault is turned into UNEXPECTED by the dispatcher, not here
"""

from conduit.core.commands import ListTags
from conduit.core.repository_protocols import Store
from conduit.core.result import Result


class TagHandlers:
    def __init__(self, store: Store):
        self.store = store

    async def list_tags(self, query: ListTags) -> Result[list[str]]:
        tags = await self.store.tags.all()
        return Result.ok(sorted({t.name for t in tags}))
