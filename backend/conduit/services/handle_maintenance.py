"""Maintenance Handlers - development-only data reset (1 method).

Invariants:
    - Deletion runs in foreign-key-safe order: comments, edges, articles
      (with tag links), tags, users
    - Exposed over HTTP only when settings.enable_dev_endpoints is true
"""

import logging

from conduit.core.commands import WipeAllData
from conduit.core.repository_protocols import Store
from conduit.core.result import Result

logger = logging.getLogger(__name__)


class MaintenanceHandlers:
    def __init__(self, store: Store):
        self.store = store

    async def wipe_all_data(self, command: WipeAllData) -> Result[None]:
        await self.store.comments.delete_all()
        await self.store.edges.delete_all()
        await self.store.articles.delete_all()
        await self.store.tags.delete_all()
        await self.store.users.delete_all()
        logger.warning("All data wiped")
        return Result.ok()
