"""Publishing pipeline: regenerate after content changes, then run hooks.

Post-generate hooks (auto-deploy by default) have their own error channel:
failures are logged and never abort the request that triggered them.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from backend.filesystem.document_store import SettingsStore
    from backend.services.deploy_service import Deployer
    from backend.services.generator import SiteGenerator

    PostGenerateHook = Callable[[str], Awaitable[None]]

logger = logging.getLogger(__name__)


class SitePublisher:
    """Owns generation, deployment and the post-generate hook list."""

    def __init__(
        self,
        generator: SiteGenerator,
        deployer: Deployer,
        settings_store: SettingsStore,
    ) -> None:
        self.generator = generator
        self.deployer = deployer
        self.settings_store = settings_store
        self.hooks: list[PostGenerateHook] = [self.auto_deploy]

    def generate(self) -> int:
        return self.generator.generate()

    async def deploy(self) -> int:
        """Deploy in a worker thread; errors propagate to the caller."""
        return await asyncio.to_thread(self.deployer.deploy)

    async def auto_deploy(self, reason: str) -> None:
        """Deploy when the ``autoDeploy`` flag is set."""
        if not self.settings_store.get().auto_deploy:
            return
        logger.info("Auto-deploying after %s", reason)
        await self.deploy()

    async def run_hooks(self, reason: str) -> None:
        """Run every hook, logging failures instead of raising."""
        for hook in self.hooks:
            try:
                await hook(reason)
            except Exception:
                logger.exception("Post-generate hook failed after %s", reason)

    async def after_change(self, reason: str) -> int:
        """Regenerate the site, then run the post-generate hooks.

        Generation errors propagate; hook errors are only logged.
        """
        count = self.generate()
        await self.run_hooks(reason)
        return count
