# kennel/loader.py
from __future__ import annotations

import logging

from kennel.cogs.errors import ErrorHandlerCog
from kennel.cogs.meta import MetaCog
from kennel.cogs.rooms import RoomsCog
from kennel.core.rooms import RoomOrchestrator
from kennel.services.directory import DirectoryClient

log = logging.getLogger(__name__)


async def load_all(bot, settings, orchestrator: RoomOrchestrator | None = None) -> RoomOrchestrator:
    log.info("Starting loader...")

    # attach shared deps (so any cog can grab them if needed)
    bot.settings = settings

    if orchestrator is None:
        orchestrator = RoomOrchestrator(DirectoryClient(bot), settings)
    bot.rooms = orchestrator

    # ---------------- ROOMS ----------------
    # Without this one the bot has nothing to do, so let it fail loudly.
    await bot.add_cog(RoomsCog(bot, settings, orchestrator))
    log.info("✅ RoomsCog loaded")

    # ---------------- META ----------------
    try:
        await bot.add_cog(MetaCog(bot, settings, orchestrator))
        log.info("✅ MetaCog loaded")
    except Exception:
        log.exception("❌ MetaCog FAILED")

    # ---------------- ERROR HANDLER ----------------
    try:
        await bot.add_cog(ErrorHandlerCog(bot))
        log.info("✅ ErrorHandlerCog loaded")
    except Exception:
        log.exception("❌ ErrorHandlerCog FAILED")

    log.info("Loaded cogs: %s", ", ".join(bot.cogs.keys()))
    return orchestrator
