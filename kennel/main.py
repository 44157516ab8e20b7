# kennel/main.py
import asyncio
import contextlib
import logging
import signal
import sys

import discord
from discord.ext import commands

from kennel.config import load_settings
from kennel.loader import load_all

log = logging.getLogger("kennel")


def build_bot(settings) -> commands.Bot:
    intents = discord.Intents.default()
    intents.voice_states = True
    intents.guilds = True
    intents.message_content = True

    bot = commands.Bot(command_prefix=settings.command_prefix, intents=intents)

    @bot.event
    async def setup_hook():
        await load_all(bot, settings)
        log.info("setup_hook: cogs loaded ✅")

    @bot.event
    async def on_message(message: discord.Message):
        if message.author.bot:
            return
        await bot.process_commands(message)

    return bot


async def run(settings) -> None:
    bot = build_bot(settings)
    log.info("PREFIX='%s' (env=%s)", settings.command_prefix, settings.env)

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # not available on Windows event loops
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop.set)

    async with bot:
        runner = asyncio.create_task(bot.start(settings.token))
        waiter = asyncio.create_task(stop.wait())
        done, _ = await asyncio.wait({runner, waiter}, return_when=asyncio.FIRST_COMPLETED)

        if runner in done:
            waiter.cancel()
            runner.result()  # re-raises LoginFailure and friends
            return

        log.info("shutdown requested, finishing in-flight voice update...")
        rooms = getattr(bot, "rooms", None)
        if rooms is not None:
            await rooms.drain()

        await bot.close()
        with contextlib.suppress(asyncio.CancelledError):
            await runner

    log.info("gateway connection closed")


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    try:
        settings = load_settings()
    except RuntimeError as e:
        log.critical("%s", e)
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)

    try:
        asyncio.run(run(settings))
    except discord.LoginFailure as e:
        log.critical("cannot connect: %s", e)
        sys.exit(1)
    except KeyboardInterrupt:
        log.info("Received interrupt; exiting cleanly.")


if __name__ == "__main__":
    main()
