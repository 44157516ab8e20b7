import discord
from discord.ext import commands

# what the bot needs to run rooms and answer !rooms
REQUIRED_PERMISSIONS = "Manage Channels / Move Members / Embed Links"


class ErrorHandlerCog(commands.Cog):
    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @commands.Cog.listener()
    async def on_command_error(self, ctx: commands.Context, error: Exception):
        if isinstance(error, commands.CommandInvokeError):
            error = error.original

        if isinstance(error, commands.CommandNotFound):
            return

        if isinstance(error, commands.NoPrivateMessage):
            return await ctx.reply("That command only works inside a server.")

        if isinstance(error, commands.MissingPermissions):
            return await ctx.reply("You need **Manage Channels** to use that command.")

        if isinstance(error, (commands.BotMissingPermissions, discord.Forbidden)):
            return await ctx.reply(f"I’m missing permissions here ({REQUIRED_PERMISSIONS}).")

        await ctx.reply(f"Command error: `{type(error).__name__}`")
        raise error
