from buddy.commands.command_store import CommandStore

__all__ = ["CommandStore"]
