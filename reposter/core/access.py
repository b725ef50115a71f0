"""Admin access checks against the admin list."""
from reposter.store import ListName, ListStore


async def is_admin(store: ListStore, chat_id: int) -> bool:
    """Check if a chat is in the admin list."""
    return await store.contains(ListName.ADMINS, chat_id)


async def is_unconfigured(store: ListStore) -> bool:
    """True while no admin exists yet and /setup may claim the bot."""
    admins = await store.member_ids(ListName.ADMINS)
    return len(admins) == 0
