from fastapi import Depends

from selfmanager.manager.workspace import UserWorkspace, get_workspace
from selfmanager.server.shared import config
from selfmanager.server.user_auth import get_user_id


async def get_user_workspace(user_id: str = Depends(get_user_id)) -> UserWorkspace:
    """The loaded workspace of the requesting user."""
    return await get_workspace(config, user_id)
