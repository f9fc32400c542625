from selfmanager.core.config import load_config
from selfmanager.server.user_auth import get_auth_provider

config = load_config()
auth_provider = get_auth_provider(config)
