from apps.common.env import get_bool

from .base import *  # noqa: F403

DEBUG = get_bool("DEBUG", default=True)
ALLOWED_HOSTS = ["*"]
