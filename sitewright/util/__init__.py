from .env import load_env_file
from .id import new_build_id

__all__ = [
    "load_env_file",
    "new_build_id",
]
