from .config import Config, ModelPolicy, apply_env, default_config, load_from_file, parse_list

__all__ = [
    "Config",
    "ModelPolicy",
    "apply_env",
    "default_config",
    "load_from_file",
    "parse_list",
]
