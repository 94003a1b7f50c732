from .loader import load_config
from .models import Corner, HotPotatoConfig, WatchConfig

__all__ = [
    "Corner",
    "HotPotatoConfig",
    "WatchConfig",
    "load_config",
]
