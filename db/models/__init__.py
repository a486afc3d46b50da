from .site import Site
from .settings import Settings

__all__ = ["Site", "Settings"]
