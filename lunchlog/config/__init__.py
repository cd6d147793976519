from lunchlog.config.settings import settings

__all__ = ["settings"]
