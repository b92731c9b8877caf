from hopecity.models.base import Base
from hopecity.models.site_event import SiteEvent
from hopecity.models.site_settings import SETTINGS_ROW_ID, SiteSettings

__all__ = [
    "Base",
    "SETTINGS_ROW_ID",
    "SiteEvent",
    "SiteSettings",
]
