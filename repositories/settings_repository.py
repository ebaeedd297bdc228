"""Repository for the site settings singleton"""
from typing import Dict, Any, Optional
from models.site_settings import SiteSettings, SETTINGS_DOCUMENT_ID
from repositories.base_repository import BaseRepository


class SettingsRepository(BaseRepository[SiteSettings]):
    """Stores the one settings document under settings/site"""

    def __init__(self):
        super().__init__('settings')

    def to_model(self, data: Dict[str, Any]) -> SiteSettings:
        return SiteSettings.from_dict(data)

    def to_dict(self, model: SiteSettings) -> Dict[str, Any]:
        return model.to_dict()

    def get_settings(self) -> Optional[SiteSettings]:
        return self.get(SETTINGS_DOCUMENT_ID)

    def save_settings(self, settings: SiteSettings) -> SiteSettings:
        self.collection.document(SETTINGS_DOCUMENT_ID).set(self.to_dict(settings))
        return settings
