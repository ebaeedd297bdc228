"""Service layer for the site settings singleton"""
import logging
from datetime import datetime
from typing import Dict, Any

from models.site_settings import SiteSettings, NotificationSettings
from repositories.settings_repository import SettingsRepository

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class SettingsService:

    def __init__(self):
        self.repository = SettingsRepository()

    def get_settings(self) -> SiteSettings:
        """Stored settings, or the agency defaults when nothing has been saved yet"""
        return self.repository.get_settings() or SiteSettings()

    def update_settings(self, data: Dict[str, Any]) -> SiteSettings:
        """
        Merge the sent top-level sections into the current settings

        Args:
            data: SiteSettingsUpdate fields that were sent

        Returns:
            Saved SiteSettings
        """
        merged = self.get_settings().model_dump()
        merged.update(data)
        merged['updatedAt'] = datetime.utcnow()

        settings = SiteSettings(**merged)
        self.repository.save_settings(settings)
        logger.info("Site settings updated")
        return settings

    def update_notifications(self, notifications: NotificationSettings) -> SiteSettings:
        settings = self.get_settings()
        settings.notifications = notifications
        settings.updatedAt = datetime.utcnow()
        self.repository.save_settings(settings)
        logger.info("Notification settings updated")
        return settings
