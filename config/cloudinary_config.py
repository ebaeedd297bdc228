import os
import cloudinary
from dotenv import load_dotenv

load_dotenv() # loads the .env


class CloudinaryConfig:

    """Cloudinary credentials. configure() must run before any cloudinary.uploader call"""

    CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
    API_KEY = os.getenv("CLOUDINARY_API_KEY")
    API_SECRET = os.getenv("CLOUDINARY_API_SECRET")

    # Root folder for every asset uploaded by the API
    ROOT_FOLDER = os.getenv("CLOUDINARY_FOLDER", "gujarat-estate")
    PROPERTY_FOLDER = f"{ROOT_FOLDER}/properties"

    _configured = False

    @classmethod
    def configure(cls) -> None:
        if cls._configured:
            return
        cloudinary.config(
            cloud_name=cls.CLOUD_NAME,
            api_key=cls.API_KEY,
            api_secret=cls.API_SECRET,
            secure=True
        )
        cls._configured = True

    @classmethod
    def is_enabled(cls) -> bool:
        return bool(cls.CLOUD_NAME and cls.API_KEY and cls.API_SECRET)
