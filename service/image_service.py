import base64
import binascii
import logging
import re
import uuid
from datetime import datetime
from io import BytesIO
from typing import Optional, Tuple

import cloudinary.api
import cloudinary.exceptions
import cloudinary.uploader
from PIL import Image

from config.cloudinary_config import CloudinaryConfig
from service.exceptions import NotFoundError, ServiceError, ValidationError

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 10 * 1024 * 1024
THUMBNAIL_SIZE = (300, 200)
UPLOAD_TRANSFORMATION = [
    {'width': 1200, 'height': 800, 'crop': 'limit'},
    {'quality': 'auto'}
]

_DATA_URI = re.compile(r'^data:(?P<mime>[\w/+.-]+);base64,(?P<data>.+)$', re.DOTALL)


class ImageService:
    """Service for Cloudinary image storage"""

    @staticmethod
    def _ensure_configured() -> None:
        if not CloudinaryConfig.is_enabled():
            raise ServiceError('Image storage is not configured', code='STORAGE_NOT_CONFIGURED')
        CloudinaryConfig.configure()

    @staticmethod
    def validate_image(raw: bytes, content_type: Optional[str]) -> str:
        """
        Check size, declared type and that Pillow can read the bytes

        Args:
            raw: Image bytes
            content_type: Declared MIME type, may be None

        Returns:
            Image format reported by Pillow (e.g. "JPEG")
        """
        if not raw:
            raise ValidationError('No image data provided', field='image')
        if len(raw) > MAX_IMAGE_BYTES:
            raise ValidationError('File too large. Maximum file size is 10MB', code='FILE_TOO_LARGE', field='image')
        if content_type and not content_type.startswith('image/'):
            raise ValidationError('Only image files are allowed', code='INVALID_FILE_TYPE', field='image')

        try:
            with Image.open(BytesIO(raw)) as image:
                image_format = image.format
                image.verify()
        except (OSError, SyntaxError, ValueError):
            raise ValidationError('Only image files are allowed', code='INVALID_FILE_TYPE', field='image')
        return image_format

    @staticmethod
    def make_thumbnail(raw: bytes) -> bytes:
        """300x200 JPEG thumbnail, aspect ratio kept"""
        image = Image.open(BytesIO(raw))
        image.thumbnail(THUMBNAIL_SIZE, Image.Resampling.LANCZOS)

        # Convert to RGB if necessary
        if image.mode in ("RGBA", "P", "LA"):
            image = image.convert("RGB")

        thumb_output = BytesIO()
        image.save(thumb_output, format='JPEG', quality=80)
        return thumb_output.getvalue()

    @staticmethod
    def parse_data_uri(image: str) -> Tuple[bytes, Optional[str]]:
        """Decode a base64 data URI (or bare base64) into bytes and its MIME type"""
        match = _DATA_URI.match(image.strip())
        payload, content_type = (match.group('data'), match.group('mime')) if match else (image.strip(), None)
        try:
            return base64.b64decode(payload, validate=False), content_type
        except (binascii.Error, ValueError):
            raise ValidationError('Invalid base64 image data', field='image')

    @staticmethod
    def upload_bytes(raw: bytes, content_type: Optional[str] = None, folder: str = None,
                     public_id: Optional[str] = None) -> dict:
        """
        Validate and upload an image plus its thumbnail

        Args:
            raw: Image bytes
            content_type: Declared MIME type
            folder: Cloudinary folder, defaults to the root folder
            public_id: Optional public id (file name without extension)

        Returns:
            dict with url, public_id, secure_url, width, height, format,
            resource_type, bytes and thumbnailUrl
        """
        ImageService.validate_image(raw, content_type)
        ImageService._ensure_configured()

        folder = (folder or CloudinaryConfig.ROOT_FOLDER).strip("/")
        if not folder.startswith(CloudinaryConfig.ROOT_FOLDER):
            folder = f"{CloudinaryConfig.ROOT_FOLDER}/{folder}"
        if not public_id:
            timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
            public_id = f"{timestamp}_{uuid.uuid4().hex[:8]}"

        result = cloudinary.uploader.upload(
            BytesIO(raw),
            folder=folder,
            public_id=public_id,
            resource_type='image',
            transformation=UPLOAD_TRANSFORMATION
        )

        thumbnail = cloudinary.uploader.upload(
            BytesIO(ImageService.make_thumbnail(raw)),
            folder=f"{folder}/thumbnails",
            public_id=f"{public_id}_thumb",
            resource_type='image',
            format='jpg'
        )

        logger.info(f"Image uploaded to Cloudinary: {result.get('public_id')}")
        return {
            'url': result.get('secure_url'),
            'public_id': result.get('public_id'),
            'secure_url': result.get('secure_url'),
            'width': result.get('width'),
            'height': result.get('height'),
            'format': result.get('format'),
            'resource_type': result.get('resource_type', 'image'),
            'bytes': result.get('bytes'),
            'thumbnailUrl': thumbnail.get('secure_url')
        }

    @staticmethod
    def upload_file(file, folder: str = None) -> dict:
        """
        Upload a file from request.files

        Args:
            file: werkzeug FileStorage
            folder: Optional Cloudinary folder
        """
        raw = file.read()
        return ImageService.upload_bytes(raw, file.content_type or file.mimetype, folder)

    @staticmethod
    def upload_base64(image: str, file_name: Optional[str] = None, folder: str = None) -> dict:
        if not image or not isinstance(image, str):
            raise ValidationError('No image data provided', field='image')
        raw, content_type = ImageService.parse_data_uri(image)
        public_id = file_name.rsplit('.', 1)[0] if file_name else None
        return ImageService.upload_bytes(raw, content_type, folder, public_id)

    @staticmethod
    def delete_image(public_id: str) -> None:
        if not public_id:
            raise ValidationError('Public ID is required', field='public_id')
        ImageService._ensure_configured()

        result = cloudinary.uploader.destroy(public_id)
        if result.get('result') != 'ok':
            raise ServiceError(f"Failed to delete image: {result.get('result')}", code='DELETE_FAILED')
        logger.info(f"Image deleted from Cloudinary: {public_id}")

    @staticmethod
    def get_image_info(public_id: str) -> dict:
        ImageService._ensure_configured()
        try:
            result = cloudinary.api.resource(public_id)
        except cloudinary.exceptions.NotFound:
            raise NotFoundError('Image not found', code='IMAGE_NOT_FOUND')

        return {
            'public_id': result.get('public_id'),
            'url': result.get('url'),
            'secure_url': result.get('secure_url'),
            'width': result.get('width'),
            'height': result.get('height'),
            'format': result.get('format'),
            'resource_type': result.get('resource_type'),
            'bytes': result.get('bytes'),
            'created_at': result.get('created_at'),
            'folder': result.get('folder')
        }
