"""Image controller for Cloudinary uploads (admin only)"""
from flask import Blueprint, request
from service.image_service import ImageService
from service.exceptions import ServiceError, ValidationError
from middleware.auth import admin_required
from utils.responses import success, service_error, server_error
import logging

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

image_bp = Blueprint('image', __name__, url_prefix='/api/images')


@image_bp.route('/upload', methods=['POST'])
@admin_required
def upload_image():
    """Upload one multipart file sent as "image" """
    try:
        if 'image' not in request.files:
            raise ValidationError('No image file provided', field='image')

        result = ImageService.upload_file(request.files['image'], request.form.get('folder'))
        return success(result, 'Image uploaded successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to upload image')


@image_bp.route('/upload-base64', methods=['POST'])
@admin_required
def upload_image_base64():
    try:
        data = request.get_json(silent=True) or {}
        result = ImageService.upload_base64(data.get('image'), data.get('fileName'), data.get('folder'))
        return success(result, 'Image uploaded successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to upload image')


@image_bp.route('/delete/<path:public_id>', methods=['DELETE'])
@admin_required
def delete_image(public_id: str):
    """public_id may contain folder slashes"""
    try:
        ImageService.delete_image(public_id)
        return success(message='Image deleted successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to delete image')


@image_bp.route('/info/<path:public_id>', methods=['GET'])
@admin_required
def get_image_info(public_id: str):
    try:
        return success(ImageService.get_image_info(public_id))
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to get image info')
