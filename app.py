"""
Gujarat Estate API - property listings, inquiries, reviews and accounts
Flask application using Blueprint pattern for clean architecture
"""
from flask import Flask
from flask_cors import CORS
from datetime import datetime
import logging

from config.app_config import AppConfig

# Import the Blueprints from controllers
from controllers.admin_controller import admin_bp
from controllers.auth_controller import auth_bp
from controllers.property_controller import property_bp
from controllers.inquiry_controller import inquiry_bp
from controllers.review_controller import review_bp
from controllers.user_controller import user_bp
from controllers.image_controller import image_bp

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create Flask app
app = Flask(__name__)

# Maximum request size for base64 and multipart uploads (50MB)
app.config['MAX_CONTENT_LENGTH'] = 50 * 1024 * 1024

# Public site, admin dashboard and the local dev server
CORS(app,
     origins=[AppConfig.FRONTEND_URL, AppConfig.ADMIN_URL, "http://localhost:3000"],
     supports_credentials=True,
     allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
     methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
     expose_headers=["Content-Type", "Content-Length"])

# Register the Blueprints
app.register_blueprint(admin_bp)
app.register_blueprint(auth_bp)
app.register_blueprint(property_bp)
app.register_blueprint(inquiry_bp)
app.register_blueprint(review_bp)
app.register_blueprint(user_bp)
app.register_blueprint(image_bp)


# Health check endpoint
@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint"""
    return {
        'status': 'OK',
        'service': 'Gujarat Estate API',
        'timestamp': datetime.utcnow().isoformat(),
        'environment': AppConfig.FLASK_ENV
    }, 200


@app.route('/', methods=['GET'])
def index():
    return {
        'message': 'Gujarat Estate API',
        'version': '1.0.0',
        'endpoints': {
            'health': '/api/health',
            'admin': '/api/admin',
            'auth': '/api/auth',
            'properties': '/api/properties',
            'inquiries': '/api/inquiries',
            'reviews': '/api/reviews',
            'users': '/api/users',
            'images': '/api/images'
        }
    }, 200


# Error handlers
@app.errorhandler(404)
def not_found(error):
    return {'success': False, 'error': 'Resource not found'}, 404


@app.errorhandler(405)
def method_not_allowed(error):
    return {'success': False, 'error': 'Method not allowed'}, 405


@app.errorhandler(413)
def request_entity_too_large(error):
    return {
        'success': False,
        'error': 'Payload too large',
        'message': 'Request payload exceeds 50MB limit. Please upload smaller images or compress them.'
    }, 413


@app.errorhandler(500)
def internal_error(error):
    logger.error(f"Unhandled error: {error}")
    return {'success': False, 'error': 'Internal server error'}, 500


if __name__ == '__main__':
    logger.info(f"Gujarat Estate API starting on port {AppConfig.PORT} ({AppConfig.FLASK_ENV})")
    app.run(debug=AppConfig.is_development(), host='0.0.0.0', port=AppConfig.PORT)
