import os
from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == '':
        return default
    return int(value)


class AppConfig:

    """Application settings read from the environment (.env supported)"""

    FLASK_ENV = os.getenv('FLASK_ENV', 'development')
    PORT = _int_env('PORT', 8000)

    # CORS
    FRONTEND_URL = os.getenv('FRONTEND_URL', 'http://localhost:5173')
    ADMIN_URL = os.getenv('ADMIN_URL', 'http://localhost:3001')

    # JWT
    JWT_SECRET = os.getenv('JWT_SECRET', 'change-me-in-production')
    JWT_ALGORITHM = 'HS256'
    JWT_EXPIRES_IN = os.getenv('JWT_EXPIRES_IN', '7d')

    # Admin account, seeded into Firestore on first login
    ADMIN_ID = 'admin-001'
    ADMIN_EMAIL = os.getenv('ADMIN_EMAIL', 'admin@gujaratestate.com')
    ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD', 'admin123')
    ADMIN_NAME = os.getenv('ADMIN_NAME', 'Gujarat Estate Admin')

    # OTP store: "memory" (single instance) or "firestore" (shared)
    OTP_STORE = os.getenv('OTP_STORE', 'memory')
    OTP_EXPIRY_SECONDS = _int_env('OTP_EXPIRY_SECONDS', 10 * 60)
    OTP_MAX_ATTEMPTS = _int_env('OTP_MAX_ATTEMPTS', 3)
    OTP_CLEANUP_INTERVAL_SECONDS = _int_env('OTP_CLEANUP_INTERVAL_SECONDS', 5 * 60)
    RESET_TOKEN_EXPIRY_SECONDS = _int_env('RESET_TOKEN_EXPIRY_SECONDS', 15 * 60)

    # Email
    EMAIL_FROM = os.getenv('EMAIL_FROM', os.getenv('SMTP_USER', 'no-reply@gujaratestate.com'))
    EMAIL_SENDER_NAME = os.getenv('EMAIL_SENDER_NAME', 'Gujarat Estate Agency')
    SMTP_TIMEOUT_SECONDS = _int_env('SMTP_TIMEOUT_SECONDS', 8)

    @staticmethod
    def smtp_transports() -> list:
        """Ordered SMTP transports; only the ones with credentials are returned"""
        transports = []

        if os.getenv('SMTP_HOST') and os.getenv('SMTP_USER'):
            transports.append({
                'name': 'Custom SMTP',
                'host': os.getenv('SMTP_HOST'),
                'port': _int_env('SMTP_PORT', 587),
                'use_ssl': os.getenv('SMTP_SECURE', 'false').lower() == 'true',
                'user': os.getenv('SMTP_USER'),
                'password': os.getenv('SMTP_PASSWORD'),
                'timeout': AppConfig.SMTP_TIMEOUT_SECONDS
            })

        if os.getenv('EMAIL_USER') and os.getenv('EMAIL_PASSWORD'):
            transports.append({
                'name': 'Gmail-TLS',
                'host': 'smtp.gmail.com',
                'port': 587,
                'use_ssl': False,
                'user': os.getenv('EMAIL_USER'),
                'password': os.getenv('EMAIL_PASSWORD'),
                'timeout': AppConfig.SMTP_TIMEOUT_SECONDS
            })
            transports.append({
                'name': 'Gmail-SSL',
                'host': 'smtp.gmail.com',
                'port': 465,
                'use_ssl': True,
                'user': os.getenv('EMAIL_USER'),
                'password': os.getenv('EMAIL_PASSWORD'),
                'timeout': 5
            })

        if os.getenv('OUTLOOK_USER') and os.getenv('OUTLOOK_PASSWORD'):
            transports.append({
                'name': 'Outlook',
                'host': 'smtp-mail.outlook.com',
                'port': 587,
                'use_ssl': False,
                'user': os.getenv('OUTLOOK_USER'),
                'password': os.getenv('OUTLOOK_PASSWORD'),
                'timeout': AppConfig.SMTP_TIMEOUT_SECONDS
            })

        return transports

    @classmethod
    def is_development(cls) -> bool:
        return cls.FLASK_ENV == 'development'
