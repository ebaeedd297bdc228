import firebase_admin
from firebase_admin import credentials, firestore
from dotenv import load_dotenv
import os

load_dotenv()

FIRESTORE_DATABASE_ID = os.getenv('FIRESTORE_DATABASE_ID', '(default)')

# Global Firestore client instance
_db = None


def initialize_firebase():
    # Check if Firebase is already initialized to prevent errors during hot-reloads
    if not firebase_admin._apps:
        private_key = os.environ.get('FIREBASE_PRIVATE_KEY')

        # .env files and most hosting dashboards store the key with escaped newlines
        if private_key:
            private_key = private_key.replace('\\n', '\n')

        client_email = os.environ.get('FIREBASE_CLIENT_EMAIL')
        service_account_info = {
            "type": os.environ.get('FIREBASE_TYPE', 'service_account'),
            "project_id": os.environ.get('FIREBASE_PROJECT_ID'),
            "private_key_id": os.environ.get('FIREBASE_PRIVATE_KEY_ID'),
            "private_key": private_key,
            "client_email": client_email,
            "client_id": os.environ.get('FIREBASE_CLIENT_ID'),
            "auth_uri": os.environ.get('FIREBASE_AUTH_URI', 'https://accounts.google.com/o/oauth2/auth'),
            "token_uri": os.environ.get('FIREBASE_TOKEN_URI', 'https://oauth2.googleapis.com/token'),
            "auth_provider_x509_cert_url": os.environ.get(
                'FIREBASE_AUTH_PROVIDER_CERT_URL', 'https://www.googleapis.com/oauth2/v1/certs'
            ),
            "client_x509_cert_url": os.environ.get(
                'FIREBASE_CLIENT_CERT_URL',
                f'https://www.googleapis.com/robot/v1/metadata/x509/{client_email}'
            ),
            "universe_domain": os.environ.get('FIREBASE_UNIVERSE_DOMAIN', 'googleapis.com')
        }
        # Load the credentials
        cred = credentials.Certificate(service_account_info)
        # Initialize the app
        firebase_admin.initialize_app(cred, {'projectId': os.environ.get('FIREBASE_PROJECT_ID')})


def get_db():
    """Return the shared Firestore client, initializing Firebase on first use"""
    global _db

    if _db is not None:
        return _db

    initialize_firebase()
    _db = firestore.client(database_id=FIRESTORE_DATABASE_ID)
    return _db


def set_db(client) -> None:
    """Replace the shared Firestore client (emulator or in-memory client for tests)"""
    global _db
    _db = client
