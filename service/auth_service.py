"""Authentication: password hashing, JWT handling, admin and user account flows"""
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext

from config.app_config import AppConfig
from models.user import User, AdminAccount, Profile
from repositories.user_repository import UserRepository, AdminRepository
from service.email_service import get_email_service
from service.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from service.otp_service import get_otp_service
from service.reset_token_service import get_reset_token_service

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

EMAIL_VERIFICATION = 'email_verification'
PASSWORD_RESET = 'password_reset'
ADMIN_PASSWORD_RESET = 'admin_password_reset'

GENERIC_RESET_MESSAGE = 'If an account with this email exists, you will receive a password reset code.'

_DURATION_PATTERN = re.compile(r'^(\d+)\s*([smhd]?)$')
_DURATION_UNITS = {'': 1, 's': 1, 'm': 60, 'h': 3600, 'd': 86400}


def parse_duration(value: str) -> timedelta:
    """Parse "7d", "12h", "30m", "45s" or a plain number of seconds"""
    match = _DURATION_PATTERN.match(str(value).strip().lower())
    if not match:
        raise ValueError(f"Invalid duration: {value}")
    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _DURATION_UNITS[unit])


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return pwd_context.verify(password, hashed)
    except ValueError:
        # Not a recognised hash
        return False


def generate_token(payload: Dict[str, Any]) -> str:
    """Sign an HS256 token that expires after JWT_EXPIRES_IN"""
    to_encode = payload.copy()
    to_encode['exp'] = datetime.now(timezone.utc) + parse_duration(AppConfig.JWT_EXPIRES_IN)
    return jwt.encode(to_encode, AppConfig.JWT_SECRET, algorithm=AppConfig.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """
    Verify a token and return its claims

    Raises:
        AuthError: "Token expired." or "Invalid token."
    """
    try:
        return jwt.decode(token, AppConfig.JWT_SECRET, algorithms=[AppConfig.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise AuthError('Token expired.', code='TOKEN_EXPIRED')
    except JWTError:
        raise AuthError('Invalid token.', code='INVALID_TOKEN')


def _raise_for_otp(result: Dict[str, Any]) -> None:
    if result['success']:
        return
    details = None
    if 'attemptsRemaining' in result:
        details = {'attemptsRemaining': result['attemptsRemaining']}
    raise ValidationError(result['message'], code=result['error'], details=details)


class AuthService:
    """Account flows for the admin and for registered users"""

    def __init__(self):
        self.user_repository = UserRepository()
        self.admin_repository = AdminRepository()

    @property
    def otp_service(self):
        return get_otp_service()

    @property
    def reset_tokens(self):
        return get_reset_token_service()

    @property
    def email_service(self):
        return get_email_service()

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def get_admin_account(self) -> AdminAccount:
        """Return the admin account, seeding it from configuration on first use"""
        admin = self.admin_repository.get(AppConfig.ADMIN_ID)
        if admin:
            return admin

        admin = AdminAccount(
            id=AppConfig.ADMIN_ID,
            email=AppConfig.ADMIN_EMAIL,
            name=AppConfig.ADMIN_NAME,
            password=hash_password(AppConfig.ADMIN_PASSWORD.strip())
        )
        self.admin_repository.create(admin.id, admin)
        logger.info(f"Admin account seeded for {admin.email}")
        return admin

    def admin_login(self, email: str, password: str) -> Dict[str, Any]:
        admin = self.get_admin_account()

        if email.lower() != admin.email.lower() or not verify_password(password.strip(), admin.password):
            logger.warning(f"Invalid admin credentials for: {email}")
            raise AuthError('Email or password is incorrect', code='INVALID_CREDENTIALS')

        admin.lastLogin = datetime.utcnow().isoformat()
        self.admin_repository.update_fields(admin.id, {'lastLogin': admin.lastLogin})

        token = generate_token({
            'id': admin.id,
            'email': admin.email,
            'role': admin.role,
            'name': admin.name
        })
        logger.info(f"Admin login successful: {email}")
        return {'user': admin.public_dict(), 'token': token}

    def get_admin_profile(self) -> Dict[str, Any]:
        return self.get_admin_account().public_dict()

    def update_admin_profile(self, name: str = None, email: str = None,
                             current_password: str = None, new_password: str = None) -> Dict[str, Any]:
        """
        Update the admin's name, email and optionally password

        Raises:
            ValidationError: current password missing or incorrect
        """
        admin = self.get_admin_account()
        updates: Dict[str, Any] = {}

        if new_password:
            if not current_password or not verify_password(current_password.strip(), admin.password):
                raise ValidationError('Current password is incorrect', code='INVALID_CURRENT_PASSWORD')
            updates['password'] = hash_password(new_password.strip())
            logger.info("Admin password updated")

        if name:
            updates['name'] = name
        if email:
            updates['email'] = email

        updates['updatedAt'] = datetime.utcnow().isoformat()
        self.admin_repository.update_fields(admin.id, updates)

        updated = self.get_admin_account()
        logger.info(f"Admin profile updated: {updated.name} ({updated.email})")
        return updated.public_dict()

    def admin_forgot_password(self, email: str) -> Dict[str, Any]:
        admin = self.get_admin_account()
        if email.lower() != admin.email.lower():
            logger.warning(f"Admin password reset requested for unknown email: {email}")
            return {'message': GENERIC_RESET_MESSAGE}

        otp = self.otp_service.generate_otp()
        stored = self.otp_service.store_otp(admin.email, otp, ADMIN_PASSWORD_RESET)
        email_sent = self.email_service.send_password_reset_otp(admin.email, otp, admin.name)

        return {
            'message': GENERIC_RESET_MESSAGE,
            'emailSent': email_sent,
            'expiresIn': self.otp_service.expiry_seconds,
            'attemptsRemaining': stored['attemptsRemaining']
        }

    def admin_verify_otp(self, email: str, otp: str) -> Dict[str, Any]:
        admin = self.get_admin_account()
        if email.lower() == admin.email.lower():
            email = admin.email
        _raise_for_otp(self.otp_service.verify_otp(email, otp, ADMIN_PASSWORD_RESET))
        return self.reset_tokens.issue(admin.email, 'admin')

    def admin_reset_password(self, reset_token: str, new_password: str) -> None:
        result = self.reset_tokens.consume(reset_token, 'admin')
        if not result['success']:
            raise ValidationError(result['message'], code=result['error'])

        admin = self.get_admin_account()
        self.admin_repository.update_fields(admin.id, {
            'password': hash_password(new_password.strip()),
            'updatedAt': datetime.utcnow().isoformat()
        })
        logger.info(f"Admin password reset for {admin.email}")

    def admin_otp_status(self, email: str) -> Dict[str, Any]:
        return self.otp_service.get_otp_status(email, ADMIN_PASSWORD_RESET)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def _get_user_or_404(self, user_id: str) -> User:
        user = self.user_repository.get_user(user_id)
        if not user:
            raise NotFoundError('User not found', code='USER_NOT_FOUND')
        return user

    def register(self, first_name: str, last_name: str, email: str, password: str,
                 phone: Optional[str] = None) -> Dict[str, Any]:
        if self.user_repository.get_by_email(email):
            raise ConflictError('User already exists with this email', code='USER_EXISTS')

        user = User(
            firstName=first_name,
            lastName=last_name,
            email=email,
            phone=phone or None,
            password=hash_password(password),
            profile=Profile()
        )
        user = self.user_repository.create_user(user)
        logger.info(f"User registered: {email} (ID: {user.id})")

        otp = self.otp_service.generate_otp()
        self.otp_service.store_otp(email, otp, EMAIL_VERIFICATION)
        email_sent = self.email_service.send_email_verification_otp(email, otp, first_name)

        return {
            'userId': user.id,
            'email': email,
            'verified': False,
            'emailSent': email_sent
        }

    def verify_email(self, email: str, otp: str) -> Dict[str, Any]:
        user = self.user_repository.get_by_email(email)
        if not user:
            raise NotFoundError('User not found', code='USER_NOT_FOUND')
        if user.verified:
            raise ValidationError('Email already verified', code='ALREADY_VERIFIED')

        _raise_for_otp(self.otp_service.verify_otp(email, otp, EMAIL_VERIFICATION))

        self.user_repository.update_fields(user.id, {
            'verified': True,
            'updatedAt': datetime.utcnow().isoformat()
        })
        logger.info(f"Email verified for user: {email}")
        return {'email': user.email, 'verified': True}

    def resend_verification(self, email: str) -> Dict[str, Any]:
        user = self.user_repository.get_by_email(email)
        if not user:
            raise NotFoundError('User not found', code='USER_NOT_FOUND')
        if user.verified:
            raise ValidationError('Email already verified', code='ALREADY_VERIFIED')

        otp = self.otp_service.generate_otp()
        self.otp_service.store_otp(email, otp, EMAIL_VERIFICATION)
        email_sent = self.email_service.send_email_verification_otp(email, otp, user.firstName)
        return {'emailSent': email_sent}

    def login(self, email: str, password: str) -> Dict[str, Any]:
        user = self.user_repository.get_by_email(email)
        if not user:
            raise NotFoundError('No account found with this email address. Please sign up first.',
                                code='ACCOUNT_NOT_FOUND')

        if not verify_password(password, user.password):
            raise AuthError('Incorrect password. Please try again.', code='INVALID_PASSWORD')

        now = datetime.utcnow().isoformat()
        self.user_repository.update_fields(user.id, {'lastLogin': now, 'updatedAt': now})
        user.lastLogin = now

        token = generate_token({
            'id': user.id,
            'email': user.email,
            'role': user.role,
            'verified': user.verified
        })
        logger.info(f"User login: {email}")
        return {'token': token, 'user': user.public_dict()}

    def forgot_password(self, email: str) -> Dict[str, Any]:
        """Send a reset code. The response never reveals whether the account exists"""
        user = self.user_repository.get_by_email(email)
        if not user:
            logger.info(f"Password reset requested for unknown email: {email}")
            return {'message': GENERIC_RESET_MESSAGE}

        otp = self.otp_service.generate_otp()
        self.otp_service.store_otp(email, otp, PASSWORD_RESET)
        self.email_service.send_password_reset_otp(email, otp, user.firstName)
        logger.info(f"Password reset requested for: {email}")
        return {'message': GENERIC_RESET_MESSAGE}

    def verify_reset_otp(self, email: str, otp: str) -> Dict[str, Any]:
        _raise_for_otp(self.otp_service.verify_otp(email, otp, PASSWORD_RESET))
        issued = self.reset_tokens.issue(email, 'user')
        logger.info(f"Password reset OTP verified for: {email}")
        return issued

    def reset_password(self, reset_token: str, new_password: str) -> None:
        result = self.reset_tokens.consume(reset_token, 'user')
        if not result['success']:
            raise ValidationError(result['message'], code=result['error'])

        user = self.user_repository.get_by_email(result['email'])
        if not user:
            raise NotFoundError('User not found', code='USER_NOT_FOUND')

        self.user_repository.update_fields(user.id, {
            'password': hash_password(new_password),
            'updatedAt': datetime.utcnow().isoformat()
        })
        logger.info(f"Password reset for user: {user.email}")
        self.email_service.send_password_change_confirmation(user.email, user.firstName)

    def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        user = self._get_user_or_404(user_id)

        if not verify_password(current_password, user.password):
            raise ValidationError('Current password is incorrect', code='INVALID_CURRENT_PASSWORD')

        self.user_repository.update_fields(user.id, {
            'password': hash_password(new_password),
            'updatedAt': datetime.utcnow().isoformat()
        })
        logger.info(f"Password changed for user: {user.email}")
        self.email_service.send_password_change_confirmation(user.email, user.firstName)

    def verify_user_token(self, claims: Dict[str, Any]) -> Dict[str, Any]:
        """Confirm the account behind a decoded token still exists"""
        user = self.user_repository.get_user(claims.get('id'))
        if not user:
            raise AuthError('User not found', code='USER_NOT_FOUND')
        return {
            'userId': user.id,
            'email': user.email,
            'verified': user.verified
        }
