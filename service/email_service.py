"""Outgoing email over SMTP with transport fallback"""
import html as html_lib
import logging
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Dict, List, Optional

from config.app_config import AppConfig

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class EmailService:
    """
    Sends mail through the first SMTP transport that accepts it.

    Transports come from AppConfig.smtp_transports(): the custom SMTP_*
    server first, then Gmail and Outlook when their credentials are set.
    A total failure is logged and reported as False, never raised.
    """

    def __init__(self, transports: Optional[List[Dict[str, Any]]] = None):
        self.transports = transports if transports is not None else AppConfig.smtp_transports()
        self.sender_name = AppConfig.EMAIL_SENDER_NAME
        self.from_address = AppConfig.EMAIL_FROM

        if not self.transports:
            logger.warning("No SMTP credentials configured. Emails will be logged instead of sent.")

    def is_configured(self) -> bool:
        return bool(self.transports)

    def _build_message(self, to_email: str, subject: str, html: str, text: str, sender: str) -> MIMEMultipart:
        msg = MIMEMultipart('alternative')
        msg['Subject'] = subject
        msg['From'] = f'"{self.sender_name}" <{sender}>'
        msg['To'] = to_email
        msg.attach(MIMEText(text, 'plain'))
        msg.attach(MIMEText(html, 'html'))
        return msg

    def _send_with(self, transport: Dict[str, Any], to_email: str, subject: str, html: str, text: str) -> None:
        sender = self.from_address or transport['user']
        msg = self._build_message(to_email, subject, html, text, sender)

        if transport['use_ssl']:
            smtp = smtplib.SMTP_SSL(transport['host'], transport['port'], timeout=transport['timeout'])
        else:
            smtp = smtplib.SMTP(transport['host'], transport['port'], timeout=transport['timeout'])

        with smtp:
            if not transport['use_ssl']:
                smtp.starttls()
            if transport.get('user') and transport.get('password'):
                smtp.login(transport['user'], transport['password'])
            smtp.send_message(msg)

    def send_email(self, to_email: str, subject: str, html: str, text: str) -> bool:
        """
        Send one message, trying each transport in order

        Returns:
            True if a transport delivered the message, False otherwise
        """
        for transport in self.transports:
            try:
                self._send_with(transport, to_email, subject, html, text)
                logger.info(f"Email sent to {to_email} via {transport['name']}")
                return True
            except (smtplib.SMTPException, OSError) as e:
                logger.warning(f"{transport['name']} failed for {to_email}: {str(e)}")

        if self.transports:
            logger.error(f"All email transports failed for {to_email}")
        return False

    def _send_code(self, to_email: str, otp: str, subject: str, heading: str, intro: str, name: str) -> bool:
        if not self.is_configured():
            if AppConfig.is_development():
                logger.warning(f"Email service not available. Code for {to_email}: {otp}")
            else:
                logger.warning(f"Email service not available. Code for {to_email} not sent")
            return False

        safe_name = html_lib.escape(name)

        sent_at = datetime.utcnow().strftime('%Y-%m-%d %H:%M UTC')
        html = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <div style="background: #1e40af; color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0;">
    <h1 style="margin: 0;">{heading}</h1>
  </div>
  <div style="background: #f8f9fa; padding: 30px; border-radius: 0 0 10px 10px;">
    <h2 style="color: #333;">Hello {safe_name},</h2>
    <p style="color: #666;">{intro}</p>
    <div style="background: #fff; border: 3px solid #3b82f6; border-radius: 10px; padding: 25px; margin: 25px 0; text-align: center;">
      <div style="font-family: 'Courier New', monospace; font-size: 32px; font-weight: bold; color: #3b82f6; letter-spacing: 8px;">{otp}</div>
      <p style="color: #666; font-size: 14px;">This code will expire in <strong>10 minutes</strong></p>
    </div>
    <p style="color: #666; font-size: 14px;">If you didn't request this, please ignore this email.</p>
    <p style="color: #999; font-size: 12px; text-align: center;">{self.sender_name}<br>Sent at: {sent_at}</p>
  </div>
</div>
"""
        text = (
            f"{heading}\n\n"
            f"Hello {name},\n\n"
            f"{intro}\n\n"
            f"{otp}\n\n"
            f"This code will expire in 10 minutes.\n\n"
            f"If you didn't request this, please ignore this email.\n\n"
            f"{self.sender_name}\n"
        )
        return self.send_email(to_email, subject, html, text)

    def send_email_verification_otp(self, to_email: str, otp: str, user_name: str = 'User') -> bool:
        return self._send_code(
            to_email, otp,
            subject=f'Verify Your Email - {self.sender_name}',
            heading=f'Welcome to {self.sender_name}!',
            intro='Thank you for signing up! Please verify your email address using the code below:',
            name=user_name
        )

    def send_password_reset_otp(self, to_email: str, otp: str, name: str = 'User') -> bool:
        return self._send_code(
            to_email, otp,
            subject=f'Password Reset Code - {self.sender_name}',
            heading='Password Reset Request',
            intro='We received a request to reset your password. Use the code below to continue:',
            name=name
        )

    def send_password_change_confirmation(self, to_email: str, name: str = 'User') -> bool:
        if not self.is_configured():
            logger.warning(f"Email service not available. Password change confirmation for {to_email} not sent")
            return False

        safe_name = html_lib.escape(name)

        html = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h2 style="color: #333;">Hello {safe_name},</h2>
  <p style="color: #666;">Your password was changed successfully.</p>
  <p style="color: #666;">If you did not make this change, please reset your password immediately and contact us.</p>
  <p style="color: #999; font-size: 12px;">{self.sender_name}</p>
</div>
"""
        text = (
            f"Hello {name},\n\n"
            "Your password was changed successfully.\n\n"
            "If you did not make this change, please reset your password immediately and contact us.\n\n"
            f"{self.sender_name}\n"
        )
        return self.send_email(to_email, f'Password Changed - {self.sender_name}', html, text)


_email_service: Optional[EmailService] = None


def get_email_service() -> EmailService:
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service


def set_email_service(service: Optional[EmailService]) -> None:
    """Replace the shared EmailService (used by tests)"""
    global _email_service
    _email_service = service
