import logging

import pytest

from config.app_config import AppConfig
from service.email_service import EmailService

TRANSPORT = {'name': 'test', 'host': 'localhost', 'port': 25, 'use_ssl': False,
             'timeout': 5, 'user': 'mailer@example.com', 'password': 'secret'}


class CapturingEmailService(EmailService):
    def __init__(self):
        super().__init__(transports=[TRANSPORT])
        self.sent = []

    def _send_with(self, transport, to_email, subject, html, text):
        self.sent.append({'to': to_email, 'subject': subject, 'html': html, 'text': text})


def test_code_email_escapes_name_in_html():
    service = CapturingEmailService()
    assert service.send_password_reset_otp('a@example.com', '123456', name='<b>Asha</b>') is True

    message = service.sent[0]
    assert '&lt;b&gt;Asha&lt;/b&gt;' in message['html']
    assert '<b>Asha</b>' not in message['html']
    assert 'Hello <b>Asha</b>,' in message['text']
    assert '123456' in message['html']


def test_confirmation_email_escapes_name_in_html():
    service = CapturingEmailService()
    service.send_password_change_confirmation('a@example.com', name='Asha <script>alert(1)</script>')

    assert '<script>' not in service.sent[0]['html']
    assert '&lt;script&gt;' in service.sent[0]['html']


@pytest.mark.parametrize('env, logged', [('development', True), ('production', False), ('testing', False)])
def test_unsent_code_only_logged_in_development(monkeypatch, caplog, env, logged):
    monkeypatch.setattr(AppConfig, 'FLASK_ENV', env)
    service = EmailService(transports=[])

    with caplog.at_level(logging.WARNING):
        assert service.send_email_verification_otp('a@example.com', '654321') is False

    assert ('654321' in caplog.text) is logged
    assert 'a@example.com' in caplog.text
