import smtplib
from unittest.mock import patch

from django.core import mail
from django.test import SimpleTestCase, override_settings

from apps.auth.mail import WELCOME_SUBJECT, send_welcome_email


@override_settings(EMAIL_BACKEND="django.core.mail.backends.locmem.EmailBackend")
class WelcomeEmailTests(SimpleTestCase):
    def test_sends_greeting(self):
        self.assertTrue(send_welcome_email("new@example.com", "Nova"))
        self.assertEqual(len(mail.outbox), 1)
        message = mail.outbox[0]
        self.assertEqual(message.subject, WELCOME_SUBJECT)
        self.assertEqual(message.to, ["new@example.com"])
        self.assertTrue(message.body.startswith("Hello Nova,"))

    def test_delivery_failure_is_logged_not_raised(self):
        with patch("apps.auth.mail.send_mail", side_effect=smtplib.SMTPException("down")):
            self.assertFalse(send_welcome_email("new@example.com", "Nova"))
