from unittest.mock import patch

import pytest

from license_alerts.config import EmailConfig
from license_alerts.mailer import SMTPMailer


def test_sends_over_starttls_and_quits():
    mailer = SMTPMailer(EmailConfig(smtp_host="smtp.example.test", smtp_port=587,
                                    smtp_username="bot", smtp_password="pw"))

    with patch("license_alerts.mailer.smtplib.SMTP") as smtp_cls:
        mailer.send_email("owner@acme.test", "alerts@example.test", "Reminder", "<p>hi</p>", "hi")

    smtp = smtp_cls.return_value
    smtp_cls.assert_called_once_with("smtp.example.test", 587, timeout=30)
    smtp.starttls.assert_called_once()
    smtp.login.assert_called_once_with("bot", "pw")
    msg = smtp.send_message.call_args.args[0]
    assert msg["To"] == "owner@acme.test"
    assert msg["Subject"] == "Reminder"
    smtp.quit.assert_called_once()


def test_send_failure_propagates_and_still_quits():
    mailer = SMTPMailer(EmailConfig(use_tls=False))

    with patch("license_alerts.mailer.smtplib.SMTP") as smtp_cls:
        smtp = smtp_cls.return_value
        smtp.send_message.side_effect = OSError("connection reset")
        with pytest.raises(OSError):
            mailer.send_email("owner@acme.test", "alerts@example.test", "s", "<p>h</p>")

    smtp.login.assert_not_called()
    smtp.quit.assert_called_once()
