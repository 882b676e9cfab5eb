import smtplib

from src.geo_attendance.geo_attendance.mail.sender import (
    FakeEmailSender,
    SmtpEmailSender,
    SmtpSettings,
    build_email_sender,
)
from src.geo_attendance.geo_attendance.mail.templates import reset_code_email


def test_without_host_uses_in_memory_sender():
    assert isinstance(build_email_sender({"host": ""}), FakeEmailSender)
    assert isinstance(build_email_sender({"host": "smtp.example.com"}), SmtpEmailSender)


def test_smtp_failure_is_reported_not_raised(monkeypatch):
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("no smtp here")

    monkeypatch.setattr(smtplib, "SMTP", refuse)
    sender = SmtpEmailSender(SmtpSettings(host="smtp.example.com", sender="noreply@example.com"))

    result = sender.send(to="a@example.com", subject="Hi", html="<p>Hi</p>", text="Hi")

    assert result.success is False
    assert "no smtp here" in result.error


def test_reset_template_escapes_name():
    subject, html, text = reset_code_email("<Ana>", "123456", 15)

    assert "123456" in html and "123456" in text
    assert "&lt;Ana&gt;" in html
    assert "15 minutes" in text
