from __future__ import annotations

from html import escape


def welcome_email(name: str) -> tuple[str, str, str]:
    subject = "Welcome to Geo Attendance"
    text = (
        f"Hello {name},\n\n"
        "Your account has been created. You can now clock in and out from the office.\n"
    )
    html = (
        f"<p>Hello {escape(name)},</p>"
        "<p>Your account has been created. You can now clock in and out from the office.</p>"
    )
    return subject, html, text


def reset_code_email(name: str, code: str, minutes: int) -> tuple[str, str, str]:
    subject = "Your password reset code"
    text = (
        f"Hello {name},\n\n"
        f"Your password reset code is {code}. It expires in {minutes} minutes.\n"
        "If you did not request a reset, ignore this email.\n"
    )
    html = (
        f"<p>Hello {escape(name)},</p>"
        f"<p>Your password reset code is <strong>{escape(code)}</strong>. "
        f"It expires in {minutes} minutes.</p>"
        "<p>If you did not request a reset, ignore this email.</p>"
    )
    return subject, html, text
