"""
Outbound email through Flask-Mail
"""
from flask_mail import Mail, Message
from flask import current_app

mail = Mail()


def send_email(subject, recipients, body, html=None):
    """Deliver one message; sender comes from MAIL_DEFAULT_SENDER."""
    mail.send(Message(subject=subject, recipients=list(recipients), body=body, html=html))


def send_otp_email(email, otp):
    """Send the registration OTP to a single address."""
    if not current_app.config.get('MAIL_SERVER'):
        raise RuntimeError("MAIL_SERVER not configured. Please set MAIL_SERVER environment variable.")

    minutes = current_app.config.get('OTP_EXPIRY_MINUTES', 5)
    subject = "Your verification code"
    body = f"""
Hello,

Your verification code is: {otp}

This code will expire in {minutes} minutes. Do not share it with anyone.

If you did not request this code, please ignore this email.
"""
    try:
        send_email(subject, [email], body, html=_otp_email_html(otp, minutes))
    except Exception as e:
        current_app.logger.error(f"SMTP error sending OTP email to {email}: {str(e)}", exc_info=True)
        raise


def _otp_email_html(otp: str, minutes: int) -> str:
    """Minimal HTML template for the OTP email."""
    return f"""
    <!DOCTYPE html>
    <html>
    <head><meta charset="utf-8"><title>Verification code</title></head>
    <body style="font-family: system-ui, sans-serif; max-width: 480px; margin: 0 auto; padding: 24px;">
        <h2 style="color: #1a1a2e;">Verify your email</h2>
        <p>Your verification code is:</p>
        <p style="font-size: 28px; letter-spacing: 6px; font-weight: bold; margin: 24px 0;">{otp}</p>
        <p style="color: #666;">This code will expire in {minutes} minutes.</p>
        <hr style="border: none; border-top: 1px solid #eee; margin: 24px 0;">
        <p style="font-size: 12px; color: #999;">If you did not request this code, please ignore this email.</p>
    </body>
    </html>
    """
