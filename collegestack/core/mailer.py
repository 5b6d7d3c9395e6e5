# SMTP delivery for magic sign-in links.
# When SMTP is not configured (local development) the link is logged instead of
# sent, so the sign-in flow still works end to end.

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from collegestack.core.config import settings

logger = logging.getLogger("app")


class EmailService:
    """Email service for sending sign-in links"""

    def __init__(self):
        self.smtp_server = settings.SMTP_SERVER
        self.smtp_port = settings.SMTP_PORT
        self.smtp_user = settings.SMTP_USERNAME
        self.smtp_password = settings.SMTP_PASSWORD
        self.from_email = settings.MAIL_FROM
        self.from_name = settings.PROJECT_NAME

    @property
    def configured(self) -> bool:
        return bool(self.smtp_server and self.smtp_user and self.smtp_password)

    def send(self, to_email: str, subject: str, html_body: str, text_body: str = None) -> None:
        """Send an email; raises smtplib.SMTPException / OSError on delivery failure"""
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to_email

        if text_body:
            msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))

        with smtplib.SMTP(self.smtp_server, self.smtp_port) as server:
            server.starttls()
            server.login(self.smtp_user, self.smtp_password)
            server.send_message(msg)

        logger.info(f"Email sent to {to_email}: {subject}")

    def send_magic_link(self, email: str, magic_link: str) -> bool:
        """Send the sign-in link. Returns False when the link was only logged."""
        if not self.configured:
            logger.warning(f"Email not configured. Magic link for {email}: {magic_link}")
            return False

        subject = f"Your {settings.PROJECT_NAME} sign-in link"
        html_body = f"""
        <html>
        <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
            <h2>Sign in to Campus Dialogue Hub</h2>
            <p>Click the button below to sign in. The link expires in
            {settings.MAGIC_LINK_EXPIRE_MINUTES} minutes and can only be used by you.</p>
            <p><a href="{magic_link}" style="display: inline-block; background: #3b82f6; color: white;
            padding: 12px 24px; text-decoration: none; border-radius: 8px;">Sign in</a></p>
            <p style="color: #64748b; font-size: 12px;">If you did not request this email you can ignore it.</p>
        </body>
        </html>
        """
        text_body = f"Sign in to Campus Dialogue Hub: {magic_link}"
        self.send(email, subject, html_body, text_body)
        return True


email_service = EmailService()
