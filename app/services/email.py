"""Email service using SMTP (Brevo by default) with application notification templates."""

from typing import Any
from fastapi_mail import FastMail, MessageSchema, ConnectionConfig, MessageType
from pydantic import EmailStr
from app.core.config import get_settings


# Email template definitions
EMAIL_TEMPLATES = {
    "application_submitted": {
        "subject": "Application received - {project_title}",
        "body": """
            <html><body>
            <h2>Application Received</h2>
            <p>Hello {volunteer_name},</p>
            <p>Thank you for applying! Your application #{application_id} for "{project_title}" has been submitted for review.</p>
            </body></html>
        """,
    },
    "application_received": {
        "subject": "New volunteer application - {project_title}",
        "body": """
            <html><body>
            <h2>New Volunteer Application</h2>
            <p>Hello {organization_name},</p>
            <p>{volunteer_name} has applied to your project "{project_title}".</p>
            <p><a href="{frontend_url}/projects/{project_id}/applications">Review applications</a></p>
            </body></html>
        """,
    },
    "application_approved": {
        "subject": "Application approved - {project_title}",
        "body": """
            <html><body>
            <h2>Application Approved</h2>
            <p>Hello {volunteer_name},</p>
            <p>Congratulations! Your application for "{project_title}" has been approved.</p>
            <p><a href="{frontend_url}/projects/{project_id}">View the project</a></p>
            </body></html>
        """,
    },
    "application_rejected": {
        "subject": "Application update - {project_title}",
        "body": """
            <html><body>
            <h2>Application Status Update</h2>
            <p>Hello {volunteer_name},</p>
            <p>Your application for "{project_title}" was not selected at this time.</p>
            <p><strong>Notes:</strong> {review_notes}</p>
            </body></html>
        """,
    },
    "application_withdrawn": {
        "subject": "Volunteer withdrew - {project_title}",
        "body": """
            <html><body>
            <h2>Application Withdrawn</h2>
            <p>Hello {organization_name},</p>
            <p>{volunteer_name} has withdrawn their application for "{project_title}".</p>
            </body></html>
        """,
    },
}


def get_email_config() -> ConnectionConfig:
    """
    Create and return email configuration for FastMail.

    Returns:
        ConnectionConfig: Configuration object for email sending over SMTP.

    Raises:
        ValueError: If required email settings are not configured.
    """
    settings = get_settings()

    if not settings.SMTP_USER:
        raise ValueError("SMTP_USER is required for email functionality")
    if not settings.SMTP_PASSWORD:
        raise ValueError("SMTP_PASSWORD is required for email functionality")
    if not settings.SMTP_FROM_EMAIL:
        raise ValueError("SMTP_FROM_EMAIL is required for email functionality")

    return ConnectionConfig(
        MAIL_USERNAME=settings.SMTP_USER,
        MAIL_PASSWORD=settings.SMTP_PASSWORD.get_secret_value(),
        MAIL_FROM=settings.SMTP_FROM_EMAIL,
        MAIL_FROM_NAME=settings.SMTP_FROM_NAME,
        MAIL_PORT=settings.SMTP_PORT,
        MAIL_SERVER=settings.SMTP_HOST,
        MAIL_STARTTLS=True,
        MAIL_SSL_TLS=False,
        USE_CREDENTIALS=True,
        VALIDATE_CERTS=True,
    )


def render_template(template_name: str, context: dict[str, Any]) -> tuple[str, str]:
    """
    Format the subject and body of a named template.

    Raises:
        ValueError: If template_name is not in EMAIL_TEMPLATES.
        KeyError: If the context lacks a placeholder used by the template.
    """
    if template_name not in EMAIL_TEMPLATES:
        raise ValueError(f"Unknown email template: {template_name}")

    template = EMAIL_TEMPLATES[template_name]
    return template["subject"].format(**context), template["body"].format(**context)


async def send_notification_email(
    template_name: str, recipient_email: EmailStr, context: dict[str, Any]
) -> None:
    """
    Send notification email using a template.

    Args:
        template_name: Name of the template from EMAIL_TEMPLATES
        recipient_email: Email address to send to
        context: Variables to format into the template

    Raises:
        ValueError: If template_name doesn't exist or email config is invalid
        Exception: If email sending fails
    """
    subject, body = render_template(template_name, context)

    message = MessageSchema(
        subject=subject,
        recipients=[recipient_email],
        body=body,
        subtype=MessageType.html,
    )

    fm = FastMail(get_email_config())
    await fm.send_message(message)
