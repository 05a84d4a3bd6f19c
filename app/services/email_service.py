import smtplib
import os
from datetime import datetime
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from jinja2 import Environment, FileSystemLoader, select_autoescape
from loguru import logger
from app.core.config import settings

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates", "email")

email_env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html", "xml"]),
)


def send_email_via_smtp(to_email, subject, html_content):
    # Only HOST is required. User/Pass are optional (local catchers such as Mailpit)
    if not settings.SMTP_HOST:
        logger.warning("SMTP host not configured. Skipping email.")
        return

    try:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{settings.EMAILS_FROM_NAME} <{settings.EMAILS_FROM_EMAIL}>"
        msg["To"] = to_email
        msg.attach(MIMEText(html_content, "html"))

        logger.debug(f"Connecting to SMTP: {settings.SMTP_HOST}:{settings.SMTP_PORT}")

        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
            server.ehlo()

            # TLS on submission ports only; local catchers listen on 1025 without it
            if settings.SMTP_PORT in [587, 2525]:
                server.starttls()
                server.ehlo()

            if settings.SMTP_USER and settings.SMTP_PASSWORD:
                server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)

            server.sendmail(settings.EMAILS_FROM_EMAIL, to_email, msg.as_string())

        logger.info(f"Email sent to {to_email}")
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")


# ---------------------------------------------------------
# 1. WELCOME EMAIL (admin added a student / faculty member)
# ---------------------------------------------------------
def send_welcome_email(data: dict):
    if not data.get("email"):
        return

    try:
        template = email_env.get_template("welcome.html")
        html_content = template.render(
            name=data.get("full_name") or data.get("username"),
            username=data.get("username"),
            role=data.get("role"),
            login_url=f"{settings.FRONTEND_URL}/login",
        )
        send_email_via_smtp(data["email"], f"Welcome to {settings.EMAILS_FROM_NAME}", html_content)
    except Exception as e:
        logger.error(f"Error preparing welcome email: {e}")


# ---------------------------------------------------------
# 2. PERMISSION REQUEST UPDATED
# ---------------------------------------------------------
def send_permission_update_email(data: dict):
    """
    data requires: email, name, subject, status; optional: response, handler
    """
    if not data.get("email"):
        return

    try:
        template = email_env.get_template("permission_update.html")
        html_content = template.render(
            name=data.get("name"),
            subject=data.get("subject"),
            status=data.get("status"),
            response=data.get("response"),
            handler=data.get("handler"),
            updated_on=datetime.now().strftime("%d-%m-%Y"),
            requests_url=f"{settings.FRONTEND_URL}/permissions",
        )
        send_email_via_smtp(data["email"], f"Permission request update: {data.get('subject')}", html_content)
    except Exception as e:
        logger.error(f"Error preparing permission update email: {e}")
