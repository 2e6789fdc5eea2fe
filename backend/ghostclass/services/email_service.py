"""
Service d'envoi d'emails SMTP.
Utilisé par la synchronisation du tracker pour prévenir l'étudiant d'un conflit
entre sa saisie et le relevé officiel.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

from ghostclass.config import settings
from ghostclass.schemas.sync import PlannedNotification

logger = logging.getLogger(__name__)

_SUBJECTS = {
    "conflict": "Conflit de présence",
    "course_mismatch": "Conflit de cours",
    "revision": "Séance de révision",
}


def send_sync_email(to_email: str, username: str, notification: PlannedNotification) -> None:
    """
    Envoie un email HTML résumant une décision de la synchronisation du tracker.
    Lève une exception en cas d'échec SMTP.
    """
    msg = MIMEMultipart("alternative")
    msg["From"] = settings.SMTP_FROM
    msg["To"] = to_email
    msg["Subject"] = (
        f"GhostClass : {_SUBJECTS.get(notification.kind, notification.title)} : "
        f"{notification.course_name}"
    )

    dashboard_url = f"{settings.APP_URL.rstrip('/')}/dashboard"
    html_content = f"""
    <html>
      <body style="font-family: Arial, sans-serif; color: #333; max-width: 600px; margin: auto;">
        <h2 style="color: #7c3aed;">{escape(notification.title)}</h2>
        <p>Bonjour {escape(username) if username else ""},</p>
        <p>
          <strong>{escape(notification.course_name)}</strong>,
          {escape(notification.date)} ({escape(notification.session)})
        </p>
        <p>{escape(notification.description)}</p>
        <p style="text-align: center; margin: 24px 0;">
          <a href="{dashboard_url}" style="color: #7c3aed;">Ouvrir le tableau de bord</a>
        </p>
        <hr style="border: none; border-top: 1px solid #eee;" />
        <p style="font-size: 12px; color: #888;">
          Ce message est généré automatiquement par GhostClass. Ne pas répondre à cet email.
        </p>
      </body>
    </html>
    """
    msg.attach(MIMEText(html_content, "html", "utf-8"))

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
        if settings.SMTP_USE_TLS:
            server.starttls()
        if settings.SMTP_USERNAME:
            server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        server.send_message(msg)

    logger.info("Email de synchronisation envoyé (%s)", notification.topic)
