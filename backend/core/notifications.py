import logging

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


def send_contact_notification(msg) -> bool:
    """Email the site owner about a new contact message.

    Never raises: the sender has already been told their message arrived,
    so a delivery problem is only logged.
    """
    receiver = settings.CONTACT_RECEIVER_EMAIL
    if not receiver:
        logger.debug('CONTACT_RECEIVER_EMAIL not set, skipping notification for message %s', msg.pk)
        return False

    body = (
        f'New contact form submission\n\n'
        f'Name: {msg.name}\n'
        f'Email: {msg.email}\n'
        f'Subject: {msg.subject}\n\n'
        f'{msg.message}\n'
    )
    try:
        send_mail(
            subject=f'New Contact: {msg.subject}',
            message=body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[receiver],
            fail_silently=False,
        )
    except Exception as e:
        logger.error('contact notification for message %s failed: %s', msg.pk, e)
        return False
    logger.info('contact notification sent for message %s', msg.pk)
    return True
