import logging

from account_service.domain.entities import PendingRegistration, normalize_email
from account_service.domain.errors import DuplicateEmail
from account_service.domain.ports.notification_port import NotificationPort
from account_service.domain.ports.unit_of_work import UnitOfWorkPort
from account_service.domain.ports.token_codec import TokenCodecPort
from account_service.logging import redact_email

logger = logging.getLogger(__name__)

ACTIVATION_SUBJECT = "Account Activation"
ACTIVATION_TEMPLATE = "activation_mail.html"


async def register_user(
    uow: UnitOfWorkPort,
    codec: TokenCodecPort,
    notifier: NotificationPort,
    name: str,
    email: str,
    password: str,
    *,
    app_name: str = "Account Service",
    activation_ttl_seconds: int = 600,
) -> str:
    """
    Start a registration: nothing is stored yet, the pending user travels
    inside the returned activation token. The code goes out by email only.
    """
    pending = PendingRegistration(
        name=name.strip(), email=normalize_email(email), password=password
    )

    async with uow as transaction:
        if await transaction.users.find_by_email(pending.email):
            raise DuplicateEmail()

    token, code = codec.issue_activation_token(pending)

    await notifier.send(
        to=pending.email,
        subject=ACTIVATION_SUBJECT,
        template=ACTIVATION_TEMPLATE,
        data={
            "app_name": app_name,
            "user": {"name": pending.name},
            "activation_code": code,
            "expires_in_minutes": max(1, activation_ttl_seconds // 60),
        },
    )
    logger.info("activation code sent", extra={"to": redact_email(pending.email)})
    return token
