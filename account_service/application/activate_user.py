import logging
from typing import Callable

from fastapi.concurrency import run_in_threadpool

from account_service.domain.entities import UserRecord
from account_service.domain.errors import CodeMismatch, DuplicateEmail
from account_service.domain.ports.unit_of_work import UnitOfWorkPort
from account_service.domain.services import secure_compare
from account_service.domain.ports.token_codec import TokenCodecPort
from account_service.logging import redact_email

logger = logging.getLogger(__name__)


async def activate_user(
    uow: UnitOfWorkPort,
    codec: TokenCodecPort,
    activation_token: str,
    activation_code: str,
    hash_password: Callable[..., str],
) -> UserRecord:
    pending, expected_code = codec.verify_activation_token(activation_token)
    if not secure_compare(activation_code.strip(), expected_code):
        raise CodeMismatch()

    password_hash = await run_in_threadpool(hash_password, pending.password)

    async with uow as transaction:
        # A second activation of the same token, or another registration
        # that completed meanwhile, lands here; a true race is caught by
        # the unique index inside create().
        if await transaction.users.find_by_email(pending.email):
            raise DuplicateEmail()
        user = await transaction.users.create(
            name=pending.name,
            email=pending.email,
            password_hash=password_hash,
            is_verified=True,
        )
        await transaction.commit()

    logger.info(
        "user activated", extra={"user_id": user.id, "to": redact_email(user.email)}
    )
    return user
