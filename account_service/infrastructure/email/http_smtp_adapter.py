from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import httpx
from fastapi.concurrency import run_in_threadpool
from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from account_service.domain.errors import DeliveryError
from account_service.domain.ports.notification_port import NotificationPort
from account_service.logging import redact_email

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"


class HttpSmtpNotificationAdapter(NotificationPort):
    """
    Renders a Jinja2 mail template and hands the result to an HTTP SMTP relay
    (`POST <base_url>/send`).
    """

    def __init__(
        self,
        base_url: str,
        *,
        from_address: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
        send_path: str = "/send",
        templates_dir: Path = TEMPLATES_DIR,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._send_path = send_path if send_path.startswith("/") else f"/{send_path}"
        self._from = from_address
        self._owns_client: bool = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(timeout=timeout)
        self._env = Environment(
            loader=FileSystemLoader(templates_dir),
            autoescape=select_autoescape(["html"]),
        )

    def _render_sync(self, template: str, data: dict[str, Any]) -> str:
        return self._env.get_template(template).render(**data)

    async def render(self, template: str, data: dict[str, Any]) -> str:
        """Render in a worker thread so the event loop is not blocked."""
        try:
            return await run_in_threadpool(self._render_sync, template, data)
        except TemplateError as e:
            raise DeliveryError(f"Mail template error: {e}") from e

    async def send(
        self,
        *,
        to: str,
        subject: str,
        template: str,
        data: dict[str, Any],
    ) -> None:
        body = await self.render(template, data)

        url = f"{self._base_url}{self._send_path}"
        payload = {"from": self._from, "to": to, "subject": subject, "body": body}

        try:
            resp = await self._client.post(url, json=payload)
        except httpx.HTTPError as e:
            logger.warning(
                "mail relay unreachable",
                extra={"to": redact_email(to), "error": str(e)},
            )
            raise DeliveryError(f"SMTP HTTP error: {e}") from e

        if not (200 <= resp.status_code < 300):
            text = resp.text[:200]
            logger.warning(
                "mail relay rejected message",
                extra={"to": redact_email(to), "status": resp.status_code},
            )
            raise DeliveryError(f"SMTP responded {resp.status_code}: {text}")

        logger.info("mail sent", extra={"to": redact_email(to), "template": template})

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
