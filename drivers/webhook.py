# Generic outgoing webhook driver (send-only notification transport).
#
# The driver shell declares the config keys; the wrapped WebhookTransport
# POSTs a JSON payload to the configured URL on every send().
#
# Config keys:
#   url     – HTTP endpoint to send to (required)
#   method  – HTTP method: "POST" (default), "PUT", "PATCH"
#   headers – Dict of extra request headers
#   token   – Sent as "Authorization: Bearer <token>" when set
#   timeout – Total request timeout in seconds (default 10)
#
# Payload sent on each message:
#   {
#     "text":    "<text>",
#     "channel": { ... channel dict passed to send() ... },
#     ... any extra keyword arguments passed to send() ...
#   }

import asyncio
from typing import Literal

import aiohttp
from pydantic import BaseModel, ConfigDict, Field

import services.logger as log
from drivers import Driver


class WebhookConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url:     str
    method:  Literal["POST", "PUT", "PATCH"] = "POST"
    headers: dict[str, str]                  = Field(default_factory=dict)
    token:   str                             = ""
    timeout: float                           = 10

l = log.get_logger()

_OK_STATUSES = (200, 201, 202, 204)


class WebhookTransport:
    """aiohttp client bound to one webhook endpoint."""

    def __init__(self, config: dict):
        self.config = WebhookConfig.model_validate(config)
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout)
            )
        return self._session

    async def close(self):
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def send(self, text: str, channel: dict | None = None, **extra) -> bool:
        """Deliver *text*; True if the endpoint answered with a 2xx status."""
        payload: dict = {"text": text, "channel": channel or {}}
        payload.update(extra)

        headers = {"Content-Type": "application/json", **self.config.headers}
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"

        session = await self._get_session()
        try:
            async with session.request(self.config.method, self.config.url, json=payload, headers=headers) as resp:
                if resp.status not in _OK_STATUSES:
                    body = await resp.text()
                    l.error(f"Webhook send to {self.config.url} failed HTTP {resp.status}: {body[:200]}")
                    return False
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            l.error(f"Webhook send to {self.config.url} failed: {e}")
            return False
        return True


class WebhookDriver(Driver):
    driver_name = "webhook"
    driver_category = "notification"
    driver_title = "Outgoing webhook"
    driver_description = "Posts JSON payloads to an HTTP endpoint"
    driver_class = "drivers.webhook:WebhookTransport"

    def create_driver_config(self, properties):
        properties.property("url", default="", type="str", title="Endpoint URL", required=True)
        properties.property("method", default="POST", type="str", title="HTTP method")
        properties.property("headers", default={}, type="dict", title="Extra headers")
        properties.property("token", default="", type="str", title="Bearer token", secret=True)
        properties.property("timeout", default=10.0, type="float", title="Timeout (seconds)")
