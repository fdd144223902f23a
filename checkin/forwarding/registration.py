# checkin/forwarding/registration.py
"""
HTTP client for the registration service's GraphQL endpoint.

The registration service owns attendee identity. Fields of this service's
schema that expose identity are resolved by forwarding the client's own
sub-selection upstream:

    document -> stitch -> POST {query, variables} -> unwrap -> reshape

Requests authenticate with the shared admin key as HTTP basic credentials.
An `errors` payload, a non-2xx status, or a transport failure is raised as
UpstreamError; nothing is retried or cached.
"""

import base64
import json
import logging
from typing import Any, Dict, Optional

import httpx

from checkin.core.errors import UpstreamError
from checkin.forwarding.analyzer import QueryDocument
from checkin.forwarding.reshaper import reshape
from checkin.forwarding.spec import ForwardSpec
from checkin.forwarding.stitcher import stitch

logger = logging.getLogger(__name__)


class RegistrationClient:
    """Forwards GraphQL selections to the registration service."""

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize client.

        Args:
            url: Registration GraphQL endpoint
            api_key: Shared secret, sent base64-encoded as basic credentials
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.url = url
        self.timeout = timeout
        self._authorization = "Basic " + base64.b64encode(api_key.encode()).decode()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                headers={
                    "Authorization": self._authorization,
                    "Content-Type": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    async def query(
        self, query: str, variables: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Runs a query upstream and returns its `data` object."""
        payload = json.dumps({"query": query, "variables": variables or {}}, default=str)
        try:
            client = await self._get_client()
            response = await client.post(self.url, content=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Error calling registration service: {e}")
            raise UpstreamError(f"Registration service request failed: {e}") from e
        except ValueError as e:
            logger.error(f"Registration service returned malformed JSON: {e}")
            raise UpstreamError("Registration service returned malformed JSON") from e

        if not isinstance(body, dict):
            raise UpstreamError("Registration service returned an unexpected response")

        errors = body.get("errors")
        if errors:
            logger.error(f"Registration service returned errors: {errors}")
            raise UpstreamError(json.dumps(errors), errors=errors)
        return body.get("data") or {}

    async def forward_document(
        self,
        document: QueryDocument,
        spec: ForwardSpec,
        variable_values: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Forwards the document's current field and returns the reshaped
        result, or None when the client selected nothing forwardable.
        """
        stitched = stitch(document, spec, variable_values)
        if stitched is None:
            return None
        logger.debug(f"Forwarding to registration: {stitched.query}")
        data = await self.query(stitched.query, stitched.variables)
        # The stitched query has exactly one top-level field
        value = next(iter(data.values()), None)
        return reshape(value, spec.path)

    async def forward(self, info: Any, spec: ForwardSpec) -> Any:
        """
        Forwards the field currently being resolved, with the variables as
        the client sent them (`info.context.request_variables`).
        """
        return await self.forward_document(
            QueryDocument.from_info(info), spec, info.context.request_variables
        )
