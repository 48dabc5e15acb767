from asyncio import Lock
from logging import getLogger
from typing import Any
from uuid import uuid4

import httpx

from .typing_session import TypingSession

logger = getLogger(__name__)

SUBMIT_PATH = "/api/v1/tests/submit"


class ResultSubmitter:
    """
    Sends the result of one finished session exactly once.

    The submission id is generated per instance and sent with every attempt,
    so a retry after a lost response is answered with the stored record
    instead of a second one.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        access_token: str | None = None,
        guest_id: str | None = None,
    ) -> None:
        """
        - client: its base_url points at the api server
        - access_token: None submits as a guest
        """
        self._client = client
        self._access_token = access_token
        self._guest_id = guest_id
        self._submission_id = str(uuid4())
        self._lock = Lock()
        self._submitted = False
        self._response: dict[str, Any] | None = None

    @property
    def submission_id(self) -> str:
        return self._submission_id

    @property
    def submitted(self) -> bool:
        return self._submitted

    async def submit(
        self, session: TypingSession, **kwargs
    ) -> dict[str, Any] | None:
        """
        kwargs are passed to TypingSession.to_submission.
        Returns the response body, or None when the request failed.
        """
        async with self._lock:
            if self._submitted:
                logger.debug("already submitted: %s", self._submission_id)
                return self._response

            body = session.to_submission(**kwargs)
            body["submission_id"] = self._submission_id
            body["is_guest"] = self._access_token is None
            if self._guest_id is not None:
                body["guest_id"] = self._guest_id

            headers = {}
            if self._access_token is not None:
                headers["Authorization"] = f"Bearer {self._access_token}"

            try:
                response = await self._client.post(
                    SUBMIT_PATH, json=body, headers=headers
                )
                response.raise_for_status()
            except httpx.HTTPError as ex:
                logger.warning(
                    "failed to submit %s, error: %s", self._submission_id, str(ex)
                )
                return None

            self._response = response.json()
            self._submitted = True
            logger.info("submitted: %s", self._submission_id)
            return self._response
