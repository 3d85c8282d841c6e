# studentdesk/services/student_service.py
"""
Async client for the student record store REST surface.

    GET    /students        -> [wire student, ...]
    GET    /student/{id}    -> wire student
    POST   /student         -> {"id": <identifier>}
    PUT    /student/{id}    -> (ignored)
    DELETE /student/{id}    -> (ignored)

Create and update never trust the mutation response: both re-fetch the record by id and
return that. Every failure surfaces as RequestFailed; there are no retries here.
"""

import logging
from typing import Any, List, Optional
from urllib.parse import quote

import httpx

from studentdesk.core.config import STORE_BASE_URL, STORE_TIMEOUT_SECONDS
from studentdesk.core.exceptions import RequestFailed, NotFoundOnFollowUp
from studentdesk.models.student import Student, StudentDraft
from studentdesk.services.transform import (
    student_from_wire,
    student_to_wire,
    created_id_from_wire,
)

logger = logging.getLogger(__name__)


def _student_path(student_id: str) -> str:
    return f"/student/{quote(str(student_id), safe='')}"


def _error_detail(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or None
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error") or body.get("message")
        return str(detail) if detail else None
    return None


def _decode_student(payload: Any) -> Student:
    try:
        return student_from_wire(payload)
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"Malformed student record from store: {payload!r}")
        raise RequestFailed(f"Malformed student record received from the store: {e}")


class StudentStoreClient:
    """Thin wrapper over httpx.AsyncClient for the record store.

    Pass ``client`` to share an existing httpx.AsyncClient (it is then not closed here),
    or ``transport`` to swap the network layer.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url or STORE_BASE_URL
        if client is not None:
            self._client = client
            self._owns_client = False
        else:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=timeout if timeout is not None else STORE_TIMEOUT_SECONDS,
                headers={"Content-Type": "application/json"},
                transport=transport,
            )
            self._owns_client = True

    async def __aenter__(self) -> "StudentStoreClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(
        self, method: str, path: str, json: Optional[dict] = None, decode: bool = True
    ) -> Any:
        logger.info(f"Record store request: {method} {path}")
        try:
            response = await self._client.request(method, path, json=json)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.warning(f"Timeout on {method} {path}: {e}")
            raise RequestFailed(f"Timed out waiting for the record store: {e}")
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            detail = _error_detail(e.response)
            logger.warning(f"{method} {path} returned {status_code}: {detail}")
            message = f"Request failed with status code {status_code}"
            if detail:
                message = f"{message}: {detail}"
            raise RequestFailed(message, status_code=status_code)
        except httpx.RequestError as e:
            logger.warning(f"Network error on {method} {path}: {e}")
            raise RequestFailed(f"Network error contacting the record store: {e}")

        if not decode or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Undecodable response body for {method} {path}: {e}")
            raise RequestFailed(f"Malformed response from the record store: {e}")

    # --- Reads ---

    async def get_all_students(self) -> List[Student]:
        payload = await self._request("GET", "/students")
        if not isinstance(payload, list):
            raise RequestFailed("Malformed response from the record store: expected a list of students")
        return [_decode_student(item) for item in payload]

    async def get_student_by_id(self, student_id: str) -> Student:
        payload = await self._request("GET", _student_path(student_id))
        return _decode_student(payload)

    async def _fetch_after_write(self, student_id: str) -> Student:
        try:
            return await self.get_student_by_id(student_id)
        except RequestFailed as e:
            if e.is_not_found:
                raise NotFoundOnFollowUp(
                    f"Student {student_id} could not be found after saving it",
                    status_code=e.status_code,
                ) from e
            raise

    # --- Writes ---

    async def create_student(self, draft: StudentDraft) -> Student:
        payload = await self._request("POST", "/student", json=student_to_wire(draft))
        try:
            new_id = created_id_from_wire(payload)
        except (KeyError, TypeError) as e:
            raise RequestFailed(f"Malformed create response from the record store: {e}")
        logger.info(f"Record store assigned id {new_id}; fetching the created student")
        return await self._fetch_after_write(new_id)

    async def update_student(self, student_id: str, draft: StudentDraft) -> Student:
        await self._request("PUT", _student_path(student_id), json=student_to_wire(draft), decode=False)
        return await self._fetch_after_write(student_id)

    async def delete_student(self, student_id: str) -> None:
        await self._request("DELETE", _student_path(student_id), decode=False)
