"""
HTTP-клиент к API кассы.

401 сбрасывает сессию (принудительный выход), остальные ошибки превращаются
в исключения из quickbill_pos.errors. Повторов нет: повторяет оператор.
"""
import asyncio
import logging
from typing import Any, Callable, Dict, Optional, Set

import httpx

from quickbill_pos.errors import (
    AuthError,
    NotFoundError,
    PermissionDeniedError,
    PosError,
    TransientNetworkError,
    ValidationError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"

_ERRORS_BY_STATUS = {
    400: ValidationError,
    401: AuthError,
    403: PermissionDeniedError,
    404: NotFoundError,
}

_LOCAL_LEVELS = {"info": logging.INFO, "warn": logging.WARNING, "error": logging.ERROR}


def _error_detail(response: httpx.Response) -> str:
    try:
        detail = response.json().get("detail")
    except (ValueError, AttributeError):
        detail = None
    return str(detail) if detail else f"An API error occurred: {response.status_code}"


def error_for_response(response: httpx.Response) -> PosError:
    error_cls = _ERRORS_BY_STATUS.get(response.status_code)
    if error_cls:
        return error_cls(_error_detail(response))
    error = PosError(_error_detail(response))
    error.status_code = response.status_code
    return error


class RemoteLogger:
    """
    Журнал на сервере (POST /logs), по принципу fire-and-forget.
    Каждая запись сначала пишется в локальный logging.
    Ошибки отправки только логируются локально, чтобы не зациклиться.
    """

    def __init__(self, api: "PosApiClient"):
        self._api = api
        self._pending: Set[asyncio.Task] = set()

    def info(self, message: str, **meta: Any) -> None:
        self.log("info", message, meta)

    def warn(self, message: str, **meta: Any) -> None:
        self.log("warn", message, meta)

    def error(self, message: str, **meta: Any) -> None:
        self.log("error", message, meta)

    def log(self, level: str, message: str, meta: Optional[Dict[str, Any]] = None) -> None:
        logger.log(_LOCAL_LEVELS.get(level, logging.INFO), "%s %s", message, meta or "")

        if not self._api.token:
            return
        try:
            task = asyncio.get_running_loop().create_task(self._send(level, message, meta))
        except RuntimeError:
            # нет запущенного цикла событий, остаётся только локальная запись
            return
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _send(self, level: str, message: str, meta: Optional[Dict[str, Any]]) -> None:
        try:
            response = await self._api.http.post(
                "/logs",
                json={"level": level, "message": message, "meta": meta or None},
                headers=self._api.auth_headers(),
            )
            response.raise_for_status()
        except Exception as exc:
            logger.error("Failed to send log to server: %s", exc)

    async def flush(self) -> None:
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


class PosApiClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_unauthorized: Optional[Callable[[], None]] = None,
    ):
        self.http = httpx.AsyncClient(base_url=base_url, transport=transport)
        self.token = token
        self.on_unauthorized = on_unauthorized
        self.logger = RemoteLogger(self)

    async def __aenter__(self) -> "PosApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.logger.flush()
        await self.http.aclose()

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        try:
            response = await self.http.request(
                method, path, json=json, params=params, headers=self.auth_headers()
            )
        except httpx.TransportError as exc:
            self.logger.error(f"API call failed: {method} {path}", error=str(exc))
            raise TransientNetworkError("Cannot connect to server. Is the backend running?") from exc

        if response.status_code == 401:
            error = error_for_response(response)
            logger.warning("Unauthorized on %s %s, clearing session", method, path)
            self.token = None
            if self.on_unauthorized:
                self.on_unauthorized()
            raise error

        if response.is_error:
            error = error_for_response(response)
            self.logger.error(f"API call failed: {method} {path}", error=error.message)
            raise error

        if response.status_code == 204:
            return None
        return response.json()

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, body: Any = None) -> Any:
        return await self.request("POST", path, json=body)

    async def put(self, path: str, body: Any = None) -> Any:
        return await self.request("PUT", path, json=body)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
