class Templates:
    """Шаблоны для генерации файлов"""

    common = """import asyncio
import logging
from typing import Dict, Optional

from aiohttp import ClientError, ClientSession, ClientTimeout, TCPConnector

logger = logging.getLogger(__name__)


class SendRequestError(Exception):
    def __init__(self, message, path, status_code=None):
        self.message = message
        self.path = path
        self.status_code = status_code
        super().__init__(f"[{status_code}] {path}: {message}")


class RawResponse:
    \"\"\"Статус, заголовки и тело ответа, прочитанное целиком\"\"\"

    def __init__(self, status_code: int, body: str, headers: Dict[str, str]):
        self.status_code = status_code
        self.body = body
        self.headers = headers


class AiohttpClient:
    \"\"\"HTTP клиент на базе aiohttp с переиспользуемой сессией\"\"\"

    def __init__(self):
        self._session: Optional[ClientSession] = None
        self._api_url: Optional[str] = None
        self._base_headers: Dict[str, str] = {}
        self._base_cookies: Dict[str, str] = {}
        self._timeout: int = 30
        self._retries: int = 3
        self._max_connections: int = 100
        self._session_dirty = False
        self._session_lock = asyncio.Lock()

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._base_headers)

    @headers.setter
    def headers(self, value: Dict[str, str]):
        self._base_headers = dict(value) if value else {}
        self._session_dirty = True

    @property
    def cookies(self) -> Dict[str, str]:
        return dict(self._base_cookies)

    @cookies.setter
    def cookies(self, value: Dict[str, str]):
        self._base_cookies = dict(value) if value else {}
        self._session_dirty = True

    def update_headers(self, **headers):
        \"\"\"Обновление заголовков\"\"\"
        self._base_headers.update(headers)
        self._session_dirty = True
        return self

    def update_cookies(self, **cookies):
        \"\"\"Обновление куков\"\"\"
        self._base_cookies.update(cookies)
        self._session_dirty = True
        return self

    def set_auth_token(self, token: str):
        \"\"\"Установка Bearer токена авторизации\"\"\"
        return self.update_headers(Authorization=f"Bearer {token}")

    def initialize(
        self,
        api_url: str,
        headers: Dict[str, str] = None,
        cookies: Dict[str, str] = None,
        timeout: int = 30,
        retries: int = 3,
        max_connections: int = 100,
    ):
        \"\"\"Инициализация клиента с настройками\"\"\"
        self._api_url = str(api_url).rstrip("/")
        if headers:
            self.headers = headers
        if cookies:
            self.cookies = cookies
        self._timeout = int(timeout) if timeout else 30
        self._retries = int(retries) if retries else 3
        self._max_connections = max_connections
        return self

    async def _ensure_session(self) -> ClientSession:
        async with self._session_lock:
            if (
                self._session is not None
                and not self._session.closed
                and not self._session_dirty
            ):
                return self._session

            if self._session and not self._session.closed:
                await self._session.close()

            self._session = ClientSession(
                connector=TCPConnector(limit=self._max_connections),
                timeout=ClientTimeout(total=self._timeout),
                headers=self.headers,
                cookies=self.cookies,
                trust_env=True,
            )
            self._session_dirty = False
            return self._session

    async def _send_request(
        self,
        method: str,
        path: str,
        params: Dict[str, str] = None,
        json=None,
    ) -> RawResponse:
        if not self._api_url:
            raise SendRequestError("API URL is empty", path=path)

        full_url = f"{self._api_url}{path}"
        retries = self._retries
        session = await self._ensure_session()

        while True:
            try:
                logger.debug(f"Making {method.upper()} request to {full_url}")
                async with session.request(
                    method, full_url, params=params, json=json
                ) as response:
                    logger.debug(f"Response status: {response.status}")
                    return RawResponse(
                        response.status, await response.text(), dict(response.headers)
                    )
            except (ClientError, asyncio.TimeoutError) as exc:
                retries -= 1
                logger.warning(f"Request failed (retries left: {retries}): {exc}")
                if retries <= 0:
                    raise SendRequestError(str(exc), path=path) from exc
                await asyncio.sleep(0.5)

    async def close(self):
        \"\"\"Закрытие клиента и освобождение ресурсов\"\"\"
        async with self._session_lock:
            if self._session and not self._session.closed:
                await self._session.close()
            self._session = None

    async def health_check(self) -> bool:
        \"\"\"Проверка здоровья API\"\"\"
        session = await self._ensure_session()
        try:
            async with session.get(f"{self._api_url}/health") as response:
                return response.status == 200
        except (ClientError, asyncio.TimeoutError) as exc:
            logger.warning(f"Health check failed: {exc}")
            return False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()"""

    error = """from typing import Optional


class {error_name}(Exception):
    \"\"\"Ошибка вызова API: статус вне 2xx или ответ, который не удалось разобрать\"\"\"

    def __init__(
        self, status_code: int, body: str, cause: Optional[Exception] = None
    ):
        self.status_code = status_code
        self.body = body
        self.cause = cause
        super().__init__(f"[{{status_code}}] {{body}}")"""

    or_error = """if not 200 <= response.status_code <= 299:
\traise {error_name}(response.status_code, response.body)
if result_type is None:
\treturn None
try:
\treturn TypeAdapter(result_type).validate_json(response.body)
except ValidationError as exc:
\traise {error_name}(response.status_code, response.body, exc) from exc"""

    model_header = [
        "from __future__ import annotations",
        "",
        "from typing import Any, Dict, List, Optional",
        "from uuid import UUID",
        "",
        "from pydantic import BaseModel, ConfigDict, Field",
    ]

    alias_header = [
        "from typing import Any, Dict, List, Optional",
        "from uuid import UUID",
    ]

    tag_header = [
        "from __future__ import annotations",
        "",
        "from typing import TYPE_CHECKING, Any, Dict, List, Optional",
        "from uuid import UUID",
        "",
        "from pydantic import BaseModel, ConfigDict, Field, TypeAdapter",
    ]

    client_header = [
        "from typing import Any",
        "",
        "from pydantic import TypeAdapter, ValidationError",
        "",
        "from .common import AiohttpClient, RawResponse",
    ]

    # Атрибуты AiohttpClient и клиента, недоступные для групп операций
    client_members = frozenset(
        {
            "initialize",
            "close",
            "headers",
            "cookies",
            "update_headers",
            "update_cookies",
            "set_auth_token",
            "health_check",
            "or_error",
        }
    )


templates = Templates()
