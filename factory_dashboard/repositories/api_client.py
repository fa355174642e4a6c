# ==============================================================================
# CLIENTE HTTP COMPARTIDO - Acceso al backend REST
# ==============================================================================
# Único punto de salida hacia el backend. Todos los repositorios lo usan.
#   - URL base fija (config.API_BASE_URL)
#   - Cuerpos JSON
#   - Inyección del token "Authorization: Bearer <token>" en cada petición
#   - 401 → UnauthorizedError (la capa web borra el token y va a /login)
#
# No hay reintentos: un error se propaga al llamador tal cual.
# ==============================================================================

import logging
from typing import Any, Callable, Dict, Optional

import requests

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    Error devuelto por el backend (o al hablar con él).

    Attributes:
        message: Mensaje legible (el campo "error" del backend si existe)
        status_code: Código HTTP, None si no hubo respuesta
        payload: Cuerpo JSON de la respuesta de error, si lo hubo
    """

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class UnauthorizedError(ApiError):
    """El backend respondió 401: token ausente, vencido o inválido."""
    pass


class ApiConnectionError(ApiError):
    """No se pudo contactar al backend (red caída o timeout)."""
    pass


class ApiClient:
    """
    Cliente HTTP sobre requests.Session.

    Uso:
        client = ApiClient('https://backend/api', token_provider=lambda: 'abc')
        products = client.get('/inventory')
        client.put(f"/inventory/{product_id}", json={...})
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None
    ):
        """
        Args:
            base_url: URL base del backend (ej: https://host/api)
            token_provider: Función que retorna el token actual o None
            timeout: Segundos máximos por petición
            session: Sesión requests a reutilizar (inyectable en tests)
        """
        self.base_url = base_url.rstrip('/')
        self.token_provider = token_provider
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        })

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _auth_headers(self) -> Dict[str, str]:
        """Header Authorization solo si hay token disponible."""
        token = self.token_provider() if self.token_provider else None
        if token:
            return {'Authorization': f'Bearer {token}'}
        return {}

    @staticmethod
    def _error_message(response) -> str:
        """Prefiere el campo "error" (o "message") del cuerpo JSON del backend."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            for key in ('error', 'message'):
                if body.get(key):
                    return str(body[key])
        return f"{response.status_code} {response.reason or 'Error'}".strip()

    # =========================================================================
    # PETICIONES
    # =========================================================================

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None
    ) -> Any:
        """
        Ejecuta una petición y retorna el JSON decodificado.

        Returns:
            Cuerpo JSON, o None si la respuesta viene vacía

        Raises:
            UnauthorizedError: Respuesta 401
            ApiConnectionError: Error de red o timeout
            ApiError: Cualquier otra respuesta no exitosa
        """
        url = self._url(path)
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._auth_headers(),
                timeout=self.timeout,
            )
        except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
            logger.error("Backend no disponible en %s %s: %s", method, url, e)
            raise ApiConnectionError(f"Could not reach the server: {e}") from e
        except requests.exceptions.RequestException as e:
            logger.error("Error HTTP en %s %s: %s", method, url, e)
            raise ApiError(str(e)) from e

        if response.status_code == 401:
            logger.warning("401 en %s %s - token inválido o ausente", method, url)
            raise UnauthorizedError("Your session has expired. Please sign in again.", 401)

        if not response.ok:
            message = self._error_message(response)
            logger.error("Backend respondió %s en %s %s: %s", response.status_code, method, url, message)
            try:
                payload = response.json()
            except ValueError:
                payload = None
            raise ApiError(message, response.status_code, payload)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"Invalid JSON from {method} {path}", response.status_code) from e

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request('GET', path, params=params)

    def post(self, path: str, json: Any = None) -> Any:
        return self.request('POST', path, json=json)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request('PUT', path, json=json)

    def delete(self, path: str) -> Any:
        return self.request('DELETE', path)
