"""
Client HTTP WooCommerce (API REST v3) basé sur httpx.
- Authentification par consumer_key/consumer_secret en query string.
- Convertit les échecs transport/HTTP en NetworkError et les corps illisibles en MalformedResponseError.
- Un AsyncClient est ouvert par appel: aucune ressource liée à une boucle d'événements n'est partagée.
"""
from typing import Any, Dict, Optional
import logging

import httpx

from pos_backend.config import (
    WC_API_URL,
    WC_CONSUMER_KEY,
    WC_CONSUMER_SECRET,
    HTTP_TIMEOUT_SECONDS,
)
from pos_backend.errors import NetworkError, MalformedResponseError

logger = logging.getLogger(__name__)


class WooCommerceClient:
    def __init__(
        self,
        base_url: str,
        consumer_key: str,
        consumer_secret: str,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.timeout = timeout
        self.transport = transport

    def _auth_params(self) -> Dict[str, str]:
        return {"consumer_key": self.consumer_key, "consumer_secret": self.consumer_secret}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
        )

    async def request_json(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Exécute une requête et retourne le JSON décodé.
        - NetworkError: backend non configuré, injoignable ou statut >= 400.
        - MalformedResponseError: corps non JSON.
        """
        if not self.base_url:
            raise NetworkError("WC_API_URL manquant")
        query = {**self._auth_params(), **(params or {})}
        try:
            async with self._client() as client:
                response = await client.request(method, path, params=query, json=json_data)
        except httpx.HTTPError as e:
            raise NetworkError(f"{method} {path} injoignable: {e}") from e

        if response.status_code >= 400:
            raise NetworkError(f"{method} {path} a répondu {response.status_code}")
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(f"{method} {path}: réponse non JSON") from e

    async def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request_json("GET", path, params=params)

    async def post_json(self, path: str, payload: Dict[str, Any]) -> Any:
        return await self.request_json("POST", path, json_data=payload)


_woocommerce: Optional[WooCommerceClient] = None

def get_woocommerce() -> WooCommerceClient:
    global _woocommerce
    if _woocommerce is None:
        if not WC_API_URL:
            logger.warning("WC_API_URL non défini: les appels WooCommerce échoueront")
        _woocommerce = WooCommerceClient(WC_API_URL, WC_CONSUMER_KEY, WC_CONSUMER_SECRET)
    return _woocommerce
