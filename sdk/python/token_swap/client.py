import urllib.parse
from typing import Any, Protocol

import httpx
from token_swap.models import RelayedSwapParams
from token_swap.models.base import FeeRelayerClientException


class FeeRelayerProxy(Protocol):
    async def get_fee_payer(self) -> str:
        ...

    async def swap_token(self, params: RelayedSwapParams) -> str:
        ...


class FeeRelayerClient:
    def __init__(
        self,
        server_url: str,
        http_options: dict[str, Any] | None = None,
    ):
        """
        Args:
            server_url: The URL of the fee relayer.
            http_options: Keyword arguments to pass to the HTTP client.
        """
        parsed_url = urllib.parse.urlparse(server_url)
        if parsed_url.scheme not in ("http", "https"):
            raise ValueError("Invalid server URL")

        self.server_url = server_url
        if http_options is None:
            http_options = {}
        self.http_options = http_options

    def _url(self, path: str) -> str:
        return urllib.parse.urlparse(self.server_url)._replace(path=path).geturl()

    async def get_fee_payer(self) -> str:
        """
        Fetches the address of the account paying fees on behalf of users.

        Returns:
            The fee payer address as a base58 string.
        """
        async with httpx.AsyncClient(**self.http_options) as client:
            resp = await client.get(self._url("/fee_payer/pubkey"))

        resp.raise_for_status()
        return resp.text.strip().strip('"')

    async def swap_token(self, params: RelayedSwapParams) -> str:
        """
        Submits a user signed swap to be completed, paid and broadcast by the relayer.

        Args:
            params: The swap, its fee compensation and the user's signature.
        Returns:
            The signature of the broadcast transaction.
        """
        async with httpx.AsyncClient(**self.http_options) as client:
            resp = await client.post(
                self._url("/swap_spl_token_with_fee_compensation"),
                json=params.model_dump(mode="json"),
            )

        resp.raise_for_status()
        result = resp.json()
        if isinstance(result, dict):
            raise FeeRelayerClientException(
                f"Error in fee relayer response with code {result.get('code')}: {result.get('message')}"
            )
        return result
