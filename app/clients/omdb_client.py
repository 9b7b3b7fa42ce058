import json
import logging
from typing import IO, Optional, Union

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..errors import ConfigParseError, QueryValidationError
from ..schemas.omdb_schemas import (
    ClientConfig,
    LookupRequest,
    LookupResponse,
    SearchRequest,
    SearchResponse,
)
from ..utils.utils_omdb_client import (
    build_endpoint,
    decode_lookup,
    decode_search,
    encode_lookup,
    encode_search,
    fetch_body,
    mask_key,
    validate_lookup,
)

logger = logging.getLogger(__name__)

ConfigSource = Union[str, bytes, IO]


def _read_config(config: ConfigSource) -> ClientConfig:
    raw = config.read() if hasattr(config, 'read') else config
    try:
        return ClientConfig.model_validate_json(raw)
    except ValidationError as e:
        raise ConfigParseError(f"invalid client configuration: {e}") from e


class OmdbClient:
    """
    Synchronous client for the OMDb API.

    Holds the transport, the data and image endpoint bases (with the API
    key already attached) and nothing else; every call is independent.
    """

    def __init__(
        self,
        config: ConfigSource,
        timeout: float = 30.0,
        transport: Optional[httpx.Client] = None
    ):
        """
        :param config: JSON configuration document as text, bytes or a
            readable stream.
        :param timeout: Per-request timeout in seconds.
        :param transport: HTTP client to issue requests with; one is
            created (and owned) when omitted.
        :raises ConfigParseError: if the configuration cannot be parsed.
        """
        self.config = _read_config(config)
        self.timeout = timeout
        self.data_endpoint = build_endpoint(
            self.config.api.endpoint.data, self.config.api.key)
        self.image_endpoint = build_endpoint(
            self.config.api.endpoint.image, self.config.api.key)
        self._owns_transport = transport is None
        self.transport = transport if transport is not None else httpx.Client(timeout=timeout)
        logger.debug("OMDb client configured for %s", mask_key(self.data_endpoint))

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        api_key: Optional[str] = None,
        transport: Optional[httpx.Client] = None
    ) -> 'OmdbClient':
        """
        Build a client from application settings.

        :param settings: Settings carrying key, endpoints and timeout.
        :param api_key: Overrides ``settings.OMDB_API_KEY`` when given.
        :param transport: Optional HTTP client to use.
        """
        conf = {
            'api': {
                'key': api_key if api_key is not None else settings.OMDB_API_KEY,
                'endpoint': {
                    'data': settings.OMDB_DATA_ENDPOINT,
                    'image': settings.OMDB_IMAGE_ENDPOINT,
                },
            }
        }
        return cls(json.dumps(conf), settings.OMDB_TIMEOUT, transport)

    def close(self) -> None:
        if self._owns_transport:
            self.transport.close()

    def __enter__(self) -> 'OmdbClient':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _data_url(self, query: str) -> str:
        return f"{self.data_endpoint}&{query}"

    def lookup(self, req: LookupRequest) -> LookupResponse:
        """
        Look up a single title by IMDb ID or by name.

        :param req: LookupRequest with a title or an id.
        :return: Decoded LookupResponse; an OMDb error payload comes back
            as a response with ``is_error`` set.
        """
        return decode_lookup(self.lookup_raw(req))

    def lookup_raw(self, req: LookupRequest) -> bytes:
        """Like lookup, but return the undecoded response body."""
        validate_lookup(req)
        return fetch_body(self.transport, self._data_url(encode_lookup(req)))

    def search(self, req: SearchRequest) -> SearchResponse:
        """
        Search for titles matching free text.

        :param req: SearchRequest with a non-empty search term.
        :return: Decoded SearchResponse.
        """
        return decode_search(self.search_raw(req))

    def search_raw(self, req: SearchRequest) -> bytes:
        """Like search, but return the undecoded response body."""
        return fetch_body(self.transport, self._data_url(encode_search(req)))

    def poster_url(self, imdb_id: str, height: Optional[int] = None) -> str:
        """
        Build the poster image URL for an IMDb ID.

        :param imdb_id: IMDb ID, e.g. ``tt0395789``.
        :param height: Optional image height in pixels.
        """
        url = f"{self.image_endpoint}&i={imdb_id}"
        if height:
            url += f"&h={height}"
        return url

    def poster_raw(self, imdb_id: str, height: Optional[int] = None) -> bytes:
        """Fetch the poster image bytes for an IMDb ID."""
        if not imdb_id:
            raise QueryValidationError("missing required parameter: imdb_id")
        return fetch_body(self.transport, self.poster_url(imdb_id, height))
