import logging
from typing import Optional
from urllib.parse import quote_plus

import httpx
from pydantic import ValidationError

from ..errors import DecodeError, QueryValidationError, TransportError
from ..schemas.omdb_schemas import (
    MEDIA_TYPES,
    LookupRequest,
    LookupResponse,
    SearchRequest,
    SearchResponse,
)

logger = logging.getLogger(__name__)


def validate_lookup(req: LookupRequest) -> None:
    """
    Ensure a lookup names a title or an IMDb ID before it is sent.

    :param req: LookupRequest to check.
    :raises QueryValidationError: if both title and id are empty.
    """
    if not req.title and not req.id:
        raise QueryValidationError(
            "missing required query parameter: need title or id")


def _media_type(value: Optional[str]) -> str:
    # unrecognized types are dropped rather than rejected
    if value in MEDIA_TYPES:
        return f"&type={value}"
    return ''


def encode_lookup(req: LookupRequest) -> str:
    """
    Render a lookup request as an OMDb query string fragment.

    The IMDb ID takes precedence over the title when both are set.

    :param req: LookupRequest to encode.
    :return: Query string without a leading '&', e.g. ``t=star+wars&y=1977``.
    """
    if req.id:
        query = f"i={req.id}"
    else:
        query = f"t={quote_plus(req.title or '')}"

    if req.year:
        query += f"&y={req.year}"

    if req.plot == 'full':
        query += "&plot=full"

    return query + _media_type(req.type)


def encode_search(req: SearchRequest) -> str:
    """
    Render a search request as an OMDb query string fragment.

    Any non-empty page is sent as the literal ``page=full``, which is what
    existing deployments of this client put on the wire.

    :param req: SearchRequest to encode.
    :return: Query string without a leading '&', e.g. ``s=toy+story``.
    """
    query = f"s={quote_plus(req.search)}"

    if req.page:
        query += "&page=full"

    if req.year:
        query += f"&y={req.year}"

    return query + _media_type(req.type)


def build_endpoint(base: str, api_key: str) -> str:
    """
    Strip surrounding slashes from an endpoint base and attach the API key.

    :param base: Endpoint base URL, e.g. ``http://www.omdbapi.com/``.
    :param api_key: OMDb API key.
    :return: ``<base>/?apikey=<key>``
    """
    return f"{base.strip('/')}/?apikey={api_key}"


def mask_key(url: str) -> str:
    """Hide the apikey value of a request URL for logging."""
    head, sep, tail = url.partition('apikey=')
    if not sep:
        return url
    _, amp, rest = tail.partition('&')
    return f"{head}{sep}***{amp}{rest}"


def fetch_body(client: httpx.Client, url: str) -> bytes:
    """
    Issue a single GET and read the whole body.

    The status code is not interpreted: OMDb reports most failures as a
    JSON payload, which the caller decodes like any other body.

    :param client: HTTP client used as transport.
    :param url: Fully built request URL.
    :return: Raw response body.
    :raises TransportError: on connection, timeout or URL errors.
    """
    logger.debug("GET %s", mask_key(url))
    try:
        resp = client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error("request to %s failed: %s", mask_key(url), e)
        raise TransportError(str(e)) from e
    if resp.status_code >= 400:
        logger.debug("OMDb answered %s for %s", resp.status_code, mask_key(url))
    return resp.content


def _decode(model, body: bytes):
    try:
        decoded = model.model_validate_json(body)
    except ValidationError as e:
        logger.error("could not decode %s: %s", model.__name__, e)
        raise DecodeError(str(e)) from e
    if decoded.is_error:
        logger.warning("OMDb returned an error payload: %s", decoded.error)
    return decoded


def decode_lookup(body: bytes) -> LookupResponse:
    """
    Decode a lookup body into a LookupResponse.

    :raises DecodeError: if the body is not JSON or not an object.
    """
    return _decode(LookupResponse, body)


def decode_search(body: bytes) -> SearchResponse:
    """
    Decode a search body into a SearchResponse.

    :raises DecodeError: if the body is not JSON or does not match the schema.
    """
    return _decode(SearchResponse, body)
