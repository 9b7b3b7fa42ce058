from typing import Iterator
from fastapi import FastAPI, HTTPException, Depends, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from .schemas.omdb_schemas import (
    ErrorResponse,
    LookupRequest,
    LookupResponse,
    SearchRequest,
    SearchResponse,
)
from .clients.omdb_client import OmdbClient
from .config import settings
from .errors import DecodeError, QueryValidationError, TransportError

app = FastAPI()


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    body = ErrorResponse(code=exc.status_code, message=str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


def get_client() -> Iterator[OmdbClient]:
    with OmdbClient.from_settings(settings) as client:
        yield client


@app.get('/lookup', response_model=LookupResponse, response_model_exclude_defaults=True,
         responses={400: {'model': ErrorResponse}, 502: {'model': ErrorResponse}})
def lookup_title(params: LookupRequest = Depends(), client: OmdbClient = Depends(get_client)):
    try:
        return client.lookup(params).wire_dict()
    except QueryValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (TransportError, DecodeError) as e:
        raise HTTPException(
            status_code=502, detail=f"OMDb service error: {str(e)}")


@app.get('/search', response_model=SearchResponse, response_model_exclude_defaults=True,
         responses={502: {'model': ErrorResponse}})
def search_titles(params: SearchRequest = Depends(), client: OmdbClient = Depends(get_client)):
    try:
        return client.search(params).wire_dict()
    except (TransportError, DecodeError) as e:
        raise HTTPException(
            status_code=502, detail=f"OMDb service error: {str(e)}")
