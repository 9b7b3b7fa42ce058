from typing import Literal, Optional, Tuple
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

MEDIA_TYPES = ('movie', 'series', 'episode')


class LookupRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    id: Optional[str] = None
    type: Optional[str] = None
    year: Optional[str] = None
    plot: Optional[Literal['short', 'full']] = None


class SearchRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    search: str = Field(min_length=1)
    type: Optional[str] = None
    year: Optional[str] = None
    page: Optional[str] = None


class EndpointConfig(BaseModel):
    data: str = ''
    image: str = ''


class ApiConfig(BaseModel):
    key: str = ''
    endpoint: EndpointConfig = Field(default_factory=EndpointConfig)


class ClientConfig(BaseModel):
    """
    Mirrors the JSON configuration document accepted by the client:
    ``{"api": {"key": ..., "endpoint": {"data": ..., "image": ...}}}``
    """
    api: ApiConfig = Field(default_factory=ApiConfig)


def _omit_empty(value):
    if isinstance(value, dict):
        return {k: _omit_empty(v) for k, v in value.items()
                if v is not None and v != '' and v != []}
    if isinstance(value, list):
        return [_omit_empty(v) for v in value]
    return value


class _ApiStatus:
    """Shared by payloads carrying OMDb's ``Response``/``Error`` fields."""

    @property
    def is_error(self) -> bool:
        return self.response == 'False'

    def wire_dict(self) -> dict:
        """
        Dump by wire name, dropping empty values the way ``omitempty`` does.

        ``Response``/``Error`` are only kept on error payloads.
        """
        data = self.model_dump(mode='json', by_alias=True)
        if not self.is_error:
            data.pop('Response', None)
            data.pop('Error', None)
        return _omit_empty(data)


class Rating(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: Optional[str] = Field(default=None, alias='Source')
    value: Optional[str] = Field(default=None, alias='Value')


class LookupResponse(_ApiStatus, BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: Optional[str] = Field(default=None, alias='Title')
    year: Optional[str] = Field(default=None, alias='Year')
    rated: Optional[str] = Field(default=None, alias='Rated')
    released: Optional[str] = Field(default=None, alias='Released')
    runtime: Optional[str] = Field(default=None, alias='Runtime')
    genre: Optional[str] = Field(default=None, alias='Genre')
    director: Optional[str] = Field(default=None, alias='Director')
    writer: Optional[str] = Field(default=None, alias='Writer')
    actors: Optional[str] = Field(default=None, alias='Actors')
    plot: Optional[str] = Field(default=None, alias='Plot')
    language: Optional[str] = Field(default=None, alias='Language')
    country: Optional[str] = Field(default=None, alias='Country')
    awards: Optional[str] = Field(default=None, alias='Awards')
    poster: Optional[str] = Field(default=None, alias='Poster')
    ratings: Tuple[Rating, ...] = Field(default=(), alias='Ratings')
    metascore: Optional[str] = Field(default=None, alias='Metascore')
    imdb_rating: Optional[str] = Field(default=None, alias='imdbRating')
    imdb_votes: Optional[str] = Field(default=None, alias='imdbVotes')
    # the lookup payload is written back out as "imdbid"
    imdb_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices('imdbid', 'imdbID', 'imdb_id'),
        serialization_alias='imdbid',
    )
    type: Optional[str] = Field(default=None, alias='Type')
    dvd_release: Optional[str] = Field(default=None, alias='DVD')
    box_office: Optional[str] = Field(default=None, alias='BoxOffice')
    production: Optional[str] = Field(default=None, alias='Production')
    website: Optional[str] = Field(default=None, alias='Website')
    response: Optional[str] = Field(default=None, alias='Response')
    error: Optional[str] = Field(default=None, alias='Error')


class SearchResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: Optional[str] = Field(default=None, alias='Title')
    year: Optional[str] = Field(default=None, alias='Year')
    imdb_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices('imdbID', 'imdbid', 'imdb_id'),
        serialization_alias='imdbID',
    )
    type: Optional[str] = Field(default=None, alias='Type')
    poster: Optional[str] = Field(default=None, alias='Poster')


class SearchResponse(_ApiStatus, BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    search: Tuple[SearchResult, ...] = Field(default=(), alias='Search')
    total_results: Optional[str] = Field(default=None, alias='totalResults')
    response: Optional[str] = Field(default=None, alias='Response')
    error: Optional[str] = Field(default=None, alias='Error')


class ErrorResponse(BaseModel):
    code: int
    message: str
