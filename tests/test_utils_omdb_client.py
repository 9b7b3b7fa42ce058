import pytest
import httpx
from urllib.parse import parse_qs
from app.utils.utils_omdb_client import (
    build_endpoint,
    decode_lookup,
    decode_search,
    encode_lookup,
    encode_search,
    fetch_body,
    mask_key,
    validate_lookup,
)
from app.schemas.omdb_schemas import LookupRequest, SearchRequest
from app.errors import DecodeError, QueryValidationError, TransportError


class DummyClient:
    def __init__(self, responses):
        # responses: dict of url to FakeResp
        self.responses = responses
        self.calls = []

    def get(self, url):
        self.calls.append(url)
        return self.responses.get(url)


class FakeResp:
    def __init__(self, content, status_code=200):
        self.content = content
        self.status_code = status_code


# --- validate_lookup ---


@pytest.mark.parametrize("title,id_", [(None, None), ("", ""), ("", None)])
def test_validate_lookup_requires_title_or_id(title, id_):
    with pytest.raises(QueryValidationError):
        validate_lookup(LookupRequest(title=title, id=id_))


def test_validate_lookup_accepts_title_or_id():
    validate_lookup(LookupRequest(title="shrek"))
    validate_lookup(LookupRequest(id="tt0395789"))


# --- encode_lookup ---


def test_encode_lookup_by_title():
    assert encode_lookup(LookupRequest(title="shrek")) == "t=shrek"


def test_encode_lookup_by_id_has_no_title():
    query = encode_lookup(LookupRequest(id="tt0395789"))
    assert query == "i=tt0395789"
    assert "t=" not in query


def test_encode_lookup_id_takes_precedence_over_title():
    query = encode_lookup(LookupRequest(title="shrek", id="tt0126029"))
    assert query.startswith("i=tt0126029")
    assert "t=" not in query


def test_encode_lookup_escapes_title():
    assert encode_lookup(LookupRequest(title="star wars")) == "t=star+wars"


def test_encode_lookup_all_parameters_in_order():
    req = LookupRequest(title="alien", year="1979", plot="full", type="movie")
    assert encode_lookup(req) == "t=alien&y=1979&plot=full&type=movie"


def test_encode_lookup_short_plot_is_not_sent():
    assert "plot" not in encode_lookup(LookupRequest(title="alien", plot="short"))


@pytest.mark.parametrize("media_type", ["game", "Movie", "", None, "tv"])
def test_encode_lookup_drops_unrecognized_type(media_type):
    query = encode_lookup(LookupRequest(title="alien", type=media_type))
    assert "type=" not in query


@pytest.mark.parametrize("media_type", ["movie", "series", "episode"])
def test_encode_recognized_types(media_type):
    assert encode_lookup(LookupRequest(id="tt1", type=media_type)).endswith(
        f"&type={media_type}")
    assert encode_search(SearchRequest(search="x", type=media_type)).endswith(
        f"&type={media_type}")


def test_encode_lookup_parses_back():
    req = LookupRequest(title="the thing", year="1982", plot="full", type="movie")
    parsed = parse_qs(encode_lookup(req))
    assert parsed == {
        "t": ["the thing"], "y": ["1982"], "plot": ["full"], "type": ["movie"]
    }


# --- encode_search ---


def test_encode_search_escapes_term():
    assert encode_search(SearchRequest(search="toy story")) == "s=toy+story"


def test_encode_search_special_characters():
    query = encode_search(SearchRequest(search="star wars - a new hope"))
    assert " " not in query
    assert parse_qs(query) == {"s": ["star wars - a new hope"]}


def test_encode_search_page_is_sent_as_full():
    query = encode_search(SearchRequest(search="alien", page="2", year="1986"))
    assert query == "s=alien&page=full&y=1986"


def test_encode_search_drops_unrecognized_type():
    query = encode_search(SearchRequest(search="alien", type="game"))
    assert query == "s=alien"


def test_encode_search_parses_back():
    req = SearchRequest(search="toy story", year="1995", page="1", type="movie")
    assert parse_qs(encode_search(req)) == {
        "s": ["toy story"], "page": ["full"], "y": ["1995"], "type": ["movie"]
    }


# --- endpoints ---


@pytest.mark.parametrize("base", [
    "http://www.omdbapi.com", "http://www.omdbapi.com/", "http://www.omdbapi.com//"
])
def test_build_endpoint_trims_slashes(base):
    assert build_endpoint(base, "KEY") == "http://www.omdbapi.com/?apikey=KEY"


def test_mask_key_hides_api_key():
    masked = mask_key("http://www.omdbapi.com/?apikey=SECRET&t=shrek")
    assert "SECRET" not in masked
    assert masked == "http://www.omdbapi.com/?apikey=***&t=shrek"
    assert mask_key("http://example.com/") == "http://example.com/"


# --- fetch_body ---


def test_fetch_body_returns_raw_content():
    url = "http://www.omdbapi.com/?apikey=K&t=shrek"
    dummy = DummyClient({url: FakeResp(b'{"Title": "Shrek"}')})
    assert fetch_body(dummy, url) == b'{"Title": "Shrek"}'
    assert dummy.calls == [url]


def test_fetch_body_ignores_error_status():
    url = "http://www.omdbapi.com/?apikey=bad&t=shrek"
    body = b'{"Response":"False","Error":"Invalid API key!"}'
    dummy = DummyClient({url: FakeResp(body, status_code=401)})
    assert fetch_body(dummy, url) == body


def test_fetch_body_wraps_transport_errors():
    class BrokenClient:
        def get(self, url):
            raise httpx.ConnectError("connection refused")

    with pytest.raises(TransportError) as excinfo:
        fetch_body(BrokenClient(), "http://www.omdbapi.com/?apikey=K&t=x")
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


# --- decoding ---


def test_decode_lookup_maps_wire_names():
    body = b'''{
        "Title": "Shrek", "Year": "2001", "Type": "movie", "imdbID": "tt0126029",
        "DVD": "02 Nov 2001", "BoxOffice": "$268,698,888",
        "Ratings": [
            {"Source": "Internet Movie Database", "Value": "7.9/10"},
            {"Source": "Rotten Tomatoes", "Value": "88%"}
        ],
        "Response": "True"
    }'''
    res = decode_lookup(body)
    assert res.title == "Shrek"
    assert res.type == "movie"
    assert res.imdb_id == "tt0126029"
    assert res.dvd_release == "02 Nov 2001"
    assert res.box_office == "$268,698,888"
    assert [r.source for r in res.ratings] == [
        "Internet Movie Database", "Rotten Tomatoes"]
    assert res.is_error is False


def test_decode_lookup_serializes_lowercase_imdbid():
    res = decode_lookup(b'{"imdbID": "tt0126029", "Title": "Shrek"}')
    dumped = res.model_dump(by_alias=True, exclude_none=True)
    assert dumped["imdbid"] == "tt0126029"
    assert dumped["Title"] == "Shrek"


def test_decode_lookup_error_payload_is_data():
    res = decode_lookup(b'{"Response":"False","Error":"Movie not found!"}')
    assert res.is_error
    assert res.error == "Movie not found!"
    assert res.title is None
    assert res.ratings == ()


def test_wire_dict_drops_empty_values_and_success_marker():
    res = decode_search(b'''{"Search": [
        {"Title": "Alien", "Year": "1979", "imdbID": "tt0078748", "Type": "", "Poster": "N/A"}
    ], "totalResults": "1", "Response": "True", "Error": ""}''')
    assert res.wire_dict() == {
        "Search": [{"Title": "Alien", "Year": "1979", "imdbID": "tt0078748", "Poster": "N/A"}],
        "totalResults": "1",
    }


def test_wire_dict_keeps_error_fields():
    res = decode_lookup(b'{"Response":"False","Error":"Movie not found!","Title":""}')
    assert res.wire_dict() == {"Response": "False", "Error": "Movie not found!"}


def test_decode_search_results():
    body = b'''{"Search": [
        {"Title": "Toy Story", "Year": "1995", "imdbID": "tt0114709",
         "Type": "movie", "Poster": "N/A"},
        {"Title": "Toy Story 2", "Year": "1999", "imdbID": "tt0120363",
         "Type": "movie", "Poster": "N/A"}
    ], "totalResults": "2", "Response": "True"}'''
    res = decode_search(body)
    assert [r.imdb_id for r in res.search] == ["tt0114709", "tt0120363"]
    assert res.total_results == "2"
    dumped = res.model_dump(by_alias=True)
    assert dumped["Search"][0]["imdbID"] == "tt0114709"


@pytest.mark.parametrize("body", [b"", b"not json", b"[1, 2]", b'{"Search": "x"}'])
def test_decode_search_rejects_bad_bodies(body):
    with pytest.raises(DecodeError):
        decode_search(body)


def test_decode_lookup_rejects_non_json():
    with pytest.raises(DecodeError):
        decode_lookup(b"<html>Service Unavailable</html>")
