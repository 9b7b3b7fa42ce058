"""
Command-line front end for the OMDb client.

    omdb --cmd query --title "star wars"
    omdb --cmd query --id tt0395789 --out
    omdb --cmd search --keywords "toy story"

The API key comes from ``--key`` or, failing that, ``OMDB_API_KEY``.
"""
import argparse
import json
import logging
import sys
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from pydantic import ValidationError

from .clients.omdb_client import OmdbClient
from .config import Settings
from .errors import OmdbError
from .schemas.omdb_schemas import (
    LookupRequest,
    LookupResponse,
    SearchRequest,
    SearchResponse,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CliOptions:
    cmd: str = ''
    key: str = ''
    id: str = ''
    title: str = ''
    keywords: str = ''
    out: bool = False
    year: Optional[str] = None
    type: Optional[str] = None
    plot: Optional[str] = None
    timeout: Optional[float] = None


def parse_args(argv: Optional[List[str]] = None) -> CliOptions:
    parser = argparse.ArgumentParser(
        prog='omdb', description='Query the OMDb API.')
    parser.add_argument('--cmd', default='', help='query or search')
    parser.add_argument('--key', default='', help='specify an OMDb API key')
    parser.add_argument('--id', default='', help='query by IMDB ID')
    parser.add_argument('--title', default='', help='query by movie title')
    parser.add_argument('--keywords', default='', help='search keywords')
    parser.add_argument('--out', action='store_true',
                        help='write output to a file')
    parser.add_argument('--year', help='restrict to a release year')
    parser.add_argument('--type', help='movie, series or episode')
    parser.add_argument('--plot', choices=['short', 'full'],
                        help='plot length for queries')
    parser.add_argument('--timeout', type=float,
                        help='request timeout in seconds')
    args = parser.parse_args(argv)
    return CliOptions(**vars(args))


def output_filename(options: CliOptions) -> str:
    """Name of the --out file: id, title and keywords run together."""
    title = options.title.replace(' ', '')
    keywords = options.keywords.replace(' ', '')
    return f"{options.id.strip()}{title.strip()}{keywords.strip()}.json"


def display(result: Union[LookupResponse, SearchResponse], options: CliOptions) -> None:
    raw = json.dumps(result.wire_dict(), indent=1, ensure_ascii=False)
    print(raw)
    if options.out:
        with open(output_filename(options), 'w') as f:
            f.write(raw)


def _default_factory(settings: Settings, key: str, timeout: Optional[float]) -> OmdbClient:
    if timeout is not None:
        settings = settings.model_copy(update={'OMDB_TIMEOUT': timeout})
    return OmdbClient.from_settings(settings, api_key=key)


def run(
    options: CliOptions,
    settings: Optional[Settings] = None,
    client_factory: Callable[[Settings, str, Optional[float]], OmdbClient] = _default_factory
) -> int:
    """
    Execute one CLI command.

    :param options: Parsed command-line options.
    :param settings: Settings used for the key fallback and endpoints.
    :param client_factory: Builds the client from settings, key and timeout.
    :return: Process exit status.
    """
    if settings is None:
        settings = Settings()
    secret = options.key.strip() or settings.OMDB_API_KEY.strip()
    if not secret:
        print("please specify an API key (either export 'OMDB_API_KEY' "
              "or specify '--key' as command-line argument)")
        return 1

    logger.info("submitting %s (title=%r id=%r keywords=%r)",
                options.cmd, options.title, options.id, options.keywords)

    try:
        with client_factory(settings, secret, options.timeout) as client:
            if options.cmd == 'query':
                result = client.lookup(LookupRequest(
                    id=options.id, title=options.title, year=options.year,
                    type=options.type, plot=options.plot))
            elif options.cmd == 'search':
                result = client.search(SearchRequest(
                    search=options.keywords, year=options.year,
                    type=options.type))
            else:
                print(f"unrecognized command: {options.cmd}")
                return 1
            display(result, options)
    except (OmdbError, ValidationError, OSError) as e:
        print(e)
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    settings = Settings()
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), stream=sys.stderr,
                        format='%(asctime)s - %(levelname)s - %(message)s')
    sys.exit(run(parse_args(argv), settings))


if __name__ == '__main__':
    main()
