# core/search/google_books.py
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse, urlencode, parse_qsl, urlunparse

import pydantic
import requests

from core import config
from core.errors import NetworkError
from core.models.library import SearchCandidate

logger = logging.getLogger(__name__)

IMAGE_SIZES = ['extraLarge', 'large', 'medium', 'small', 'thumbnail', 'smallThumbnail']
GOOGLE_IMAGE_HOSTS = ('googleusercontent.com', 'books.google.com')


class GoogleBooksClient:
    """Search collaborator backed by the public Google Books volumes API."""

    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None,
                 timeout: Optional[float] = None):
        self.base_url = base_url or config.GOOGLE_BOOKS_URL
        self.api_key = api_key if api_key is not None else config.GOOGLE_BOOKS_API_KEY
        self.timeout = timeout or config.SEARCH_TIMEOUT

    def search(self, query: str, max_results: int = config.SEARCH_MAX_RESULTS) -> List[SearchCandidate]:
        """
        Search for books matching a free-text query.

        Args:
            query: Search terms. Blank queries return no results without a request.
            max_results: Maximum number of volumes to ask for

        Returns:
            Candidates in provider relevance order

        Raises:
            NetworkError: On transport failure, a non-2xx reply or an unreadable body
        """
        term = (query or '').strip()
        if not term:
            return []

        params = {'q': term, 'maxResults': str(max_results)}
        if self.api_key:
            params['key'] = self.api_key

        try:
            response = requests.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            logger.warning("Book search failed for %r: %s", term, e)
            raise NetworkError(f"Failed to search books: {e}") from e
        except ValueError as e:
            logger.warning("Book search returned invalid JSON for %r", term)
            raise NetworkError("Failed to search books: invalid response") from e

        items = payload.get('items') if isinstance(payload, dict) else None
        if not isinstance(items, list):
            return []
        candidates = []
        for item in items:
            if not isinstance(item, dict):
                continue
            try:
                candidates.append(normalize_volume(item))
            except pydantic.ValidationError as e:
                logger.warning("Skipping unreadable volume %r: %s", item.get('id'), e)
        return candidates


def normalize_volume(item: Dict[str, Any]) -> SearchCandidate:
    """Map a Google Books volume onto a SearchCandidate, defaulting missing fields."""
    info = item.get('volumeInfo') or {}
    return SearchCandidate(
        id=str(item.get('id') or ''),
        title=info.get('title') or 'Untitled',
        subtitle=info.get('subtitle') or '',
        authors=list(info.get('authors') or []),
        image=pick_best_image(info.get('imageLinks')),
        published_date=info.get('publishedDate') or None,
        description=info.get('description') or '',
        page_count=info.get('pageCount') or None,
        categories=list(info.get('categories') or []),
        language=info.get('language') or '',
        preview_link=info.get('previewLink') or '',
        info_link=info.get('infoLink') or '',
    )


def pick_best_image(image_links: Optional[Dict[str, str]]) -> str:
    """Largest available cover, forced to https.

    Google-hosted covers get zoom=2 and lose the fake page curl (edge=curl).
    """
    if not image_links:
        return ''
    url = next((image_links[size] for size in IMAGE_SIZES if image_links.get(size)), '')
    if not url:
        return ''
    if url.startswith('http://'):
        url = 'https://' + url[len('http://'):]

    parsed = urlparse(url)
    if not any(host in (parsed.hostname or '') for host in GOOGLE_IMAGE_HOSTS):
        return url

    query = []
    for key, value in parse_qsl(parsed.query, keep_blank_values=True):
        if key == 'edge':
            continue
        query.append((key, '2' if key == 'zoom' else value))
    return urlunparse(parsed._replace(query=urlencode(query)))
