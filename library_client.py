"""Library API client.

A thin wrapper around the Library API's GraphQL endpoint built on the
``requests`` library.  Every high level method sends one GraphQL
document and returns a tuple ``(data, error)``: on success ``data``
holds the decoded result and ``error`` is ``None``; on failure
``data`` is ``None`` (or an empty list for listings) and ``error`` is
a dictionary with ``status_code``, ``code`` and ``message`` keys.

Available operations:

* :meth:`book_count`, :meth:`author_count`
* :meth:`all_books`, :meth:`all_authors`, :meth:`find_books`
* :meth:`add_book`, :meth:`edit_author`
* :meth:`create_user`, :meth:`login`, :meth:`me`

After a successful :meth:`login` the client stores the token and sends
it as ``Authorization: Bearer <token>`` with all later requests.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]

BOOK_FIELDS = "id title published genres author { id name born bookCount }"
AUTHOR_FIELDS = "id name born bookCount"
USER_FIELDS = "id username favoriteGenre"


class LibraryAPI:
    """Client for the Library API GraphQL endpoint."""

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:4000``.
                The GraphQL endpoint is ``<base_url>/graphql``.
            token: Optional token from a previous login.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.endpoint = f"{self.base_url}/graphql"
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level helpers
    # ------------------------------------------------------------------
    def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Result:
        """Send a GraphQL document and return ``(data, error)``.

        GraphQL errors are reported through ``error`` using the first
        error's message and its ``extensions.code``.
        """
        headers: Dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            logger.debug("Sending GraphQL request to %s", self.endpoint)
            response = self.session.post(
                self.endpoint,
                json={"query": query, "variables": variables or {}},
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = exc.response.text if exc.response is not None else str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "code": None, "message": message or str(exc)}
        except requests.RequestException as exc:
            # Includes invalid JSON bodies (requests.JSONDecodeError)
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "code": None, "message": str(exc)}

        errors = body.get("errors")
        if errors:
            first = errors[0]
            code = (first.get("extensions") or {}).get("code")
            logger.warning("GraphQL error (%s): %s", code, first.get("message"))
            return None, {"status_code": response.status_code, "code": code, "message": first.get("message", "")}
        return body.get("data"), None

    def _field(self, query: str, field: str, variables: Optional[Dict[str, Any]] = None) -> Result:
        data, error = self.execute(query, variables)
        if error:
            return None, error
        return (data or {}).get(field), None

    def _listing(self, query: str, field: str, variables: Optional[Dict[str, Any]] = None) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._field(query, field, variables)
        if error:
            return [], error
        return data or [], None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def book_count(self) -> Result:
        return self._field("query { bookCount }", "bookCount")

    def author_count(self) -> Result:
        return self._field("query { authorCount }", "authorCount")

    def all_books(self, author: Optional[str] = None, genre: Optional[str] = None):
        query = (
            "query AllBooks($author: String, $genre: String) "
            f"{{ allBooks(author: $author, genre: $genre) {{ {BOOK_FIELDS} }} }}"
        )
        return self._listing(query, "allBooks", {"author": author, "genre": genre})

    def all_authors(self, author: Optional[str] = None):
        query = f"query AllAuthors($author: String) {{ allAuthors(author: $author) {{ {AUTHOR_FIELDS} }} }}"
        return self._listing(query, "allAuthors", {"author": author})

    def find_books(self, title: Optional[str] = None, author: Optional[str] = None, genre: Optional[str] = None):
        """Search books; every given criterion must match."""
        query = (
            "query FindBooks($title: String, $author: String, $genre: String) "
            f"{{ findBooks(title: $title, author: $author, genre: $genre) {{ {BOOK_FIELDS} }} }}"
        )
        return self._listing(query, "findBooks", {"title": title, "author": author, "genre": genre})

    def me(self) -> Result:
        return self._field(f"query {{ me {{ {USER_FIELDS} }} }}", "me")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def add_book(
        self,
        title: str,
        author_name: str,
        published: Optional[int] = None,
        genres: Optional[List[str]] = None,
    ) -> Result:
        query = (
            "mutation AddBook($title: String!, $authorName: String!, $published: Int, $genres: [String!]) "
            "{ addBook(title: $title, authorName: $authorName, published: $published, genres: $genres) "
            f"{{ {BOOK_FIELDS} }} }}"
        )
        variables = {"title": title, "authorName": author_name, "published": published, "genres": genres}
        return self._field(query, "addBook", variables)

    def edit_author(self, name: str, set_born_to: int) -> Result:
        query = (
            "mutation EditAuthor($name: String!, $setBornTo: Int) "
            f"{{ editAuthor(name: $name, setBornTo: $setBornTo) {{ {AUTHOR_FIELDS} }} }}"
        )
        return self._field(query, "editAuthor", {"name": name, "setBornTo": set_born_to})

    def create_user(self, username: str, favorite_genre: Optional[str] = None, password: Optional[str] = None) -> Result:
        query = (
            "mutation CreateUser($username: String!, $favoriteGenre: String, $password: String) "
            "{ createUser(username: $username, favoriteGenre: $favoriteGenre, password: $password) "
            f"{{ {USER_FIELDS} }} }}"
        )
        variables = {"username": username, "favoriteGenre": favorite_genre, "password": password}
        return self._field(query, "createUser", variables)

    def login(self, username: str, password: str) -> Result:
        """Log in and remember the token for subsequent requests."""
        query = "mutation Login($username: String!, $password: String!) { login(username: $username, password: $password) { value } }"
        data, error = self._field(query, "login", {"username": username, "password": password})
        if error:
            return None, error
        self.token = data["value"] if data else None
        return self.token, None
