"""
Cloudflare challenge bypass.

The clearance cookies obtained by an external solver are written into the
caller's requests session, so later requests through that session to the same
host are not challenged again. The session passed in is modified in place and
returned for chaining.
"""

import logging
from typing import Callable, Dict, Mapping, Optional

import cloudscraper
import requests

from .constants import USER_AGENT, CHALLENGE_COOKIES, LOGGER_NAME
from .errors import ChallengeError
from .utils.http import cookies_for_url, set_cookies_for_url

logger = logging.getLogger(LOGGER_NAME)

# (url, user_agent, auxiliary token) -> cookie name/value pairs
Solver = Callable[[str, str, str], Mapping[str, str]]


def solve_with_cloudscraper(url: str, user_agent: str, token: str = "") -> Dict[str, str]:
    """
    Pass the Cloudflare challenge for a URL with cloudscraper.

    Args:
        url (str): Challenged URL
        user_agent (str): Identity the clearance cookies are bound to
        token (str): Auxiliary token; unused by cloudscraper

    Returns:
        dict: Clearance cookie names mapped to their values, empty when
            Cloudflare set none
    """
    # Headers and TLS ciphers follow the custom identity
    scraper = cloudscraper.create_scraper(browser={'custom': user_agent})
    try:
        scraper.get(url)
        found = cookies_for_url(scraper.cookies, url)
    finally:
        scraper.close()
    return {name: value for name, value in found.items() if name in CHALLENGE_COOKIES}


class ChallengeBypasser:
    """Inject solved challenge cookies into existing sessions."""

    def __init__(self, user_agent: str = USER_AGENT, solver: Optional[Solver] = None):
        """
        Args:
            user_agent (str): Identity string handed to the solver
            solver (callable, optional): Challenge solver, defaults to cloudscraper
        """
        self.user_agent = user_agent
        self.solver = solver or solve_with_cloudscraper

    def bypass(self, url: str, session: requests.Session) -> requests.Session:
        """
        Solve the challenge for a URL and add the resulting cookies to a session.

        The solved cookies are added to the session's jar, which performs the
        union itself: existing cookies for the URL are kept, and a solved cookie
        replaces an existing one only when it has the same name, host and path.
        The existing set is read for logging only.

        Args:
            url (str): Challenged URL
            session (requests.Session): Session whose cookie jar is updated in place

        Returns:
            requests.Session: The same session object

        Raises:
            ChallengeError: If the session has no cookie jar, the solver fails
                or the solver returns no cookies
        """
        jar = getattr(session, 'cookies', None)
        if jar is None:
            raise ChallengeError(f"session has no cookie jar to receive the cookies for {url}")

        try:
            existing = cookies_for_url(jar, url)
        except ValueError as e:
            raise ChallengeError(f"invalid challenge URL {url!r}: {e}") from e

        try:
            solved = self.solver(url, self.user_agent, "")
        except Exception as e:
            raise ChallengeError(f"could not solve the challenge for {url}: {e}") from e

        if not solved:
            raise ChallengeError(f"challenge solver returned no cookies for {url}")

        set_cookies_for_url(jar, url, solved)
        logger.debug(
            f"Successfully added {len(solved)} challenge cookies to client "
            f"({len(existing)} already present for {url})"
        )
        return session


def bypass_challenge(url: str, session: requests.Session, solver: Optional[Solver] = None,
                     user_agent: str = USER_AGENT) -> requests.Session:
    """Solve the challenge for url and add its cookies to session in place."""
    return ChallengeBypasser(user_agent=user_agent, solver=solver).bypass(url, session)
