import logging
import requests
from requests.adapters import HTTPAdapter
from requests.cookies import RequestsCookieJar
from http.cookiejar import CookieJar
from urllib.parse import urlparse
from typing import Dict, Mapping

from ..constants import USER_AGENT, LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


def create_session(user_agent: str = USER_AGENT) -> requests.Session:
    """
    Create a requests session that identifies itself with the given user agent.

    Requests are sent once: the mounted adapters do not retry.

    Args:
        user_agent (str): Browser identity string

    Returns:
        requests.Session: Configured session, usable as a context manager
    """
    session = requests.Session()
    session.headers.update({'User-Agent': user_agent})

    adapter = HTTPAdapter(max_retries=0)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    logger.debug("HTTP session created")
    return session


def _host_and_path(url: str):
    parsed = urlparse(url)
    if not parsed.hostname:
        raise ValueError(f"URL has no host: {url}")
    return parsed.hostname.lower(), parsed.path or "/"


def _domain_matches(host: str, cookie_domain: str) -> bool:
    domain = cookie_domain.lstrip('.').lower()
    return host == domain or host.endswith('.' + domain)


def _path_matches(path: str, cookie_path: str) -> bool:
    if not cookie_path or cookie_path == '/':
        return True
    return path == cookie_path or path.startswith(cookie_path.rstrip('/') + '/')


def cookies_for_url(jar: CookieJar, url: str) -> Dict[str, str]:
    """
    Collect the cookies a jar would attach to a request for the URL.

    Args:
        jar (CookieJar): Cookie store to read
        url (str): Target URL

    Returns:
        dict: Cookie names mapped to their values
    """
    host, path = _host_and_path(url)
    cookies = {}
    for cookie in jar:
        if _domain_matches(host, cookie.domain) and _path_matches(path, cookie.path):
            cookies[cookie.name] = cookie.value
    return cookies


def set_cookies_for_url(jar: RequestsCookieJar, url: str, cookies: Mapping[str, str]) -> None:
    """
    Store name/value pairs as cookies scoped to the URL's host.

    A cookie with the same name for that host is replaced; others are kept.

    Args:
        jar (RequestsCookieJar): Cookie store to update
        url (str): URL whose host scopes the cookies
        cookies (dict): Cookie names mapped to their values
    """
    host, _ = _host_and_path(url)
    for name, value in cookies.items():
        jar.set(name, value, domain=host, path='/')
