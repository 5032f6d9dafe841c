"""Render pages in a headless browser, pass Cloudflare challenges and download files."""

from .constants import USER_AGENT, DEVICE_NAME, FILE_EXTENSION
from .errors import PagegrabError, FetchError, ChallengeError, DownloadError, ConfigError
from .fetcher import PageFetcher, fetch
from .bypass import ChallengeBypasser, bypass_challenge
from .downloader import FileDownloader, download_file

__version__ = "0.1.0"

__all__ = [
    'USER_AGENT',
    'DEVICE_NAME',
    'FILE_EXTENSION',
    'PagegrabError',
    'FetchError',
    'ChallengeError',
    'DownloadError',
    'ConfigError',
    'PageFetcher',
    'fetch',
    'ChallengeBypasser',
    'bypass_challenge',
    'FileDownloader',
    'download_file',
]
