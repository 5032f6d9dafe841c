from typing import Optional


class PagegrabError(Exception):
    """Base class for every error raised by pagegrab."""


class FetchError(PagegrabError):
    """The browser session could not load or serialize a page."""


class ChallengeError(PagegrabError):
    """The anti-bot challenge could not be solved for a URL."""


class DownloadError(PagegrabError):
    """A file download failed at a given stage."""

    def __init__(self, message: str, stage: str, url: str, status_code: Optional[int] = None):
        """
        Args:
            message (str): Human readable description
            stage (str): Failing stage ('create', 'request', 'transport',
                'status', 'copy' or 'resolve')
            url (str): URL of the file being downloaded
            status_code (int, optional): HTTP status for the 'status' stage
        """
        super().__init__(message)
        self.stage = stage
        self.url = url
        self.status_code = status_code


class ConfigError(PagegrabError, ValueError):
    """The configuration file is malformed."""
