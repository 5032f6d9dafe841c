"""
File downloader.

Files are named after a caller supplied label plus a nanosecond timestamp,
e.g. ``comte_de_montecristo_1581064034469619222.torrent``. The label is only
stripped of spaces; it is not otherwise escaped.
"""

import os
import time
import logging
from typing import Optional

import requests

from .constants import USER_AGENT, FILE_EXTENSION, LOGGER_NAME
from .errors import DownloadError

logger = logging.getLogger(LOGGER_NAME)

CHUNK_SIZE = 64 * 1024


class FileDownloader:
    """Download files through an existing requests session."""

    def __init__(self, download_dir: Optional[str] = None, user_agent: str = USER_AGENT,
                 extension: str = FILE_EXTENSION):
        """
        Initialize the downloader.

        Args:
            download_dir (str, optional): Directory receiving the files,
                defaults to the current working directory at download time
            user_agent (str): Identity sent as the User-Agent header
            extension (str): Extension appended to every file name
        """
        self.download_dir = download_dir
        self.user_agent = user_agent
        self.extension = extension

    @staticmethod
    def build_filename(label: str, extension: str = FILE_EXTENSION) -> str:
        """
        Build a file name from a label and the current time in nanoseconds.

        Args:
            label (str): Descriptive label, typically the search terms
            extension (str): File extension including the leading dot

        Returns:
            str: The file name
        """
        return f"{label.replace(' ', '_')}_{time.time_ns()}{extension}"

    def download(self, file_url: str, label: str, session: requests.Session) -> str:
        """
        Download a file to disk and return its absolute path.

        Args:
            file_url (str): Direct URL of the file
            label (str): Label used to name the file
            session (requests.Session): Session used for the request

        Returns:
            str: Absolute path of the written file

        Raises:
            DownloadError: If any stage fails; ``stage`` names which one
        """
        path = self.build_filename(label, self.extension)

        try:
            path = os.path.join(self.download_dir or os.getcwd(), path)
            out = open(path, 'xb')
        except (OSError, ValueError) as e:
            raise DownloadError(f"could not create the file named {path}: {e}",
                                stage='create', url=file_url) from e

        completed = False
        try:
            with out:
                self._fetch_into(file_url, session, out)
            completed = True
        finally:
            if not completed:
                self._discard(path)

        try:
            absolute = os.path.abspath(path)
        except (OSError, ValueError) as e:
            self._discard(path)
            raise DownloadError(f"could not resolve the path of the saved file {path}: {e}",
                                stage='resolve', url=file_url) from e

        logger.debug(f"Downloaded {file_url} to {absolute}")
        return absolute

    def _fetch_into(self, file_url: str, session: requests.Session, out) -> None:
        try:
            request = session.prepare_request(
                requests.Request('GET', file_url, headers={'User-Agent': self.user_agent})
            )
        except (requests.RequestException, ValueError) as e:
            raise DownloadError(f"could not create request for {file_url}: {e}",
                                stage='request', url=file_url) from e

        try:
            response = session.send(request, stream=True)
        except requests.RequestException as e:
            raise DownloadError(f"could not download the file {file_url}: {e}",
                                stage='transport', url=file_url) from e

        with response:
            if response.status_code != 200:
                raise DownloadError(
                    f"status code error: {response.status_code} {response.reason}",
                    stage='status', url=file_url, status_code=response.status_code)

            written = 0
            try:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    out.write(chunk)
                    written += len(chunk)
            except (requests.RequestException, OSError) as e:
                raise DownloadError(f"could not save the file {file_url} to disk: {e}",
                                    stage='copy', url=file_url) from e

            expected = response.headers.get('Content-Length')
            # Compressed bodies are decoded, so their length cannot be compared
            if expected and expected.isdigit() and not response.headers.get('Content-Encoding'):
                if written != int(expected):
                    raise DownloadError(
                        f"could not save the file {file_url} to disk: "
                        f"received {written} of {expected} bytes",
                        stage='copy', url=file_url)

    @staticmethod
    def _discard(path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove incomplete file {path}: {e}")


def download_file(file_url: str, label: str, session: requests.Session,
                  download_dir: Optional[str] = None, user_agent: str = USER_AGENT,
                  extension: str = FILE_EXTENSION) -> str:
    """Download file_url through session and return the absolute path of the saved file."""
    downloader = FileDownloader(download_dir=download_dir, user_agent=user_agent, extension=extension)
    return downloader.download(file_url, label, session)
