"""Download side effects triggered for each purchased line.

A downloader is any callable taking a purchased line and returning a
``Download``. ``LinkDownloads`` hands the links back to the client, which
starts the downloads itself; ``HttpDownloader`` fetches the images to a
local directory.
"""

import os
from dataclasses import dataclass
from pathlib import Path

import requests
import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Download:
    artwork_id: str
    filename: str
    url: str | None = None
    path: str | None = None


class DownloadError(Exception):
    def __init__(self, artwork_id, reason):
        self.artwork_id = artwork_id
        self.reason = reason
        super().__init__(f"Download of artwork {artwork_id} failed: {reason}")


class LinkDownloads:
    """Return the image link of every line for the client to download."""

    def __call__(self, line):
        if not line.image:
            raise DownloadError(line.artwork_id, "artwork has no image")
        return Download(artwork_id=line.artwork_id, filename=line.filename, url=line.image)


class HttpDownloader:
    """Fetch every line's image into ``directory``."""

    def __init__(self, directory: str | os.PathLike, session: requests.Session | None = None, timeout=None):
        self.directory = Path(directory)
        self.session = session or requests.Session()
        self.timeout = timeout

    @staticmethod
    def local_name(line):
        """File name on disk, prefixed with the artwork id so equal titles do not collide."""
        artwork_id = str(line.artwork_id).replace("/", "_").replace("\\", "_")
        return f"{artwork_id}-{Path(line.filename).name}"

    def __call__(self, line):
        if not line.image:
            raise DownloadError(line.artwork_id, "artwork has no image")

        try:
            response = self.session.get(line.image, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise DownloadError(line.artwork_id, str(exc)) from exc

        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / self.local_name(line)
        target.write_bytes(response.content)
        logger.info("Artwork downloaded", artwork_id=line.artwork_id, path=str(target))
        return Download(artwork_id=line.artwork_id, filename=line.filename, url=line.image, path=str(target))
