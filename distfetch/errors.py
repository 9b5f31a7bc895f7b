"""Exception types raised by distfetch."""

from __future__ import annotations


class DistFetchError(Exception):
    """Base class for all distfetch errors."""


class OutputDirectoryError(DistFetchError):
    """The version's output directory could not be created at startup."""

    def __init__(self, path: object, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to create output directory {path}: {cause}")


class DownloadError(DistFetchError):
    """A single artifact could not be downloaded.

    Carries the file name and the underlying cause so the pipeline can report
    it and move on to the next file.
    """

    def __init__(self, file_name: str, cause: BaseException) -> None:
        self.file_name = file_name
        self.cause = cause
        super().__init__(f"failed to download {file_name}: {cause}")
