"""Error taxonomy for EPUB parsing.

Every error is terminal for the call that raised it. ``message`` is the
single human-readable text shown to users; details go to the log.
"""


class ParseError(Exception):
    """Base class for all parser failures."""

    code = "parse_error"
    default_message = "Failed to parse EPUB"

    def __init__(self, detail: str | None = None):
        self.detail = detail
        super().__init__(f"{self.default_message}: {detail}" if detail else self.default_message)

    @property
    def message(self) -> str:
        return self.default_message


class NotAnArchive(ParseError):
    code = "not_an_archive"
    default_message = "File is not a ZIP archive"


class ArchiveTooLarge(ParseError):
    code = "archive_too_large"
    default_message = "EPUB file is too large"


class MissingContainer(ParseError):
    code = "missing_container"
    default_message = "META-INF/container.xml is missing"


class MissingRootfile(ParseError):
    code = "missing_rootfile"
    default_message = "container.xml does not declare a package document"


class InvalidMimetype(ParseError):
    code = "invalid_mimetype"
    default_message = "mimetype entry is not application/epub+zip"


class MalformedPackageDocument(ParseError):
    code = "malformed_package_document"
    default_message = "Package document could not be parsed"


class ResourceNotFound(ParseError):
    code = "resource_not_found"
    default_message = "Resource not found in EPUB"


class IoError(ParseError):
    code = "io_error"
    default_message = "Could not read EPUB file"
