"""Exception hierarchy for postman-builder.

Rule compilation never raises; these cover the edges of a build: reading
descriptors and config, and uploading the result. The CLI reports any
``BuilderError`` as a usage-level failure.
"""


class BuilderError(Exception):
    """Base exception for all postman-builder errors."""


class DescriptorError(BuilderError):
    """Raised when an endpoint descriptor file cannot be read or validated."""


class ConfigError(BuilderError):
    """Raised for a missing, unreadable or invalid builder config."""


class UploadError(BuilderError):
    """Raised when one or more collection uploads failed.

    Args:
        failures: The ``UploadResult`` of every failed upload.
    """

    def __init__(self, failures: list):
        self.failures = failures
        details = "; ".join(f"{f.key}: {f.error}" for f in failures)
        super().__init__(f"{len(failures)} upload(s) failed: {details}")
