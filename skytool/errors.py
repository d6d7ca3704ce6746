class SkyError(Exception):
    pass


class ArchiveError(SkyError):
    """Archive-level failure. Always fatal for a run."""

    def __init__(self, path, message):
        super().__init__("%s: %s" % (path, message))
        self.path = path
        self.message = message


class ArchiveIOError(ArchiveError):
    pass


class NotAnArchive(ArchiveError):
    pass


class CorruptDirectory(ArchiveError):
    pass


class DecodeError(SkyError):
    pass


class DecompressError(SkyError):
    pass


class ConfigError(SkyError):
    pass


class CursorError(IndexError):
    pass
