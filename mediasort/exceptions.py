class MediaSortError(Exception):
    pass


class SameFileError(MediaSortError):
    """Source and destination are the same file; nothing to copy."""


class CopyError(MediaSortError):
    pass


class ConfigError(MediaSortError, ValueError):
    pass
