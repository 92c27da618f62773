from typing import Optional


class KlipperConfError(Exception):
    '''
        Base class for every hard failure raised by the config merge helpers.
    '''


class InvalidInput(KlipperConfError, ValueError):
    '''
        Raised for an empty or invalid section name, or a malformed set of desired fields.
    '''


class IOFailure(KlipperConfError, OSError):
    '''
        Raised when a config file can not be read or written.
        The original OSError is always chained as __cause__.
    '''

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.message: str = message
        self.path: Optional[str] = path

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message} ({self.path})"


class MalformedSection(UserWarning):
    '''
        Advisory warning, the target section occurs more than once in a document.
        Only the first occurrence gets processed, the rest is left as is.
    '''
