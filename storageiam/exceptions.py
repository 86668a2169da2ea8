from typing import Optional


class IamError(Exception):
    pass


class ParseError(IamError):
    def __init__(self, identifier: str, formats):
        self.identifier = identifier
        self.formats = list(formats)
        super().__init__(f'Import id {identifier!r} doesn\'t match any of the accepted formats: {self.formats}')


class WriteError(IamError):
    pass


class ConversionError(IamError):
    pass


class _RequestError(IamError):
    verb: str = ''

    def __init__(self, description: str, cause: BaseException):
        self.description = description
        self.cause = cause
        super().__init__(f'Error {self.verb} IAM policy for {description}: {cause}')

    @property
    def status(self) -> Optional[int]:
        return getattr(self.cause, 'status', None)


class FetchError(_RequestError):
    verb = 'retrieving'


class UpdateError(_RequestError):
    verb = 'setting'
