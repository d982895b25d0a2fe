from typing import Annotated

from pydantic import PlainSerializer


class TokenSwapClientException(Exception):
    pass


class UnauthorizedException(TokenSwapClientException):
    pass


class PoolNotFoundException(TokenSwapClientException):
    pass


class InvalidPoolException(TokenSwapClientException):
    pass


class InvalidAccountException(TokenSwapClientException):
    pass


class FeePayerUnavailableException(TokenSwapClientException):
    pass


class TransactionSimulationException(TokenSwapClientException):
    def __init__(self, err, logs: list[str] | None = None, program_error=None):
        message = f"Transaction simulation failed: {err}"
        if program_error is not None:
            message += f" ({program_error.name}: {program_error.msg})"
        super().__init__(message)
        self.err = err
        self.logs = logs or []
        self.program_error = program_error


class FeeRelayerClientException(TokenSwapClientException):
    pass


IntString = Annotated[int, PlainSerializer(lambda x: str(x), return_type=str)]
