"""Map raised exceptions to the login error taxonomy.

Exceptions from message construction, the signature dependency and the chain
client all end up as one of two LoginError kinds. The original exception text
is kept as the error message.
"""

import binascii

from pydantic import ValidationError

from farcaster_login.services.exceptions import (
    LoginError,
    NetworkUnavailable,
    ValidationFailure,
)

# Malformed input: bad hex, bad address, bad field types
MALFORMED_INPUT_ERRORS: tuple[type[Exception], ...] = (
    ValidationError,
    binascii.Error,
    ValueError,
    TypeError,
)


def classify_error(error: Exception, *, network: bool = False) -> LoginError:
    """Classify an exception as ValidationFailure or NetworkUnavailable.

    Args:
        error: The raised exception
        network: True if the exception came out of a chain client call. Every
                 rejected chain call is a network failure regardless of type.

    Returns:
        LoginError with str(error) as its message
    """
    if isinstance(error, LoginError):
        return error
    if network:
        return NetworkUnavailable(str(error))
    if isinstance(error, MALFORMED_INPUT_ERRORS):
        return ValidationFailure(str(error))
    return NetworkUnavailable(str(error))
