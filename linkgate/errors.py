"""Error taxonomy for the link gateway core."""


class LinkGateError(Exception):
    """Base class for all link gateway errors."""


class InvalidURL(LinkGateError):
    """Target URL is not an absolute http(s) URL."""


class InvalidCodeFormat(LinkGateError):
    """Requested code is not 6-8 ASCII letters or digits."""


class CodeConflict(LinkGateError):
    """Requested code is already taken."""


class AllocationExhausted(LinkGateError):
    """No free generated code was found within the attempt bound."""


class NotFound(LinkGateError):
    """No link exists for the given code."""


class StoreError(LinkGateError):
    """The link store failed (connectivity, timeout, unexpected constraint)."""


class StoreTimeout(StoreError):
    """The link store did not answer within the configured timeout."""


class DuplicateCodeError(StoreError):
    """Raised by stores when an insert violates the code uniqueness constraint.

    The allocator recovers this locally; callers of the public operations never
    see it.
    """

    def __init__(self, code: str):
        super().__init__(f"Code '{code}' violates uniqueness constraint")
        self.code = code


class StoreUnavailable(StoreError):
    """No connection could be obtained, so the statement was never sent.

    Unlike other store errors, the operation is known not to have been
    applied and is safe to retry.
    """
