class DSSError(ValueError):
    """Base class for every failure raised by the DSS engine."""


class InvalidParameters(DSSError):
    pass


class GenerationExhausted(DSSError):
    """A bounded prime, parameter or nonce search ran out of attempts."""


class InvalidNonce(DSSError):
    pass


class NotInvertible(DSSError):
    def __init__(self, a, m):
        super().__init__(f"{a} is not invertible modulo {m}")
        self.a = a
        self.m = m


class NotRecoverable(DSSError):
    pass


class InvalidInput(DSSError):
    """A string could not be marshalled into a non-negative integer."""
