class DSMRError(Exception): ...


class IoFailure(DSMRError): ...


class FormatError(DSMRError): ...


class IncompleteTelegramError(DSMRError): ...


class UnsupportedExtensionError(DSMRError): ...


class MissingCorrelationError(DSMRError): ...


class EncodingError(DSMRError): ...


class RenderingFailure(DSMRError): ...


# Errors caused by the input document itself
INPUT_ERRORS: tuple[type[DSMRError], ...] = (
    FormatError,
    IncompleteTelegramError,
    UnsupportedExtensionError,
    MissingCorrelationError,
    EncodingError,
)


def require(condition: bool, message: str, exc: type[DSMRError] = FormatError):
    """Raise the given exception if condition is False."""
    if not condition:
        raise exc(message)
