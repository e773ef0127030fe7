class CivicReporterError(Exception):
    """Base class for every error raised by the service."""


# --- REMOTE CALL FAILURES (always converted to a fallback) ---
class NetworkFailure(CivicReporterError):
    pass


class ParseFailure(CivicReporterError):
    """The remote model answered, but not with the JSON we asked for."""


# --- USER FACING ---
class ValidationFailure(CivicReporterError):
    status_code = 400


class AuthFailure(CivicReporterError):
    status_code = 401


class Forbidden(CivicReporterError):
    status_code = 403


class NotFound(CivicReporterError):
    status_code = 404
