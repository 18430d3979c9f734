from __future__ import annotations


class AnalysisError(Exception):
    """Base for every failure that ends an analysis request.

    ``public_message`` is safe to show to the caller. The exception's own
    ``str()`` may carry internal detail (resolved IPs, resolver errors) and is
    only meant for the server log.
    """

    status_code = 500
    public_message = "An unexpected error occurred."

    def __init__(self, detail: str | None = None, *, public_message: str | None = None):
        super().__init__(detail or self.public_message)
        if public_message is not None:
            self.public_message = public_message


# Validation-side failures: nothing was fetched.


class URLRejected(AnalysisError):
    status_code = 400
    public_message = "The URL is not allowed."


class MalformedURL(URLRejected):
    public_message = "Please provide a valid http(s) URL."


class ProtocolNotAllowed(URLRejected):
    public_message = "Only http and https URLs can be analyzed."


class PortNotAllowed(URLRejected):
    public_message = "URLs on this port cannot be analyzed."


class BlockedAddress(URLRejected):
    public_message = "This address points to a private or internal network and cannot be analyzed."


class ResolutionFailure(URLRejected):
    public_message = "Website not found. Please check the URL and try again."


# Network-side failures: a request was attempted.


class FetchFailed(AnalysisError):
    status_code = 502
    public_message = "Failed to fetch website."


class NetworkError(FetchFailed):
    public_message = "Failed to fetch website. The website may be down."


class FetchTimeout(FetchFailed):
    status_code = 504
    public_message = "Request timed out. The website is taking too long to respond."


class ContentTooLarge(FetchFailed):
    public_message = "The page is too large to analyze."


class UnsupportedContentType(FetchFailed):
    public_message = "The URL does not point to an HTML page."


class TooManyRedirects(FetchFailed):
    public_message = "The website redirected too many times."


class UpstreamHTTPError(FetchFailed):
    def __init__(self, status: int, detail: str | None = None):
        self.upstream_status = status
        if status == 403:
            message = "Access denied. The website is blocking our analysis tool."
        elif status == 404:
            message = "Page not found. Please check the URL."
        else:
            message = f"Website responded with HTTP {status}."
        super().__init__(detail or f"upstream status {status}", public_message=message)
