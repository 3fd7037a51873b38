"""
API error helpers to reduce code duplication in routes.

Every error leaves the API as a JSON body of the form {"error": "..."} so that
the chat client can show the message to the user.

Usage:
    from astro_assistant.utils.exceptions import raise_bad_request, raise_rate_limited

    raise_bad_request("No messages provided")
    raise_rate_limited()
"""

from typing import NoReturn

from fastapi import status


class APIError(Exception):
    """Error rendered by the app as {"error": detail} with the given status."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


def raise_bad_request(detail: str) -> NoReturn:
    """Raise HTTP 400 Bad Request."""
    raise APIError(status.HTTP_400_BAD_REQUEST, detail)


def raise_payment_required(
    detail: str = "Payment required, please add funds to your AI workspace.",
) -> NoReturn:
    """Raise HTTP 402 Payment Required."""
    raise APIError(status.HTTP_402_PAYMENT_REQUIRED, detail)


def raise_rate_limited(
    detail: str = "Rate limits exceeded, please try again later.",
) -> NoReturn:
    """Raise HTTP 429 Too Many Requests."""
    raise APIError(status.HTTP_429_TOO_MANY_REQUESTS, detail)


def raise_bad_gateway(detail: str = "AI gateway error") -> NoReturn:
    """Raise HTTP 502 Bad Gateway."""
    raise APIError(status.HTTP_502_BAD_GATEWAY, detail)


def raise_internal_error(detail: str = "Internal server error") -> NoReturn:
    """Raise HTTP 500 Internal Server Error."""
    raise APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)
