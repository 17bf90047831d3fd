"""Security hardening headers applied to every response.

Sets the same default header set as the helmet middleware for Express:
CSP, cross-origin isolation policies, HSTS, nosniff, frame and referrer
policies. Headers already set by a view are left untouched.

Usage:
    from medi8_relay.middleware.security_headers import init_security_headers
    init_security_headers(app)
"""
from __future__ import annotations

from flask import Flask

SECURITY_HEADERS: dict[str, str] = {
    "Content-Security-Policy": (
        "default-src 'self';base-uri 'self';font-src 'self' https: data:;"
        "form-action 'self';frame-ancestors 'self';img-src 'self' data:;"
        "object-src 'none';script-src 'self';script-src-attr 'none';"
        "style-src 'self' https: 'unsafe-inline';upgrade-insecure-requests"
    ),
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


def init_security_headers(app: Flask) -> None:
    """Register an after_request hook adding SECURITY_HEADERS.

    Args:
        app: Flask application instance.
    """

    @app.after_request
    def add_security_headers(response):
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response
