import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, List
from urllib.parse import quote, urlsplit

from httperrors import CurlError, ErrorKind

logger = logging.getLogger(__name__)

ACCEPTED_PROTOCOLS = ("http", "https")
ACCEPTED_METHODS = ("GET", "DELETE", "PUT", "POST")
BODY_ALLOWED_METHODS = ("POST", "PUT")
HTTP_VERSION = "HTTP/1.1"
CRLF = "\r\n"
DEFAULT_PORTS = {"http": 80, "https": 443}
# Characters left as-is in the request path, everything else is percent-encoded
PATH_SAFE = "/%:@!$&'()*+,;=~"


def validate_method(method, log=logger):
    """Return the method to use, GET when none was given"""
    http_method = method or "GET"
    if http_method not in ACCEPTED_METHODS:
        log.error(f"method: {method} unsupported, supported methods {', '.join(ACCEPTED_METHODS)}")
        raise CurlError(ErrorKind.BAD_HTTP_METHOD, f"unsupported method {method!r}")
    return http_method


def validate_body(body, method, log=logger):
    # No method means GET, which never carries a body
    if body and method not in BODY_ALLOWED_METHODS:
        log.error(f"body provided for unsupported method type {method}")
        raise CurlError(ErrorKind.BODY_NOT_ALLOWED_METHOD, f"{method} does not accept a body")


def validate_scheme(scheme, log=logger):
    if scheme not in ACCEPTED_PROTOCOLS:
        log.error(f"only {', '.join(ACCEPTED_PROTOCOLS)} supported, {scheme or 'no scheme'} provided")
        raise CurlError(ErrorKind.UNRECOGNISABLE_PROTOCOL, f"unsupported scheme {scheme!r}")


def check_for_content_type(lines, log=logger):
    """Require a line starting with `Content-Type` (case-sensitive)"""
    if not any(line.startswith("Content-Type") for line in lines):
        log.error("No Content-Type header has been supplied")
        raise CurlError(ErrorKind.NO_CONTENT_TYPE_HEADER)


def check_for_body(body, log=logger):
    # POST and PUT are assumed to always need a body
    if not body:
        log.error("no body has been supplied")
        raise CurlError(ErrorKind.NO_BODY)


@dataclass(frozen=True)
class RequestSpec:
    """Everything needed to put one request on the wire"""
    host: str
    pathname: str
    scheme: str
    method: str
    body: Optional[str] = None
    headers: Tuple[str, ...] = ()
    port: Optional[int] = None

    @property
    def authority(self) -> str:
        """Host header value: IPv6 literals bracketed, port only when explicit"""
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{host}:{self.port}" if self.port is not None else host

    @classmethod
    def from_url(cls, url: str, method: Optional[str] = None, body: Optional[str] = None,
                 headers: Optional[Sequence[str]] = None, log=logger) -> "RequestSpec":
        """Validate CLI inputs against the URL and freeze them into a spec"""
        http_method = validate_method(method, log)
        validate_body(body, http_method, log)
        host, pathname, scheme, port = parse_url(url, log)
        return cls(host=host, pathname=pathname, scheme=scheme, method=http_method,
                   body=body, headers=tuple(headers or ()), port=port)


def parse_url(url, log=logger):
    """Split a URL into (host, pathname, scheme, explicit port or None).

    The path comes back percent-encoded and a port equal to the scheme
    default is dropped, so both can go on the wire unchanged.
    """
    parsed = urlsplit(url)
    validate_scheme(parsed.scheme, log)
    try:
        port = parsed.port
    except ValueError as e:
        log.error(f"invalid port in {url}: {e}")
        raise CurlError(ErrorKind.UNRECOGNISABLE_PROTOCOL, f"invalid port in {url!r}") from e
    if port == DEFAULT_PORTS[parsed.scheme]:
        port = None
    return parsed.hostname or "", quote(parsed.path, safe=PATH_SAFE) or "/", parsed.scheme, port


def build_request_lines(spec: RequestSpec, log=logger) -> List[str]:
    lines = [
        f"{spec.method} {spec.pathname} {HTTP_VERSION}",
        f"Host: {spec.authority}",
        "Accept: */*",
        "Connection: close",
        *spec.headers,
    ]
    if spec.method in BODY_ALLOWED_METHODS:
        check_for_body(spec.body, log)
        check_for_content_type(lines, log)
        # Lower-case "content" is part of the wire format, fixtures match it byte for byte
        lines += [f"content-Length: {len(spec.body.encode('utf-8'))}", "", spec.body]
    return lines


def serialize_request(lines: Sequence[str], log=logger) -> bytes:
    text = CRLF.join(lines) + CRLF + CRLF
    log.debug(text)
    return text.encode("utf-8")


def build_request(spec: RequestSpec, log=logger) -> bytes:
    return serialize_request(build_request_lines(spec, log), log)
