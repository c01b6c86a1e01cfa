#!/usr/bin/env python3

import asyncio, logging, argparse, sys

from httpconnect import ResponseHandler, open_connection, port_for_scheme
from httprequest import RequestSpec, build_request

__version__ = "1.0.0"

logger = logging.getLogger("httpcurl")


async def curl(url, method=None, body=None, headers=None, log=logger):
    """Build the request for `url`, send it and log the response as it streams in"""
    spec = RequestSpec.from_url(url, method, body, headers, log)
    port = spec.port if spec.port is not None else port_for_scheme(spec.scheme)
    request = build_request(spec, log)
    return await open_connection(spec.host, port, request, ResponseHandler(log), log)


def build_parser():
    parser = argparse.ArgumentParser(prog="httpcurl", description="Minimal curl over a raw TCP socket")
    parser.add_argument('url', help='URL to request')
    parser.add_argument('-X', '--method', help='HTTP method (default GET)')
    parser.add_argument('-d', '--body', help='Request payload, POST and PUT only')
    parser.add_argument('-H', '--header', action='extend', nargs='+', default=[],
                        help='Custom header lines, sent verbatim')
    parser.add_argument('-v', '--verbose', action='store_true', help='Also show request and response headers')
    parser.add_argument('-V', '--version', action='version', version=f"%(prog)s {__version__}")
    return parser


def setup_logging(verbose=False):
    """Response text goes to stdout, errors to stderr"""
    out = logging.StreamHandler(sys.stdout)
    out.addFilter(lambda record: record.levelno < logging.ERROR)
    err = logging.StreamHandler(sys.stderr)
    err.setLevel(logging.ERROR)
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format='%(message)s',
                        handlers=[out, err], force=True)


def run(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    asyncio.run(curl(args.url, args.method, args.body, args.header))


if __name__ == "__main__":
    run()
