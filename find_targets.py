#!/usr/bin/env python3
"""
findtarget command line.

    find_targets.py -t template.yaml [-e] [-s] [-v] [--proxy URL] [--timeout N]

Targets go to stdout, one per line. Progress and errors go to stderr so the
output can be piped straight into other tools.

Author: findtarget Team
License: MIT
"""

import argparse
import logging
import sys

from findtarget import __version__
from findtarget.config import load_credentials, load_template, validate_proxy
from findtarget.errors import ConfigError
from findtarget.runner import run

logger = logging.getLogger('findtarget')

BANNER = r"""
  _____ _           _   _____                    _
 |  ___(_)_ __   __| | |_   _|_ _ _ __ __ _  ___| |_
 | |_  | | '_ \ / _' |   | |/ _' | '__/ _' |/ _ \ __|
 |  _| | | | | | (_| |   | | (_| | | | (_| |  __/ |_
 |_|   |_|_| |_|\__,_|   |_|\__,_|_|  \__, |\___|\__|
                                       |___/
"""


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Collect in-scope targets from Bugcrowd and HackerOne programs')
    parser.add_argument('-t', '--template', required=True,
                        help='Path to the template YAML file')
    parser.add_argument('-e', '--env', action='store_true',
                        help='Load .env file from current directory (loaded anyway when present)')
    parser.add_argument('-s', '--silent', action='store_true',
                        help='No banner, only warnings and errors on stderr')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Debug logging')
    parser.add_argument('--proxy', default=None,
                        help='SOCKS5 proxy URL, overrides the template (e.g. socks5://127.0.0.1:9050)')
    parser.add_argument('--timeout', type=float, default=None,
                        help='Per-request timeout in seconds (default: 30)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser.parse_args(argv)


def setup_logging(silent=False, verbose=False):
    level = logging.INFO
    if silent:
        level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    logging.basicConfig(level=level, format='[%(levelname)s] %(message)s', stream=sys.stderr)


def print_header():
    """Print the banner on stderr."""
    print(BANNER, file=sys.stderr)
    print(f'\t\t   v{__version__}\n', file=sys.stderr)


def main(argv=None):
    """
    Main entry point.

    Returns:
        0 on success, 1 on a configuration or platform error, 130 on Ctrl+C
    """
    args = parse_arguments(argv)
    setup_logging(args.silent, args.verbose)

    if not args.silent:
        print_header()

    try:
        config = load_template(args.template)
        if args.proxy is not None:
            config.proxy = validate_proxy(args.proxy) if args.proxy else ''
        if args.timeout is not None:
            if args.timeout <= 0:
                raise ConfigError('timeout must be greater than zero')
            config.timeout = args.timeout

        credentials = load_credentials(env_flag=args.env, config=config)
        result = run(config, credentials)

    except ConfigError as e:
        logger.error(f'Error: {e}')
        return 1
    except KeyboardInterrupt:
        logger.warning('Interrupted by user (Ctrl+C)')
        return 130

    return 0 if result.ok else 1


if __name__ == '__main__':
    sys.exit(main())
