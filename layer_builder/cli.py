"""
Command-line entry point.

Usage:
  layer-builder [-c layers.json] [--only NAME ...] [-v]
  python -m layer_builder [-c layers.json] [--only NAME ...] [-v]

Exit status is 0 when every layer was built, 1 when any layer failed and 2
when the layer document itself is invalid.
"""

import sys
import logging
import argparse

from . import config as DEFAULTS
from .errors import ConfigurationError
from .pipeline import build_layers
from .settings import load_document

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_LAYER_FAILED = 1
EXIT_INVALID_DOCUMENT = 2


def _parser():
    parser = argparse.ArgumentParser(
        prog='layer-builder',
        description='Render map layers (regions, contours, hillshade, tanaka '
                    'relief) from classification rasters and heightmaps')
    parser.add_argument('-c', '--config', default=DEFAULTS.DEFAULT_CONFIG_FILE,
                        help='Layer document (default: {})'.format(
                            DEFAULTS.DEFAULT_CONFIG_FILE))
    parser.add_argument('--only', nargs='+', metavar='NAME',
                        help='Build only the named layers')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log debug output')
    return parser


def main(argv=None):
    args = _parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s')

    try:
        specs = load_document(args.config)
    except ConfigurationError as e:
        print("Invalid layer document {}: {}".format(args.config, e))
        return EXIT_INVALID_DOCUMENT

    only = None
    if args.only:
        only = set(args.only)
        unknown = sorted(only - set(spec.name for spec in specs))
        if unknown:
            print("Unknown layer name(s): {}".format(', '.join(unknown)))
            return EXIT_INVALID_DOCUMENT

    results = build_layers(specs, only)
    for result in results:
        if result.ok:
            print("  OK    {:30s} -> {}".format(result.name, result.output))
        else:
            print("  FAIL  {:30s} -- {}".format(result.name, result.error))

    failed = [r for r in results if not r.ok]
    print("\n{} built, {} failed".format(len(results) - len(failed), len(failed)))
    return EXIT_LAYER_FAILED if failed else EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
