# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 ncserial developers

"""
ncserial command line interface.

Commands:
    - serialize: Convert the variables of a NetCDF file into binary records
    - inspect: Print the header of a variable record
    - dims: Print the contents of a dimension file
"""

import argparse
import logging
import sys
from typing import List, Optional

from ncserial.codec.blockio import read_block
from ncserial.codec.dimension_file import AXIS_TAGS, read_dimension_file
from ncserial.codec.flags import unpack_flags
from ncserial.codec.layout import HEADER_BYTES
from ncserial.codec.variable_record import unpack_header
from ncserial.core.config import SerializerConfig
from ncserial.core.exceptions import ConfigurationError, NCSerialError
from ncserial.io.serializer import NetcdfSerializer

try:
    from ncserial.ncserial_version import __version__
except ImportError:
    __version__ = "0+unknown"

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] - %(message)s'

logger = logging.getLogger(__name__)


class CLIParser:
    """
    Main CLI parser.

    Attributes:
        common_parser: Parent parser with global options (--config, --debug)
        parser: Main argument parser with all subcommands registered
    """

    def __init__(self):
        self.common_parser = self._create_common_parser()
        self.parser = self._create_parser()

    def _create_common_parser(self) -> argparse.ArgumentParser:
        """Create a parent parser with common arguments."""
        parser = argparse.ArgumentParser(add_help=False)
        parser.add_argument('--config', type=str,
                            help='Path to a YAML serializer configuration file')
        parser.add_argument('--debug', action='store_true',
                            help='Enable debug output')
        return parser

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog='ncserial',
            description='ncserial - flat binary records for gridded NetCDF variables',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  ncserial serialize GEOSFP.20230101.A3dyn.05x0625.nc4 --category A3dyn
  ncserial serialize input.nc -o 'out/input.{name}.bin' -v U V --verify
  ncserial inspect out/input.U.bin
  ncserial dims out/input.DIMS.bin
"""
        )
        parser.add_argument('--version', action='version',
                            version=f'ncserial {__version__}')

        subparsers = parser.add_subparsers(
            dest='command',
            required=True,
            help='Command',
            metavar='<command>'
        )

        serialize_parser = subparsers.add_parser(
            'serialize',
            help='Serialize variables of a NetCDF file',
            parents=[self.common_parser]
        )
        serialize_parser.add_argument('input', metavar='INPUT',
                                      help='NetCDF file to serialize')
        serialize_parser.add_argument('-o', '--output', dest='output_pattern',
                                      help='Output path pattern containing {name}')
        serialize_parser.add_argument('-v', '--variables', nargs='+', metavar='VAR',
                                      help='Variables to serialize')
        serialize_parser.add_argument('-c', '--category',
                                      help='File category whose configured variable list is used')
        serialize_parser.add_argument('--verify', action='store_true', default=None,
                                      help='Read every record back and compare with the source')
        serialize_parser.set_defaults(func=run_serialize)

        inspect_parser = subparsers.add_parser(
            'inspect',
            help='Print the header of a variable record',
            parents=[self.common_parser]
        )
        inspect_parser.add_argument('record', metavar='FILE')
        inspect_parser.set_defaults(func=run_inspect)

        dims_parser = subparsers.add_parser(
            'dims',
            help='Print the contents of a dimension file',
            parents=[self.common_parser]
        )
        dims_parser.add_argument('record', metavar='FILE')
        dims_parser.set_defaults(func=run_dims)

        return parser

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        return self.parser.parse_args(args)


def _load_config(args: argparse.Namespace) -> SerializerConfig:
    overrides = {}
    if getattr(args, 'output_pattern', None):
        overrides['OUTPUT_PATTERN'] = args.output_pattern
    if getattr(args, 'verify', None):
        overrides['VERIFY'] = True
    if args.config:
        return SerializerConfig.from_file(args.config, overrides=overrides)
    return SerializerConfig.from_dict(overrides)


def run_serialize(args: argparse.Namespace) -> int:
    config = _load_config(args)
    serializer = NetcdfSerializer(args.input, config=config)
    summary = serializer.run(variables=args.variables, category=args.category)
    if summary.matches and not summary.all_match:
        return 1
    return 0


def run_inspect(args: argparse.Namespace) -> int:
    flags, name, shape = unpack_header(read_block(args.record, HEADER_BYTES))
    bits = ''.join('1' if b else '0' for b in reversed(unpack_flags(flags)))
    print(f"name:   '{name}'")
    print(f"flags:  0x{flags:02X} ({bits})")
    print(f"shape:  {list(shape)}")
    print(f"rank:   {shape.resolved_rank}")
    return 0


def run_dims(args: argparse.Namespace) -> int:
    dims = read_dimension_file(args.record)
    for tag, present in zip(AXIS_TAGS, dims.presence):
        print(f"{tag:<7} {'present' if present else 'missing'}")
    if len(dims.times):
        print(f"time:   {len(dims.times)} steps, {dims.timestamps[0]} to {dims.timestamps[-1]}")
    if dims.level_count is not None:
        print(f"levels: {dims.level_count}")
    print(f"lat:    {len(dims.lats)} values")
    print(f"lon:    {len(dims.lons)} values")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    cli = CLIParser()
    try:
        args = cli.parse_args(argv)
    except SystemExit as exc:
        return 2 if exc.code else 0

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format=LOG_FORMAT,
    )

    try:
        return args.func(args)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 2
    except NCSerialError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == '__main__':
    sys.exit(main())
