import shape_annotator.utils.i18n  # noqa: F401

"""CLI interface for shape_annotator project."""

import logging
import sys
from argparse import ArgumentDefaultsHelpFormatter, ArgumentParser
from gettext import gettext as _
from pathlib import Path

from shape_annotator.utils.misc import load_module

logger = logging.getLogger(__name__)

COMMANDS_DIR = Path(__file__).parent
VERSION_FILE = COMMANDS_DIR.parent / "VERSION"


def read_version() -> str:
    return VERSION_FILE.read_text().strip()


def add_subcommand(subparsers, name: str, submodule):
    subparser = subparsers.add_parser(name, help=submodule.COMMAND_DESCRIPTION)
    common_flags(subparser)
    handler = submodule.command(subparser)
    subparser.set_defaults(fn=handler)


def common_flags(parser):
    parser.add_argument(
        "-v",
        "--verbose",
        dest="verbose",
        action="store_true",
        help=_("Give more details about what is happening"),
    )  # noqa: E501
    parser.add_argument(
        "-V",
        "--version",
        dest="is_show_version",
        action="store_true",
        help=_("Print version and exit"),
    )  # noqa: E501


def discover_subcommands(commands_dir: Path = COMMANDS_DIR):
    """
    Yield (name, module) for every subcommand package in ``commands_dir``.

    A subcommand is a package exposing ``COMMAND_DESCRIPTION`` and
    ``command(subparser)``, which returns the handler.
    """
    for module in sorted(commands_dir.glob("*/__init__.py")):
        if "pycache" in str(module):
            continue
        module_name = module.parent.name
        yield module_name, load_module(
            module, module_name=f"shape_annotator.cli.{module_name}"
        )


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="shape_annotator", formatter_class=ArgumentDefaultsHelpFormatter
    )
    common_flags(parser)
    subparsers = parser.add_subparsers()
    for name, submodule in discover_subcommands():
        add_subcommand(subparsers, name, submodule)
    return parser


def main(argv=None):  # pragma: no cover
    """
    The main function executes on commands:
    `python -m shape_annotator` and `$ shape_annotator `.
    """
    logging.basicConfig()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.root.setLevel(logging.DEBUG)

    version = read_version()
    if args.is_show_version:
        print(version)
        sys.exit(0)
    logger.debug(f"{_('Starting')} shape_annotator v{version}")

    fn = args.__dict__.pop("fn", None)
    if fn is not None:
        fn(args)
    else:
        parser.print_help()
