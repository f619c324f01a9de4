"""CLI entry point and argument parsing."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from fbmsggen.internals.version import print_banner


def _int_arg(text: str) -> int:
    from fbmsggen.semantics.facilities import parse_int

    try:
        return parse_int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None


def main(argv: list[str] | None = None) -> int:
    """Generator entry point."""
    print_banner()

    ap = argparse.ArgumentParser(
        prog="fbmsggen",
        description="Generate the Go status code -> message table from Firebird message definitions",
    )

    ap.add_argument("inputs", nargs="*", metavar="INPUT",
                    help="Message headers (e.g. firebird/impl/msg/all.h) or .toml data files")
    ap.add_argument("--version", action="store_true", help="Show version and exit")
    ap.add_argument("-o", "--out", metavar="OUT",
                    help="Output Go file (default: errmsgs.go)")
    ap.add_argument("-I", "--include-dir", action="append", default=[], metavar="DIR",
                    help="Additional directory searched for #include files (repeatable)")
    ap.add_argument("--config", metavar="FILE",
                    help="Configuration file (default: ./fbmsggen.toml if present)")
    ap.add_argument("--package", help="Go package name of the generated file")
    ap.add_argument("--variable", help="Name of the generated map variable")
    ap.add_argument(
        "--all-macros",
        action="store_true",
        help="Also emit FB_IMPL_MSG_SYMBOL and FB_IMPL_MSG_NO_SYMBOL definitions",
    )
    ap.add_argument("--dump-parse", action="store_true", help="Print raw Lark tree of each header")
    ap.add_argument("--decode", metavar="CODE", type=_int_arg,
                    help="Print the facility and code packed in a status code and exit")
    ap.add_argument("--encode", nargs=2, metavar=("FACILITY", "NUMBER"),
                    help="Print the status code for a facility (name or number) and message number and exit")
    args = ap.parse_args(argv)

    if args.version:
        return 0

    from fbmsggen.backend import status_code as sc
    from fbmsggen.compiler.config import ConfigError, GeneratorConfig, find_config, load_config
    from fbmsggen.compiler.pipeline import describe_code, generate
    from fbmsggen.internals import errors as er
    from fbmsggen.internals.report import Reporter
    from fbmsggen.semantics.facilities import FacilityTable
    from fbmsggen.semantics.records import MACRO_KINDS

    reporter = Reporter(filename="fbmsggen")

    config_path = Path(args.config) if args.config else find_config()
    try:
        config = load_config(config_path) if config_path else GeneratorConfig()
    except ConfigError as e:
        e.report(reporter)
        reporter.print()
        return 2

    facilities = FacilityTable()
    facilities.update(config.facilities)

    if args.decode is not None:
        print(describe_code(args.decode, facilities))
        return 0

    if args.encode:
        facility_arg, number_arg = args.encode
        facility = facilities.resolve(facility_arg)
        if facility is None:
            er.emit(reporter, er.ERR.GE1002, None, facility=facility_arg)
            reporter.print()
            return 2
        try:
            number = _int_arg(number_arg)
        except argparse.ArgumentTypeError as e:
            print(f"error: {e}", file=sys.stderr)
            return 2
        print(describe_code(sc.encode(facility, number), facilities))
        return 0

    # Command line overrides the configuration file
    if args.inputs:
        config.inputs = [Path(p) for p in args.inputs]
    if args.include_dir:
        config.include_dirs = [Path(d) for d in args.include_dir] + config.include_dirs
    if args.out:
        config.output = Path(args.out)
    if args.package:
        config.package = args.package
    if args.variable:
        config.variable = args.variable
    if args.all_macros:
        config.macros = list(MACRO_KINDS)

    try:
        config.validate()
    except ConfigError as e:
        e.report(reporter)
        reporter.print()
        return 2

    result = generate(config, reporter, dump_parse=args.dump_parse)
    reporter.print()
    return result


if __name__ == "__main__":
    raise SystemExit(main())
