import argparse
import logging
import sys

from elnames.config import OPTION_KEYWORDS, AUTOLOAD_MARKER
from elnames.errors import ElnamesError
from elnames.namespacer import Namespacer

LOG = logging.getLogger("elnames")

FLAG_OPTIONS = sorted(k for k, (_, kind) in OPTION_KEYWORDS.items() if kind == "flag")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="elnames", description="Expand define-namespace forms in an Emacs Lisp file")
    parser.add_argument("file", type=argparse.FileType("r"), help="Source file ('-' for stdin)")
    parser.add_argument("--prefix", type=str, default=None,
                        help="Treat the whole file as the body of one namespace with this prefix")
    parser.add_argument("--option", action="append", default=[], choices=[k[1:] for k in FLAG_OPTIONS],
                        metavar="NAME", help="Flag option for --prefix (let-vars, global, ...); repeatable")
    parser.add_argument("--protection", type=str, default=None, help="Protection marker for --prefix")
    parser.add_argument("--autoload", action="store_true",
                        help=f"Only emit forms marked with {AUTOLOAD_MARKER}")
    parser.add_argument("--width", type=int, default=80, help="Line width for the printed output")
    parser.add_argument("--color", action="store_true", help="Colour namespaced symbols")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    options = None
    if args.prefix is not None:
        options = {name: True for name in args.option}
        if args.protection is not None:
            options["protection"] = args.protection
        if args.verbose:
            options["verbose"] = True
    elif args.option or args.protection:
        LOG.warning("--option and --protection only apply together with --prefix")

    namespacer = Namespacer(autoload=args.autoload)
    try:
        output = namespacer.rewrite_source(args.file.read(), args.prefix, options,
                                           width=args.width, color=args.color)
    except ElnamesError as e:
        LOG.error("%s", e)
        return 1
    finally:
        args.file.close()
    sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
