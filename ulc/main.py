"""Runs ulc programs from a file, stdin or the command line, or starts the interactive shell. Also uses the error
handling context manager. Called from the ulc console script and from `python -m ulc`.
"""

import argparse
import sys

from ulc.lang.error import ErrorHandler
from ulc.lang.session import Session
from ulc.lang.shell import Shell

RECURSION_LIMIT = 10000


def build_parser():
    parser = argparse.ArgumentParser(prog="ulc", description="Interpreter for the ulc lambda language.")
    parser.add_argument("file", help="file to interpret and run, '-' for stdin (if empty, reads piped stdin or goes "
                                     "to command-line mode)", nargs="?")
    parser.add_argument("-e", "--eval", metavar="CODE", help="evaluate CODE instead of a file")
    parser.add_argument("-p", "--print-result", action="store_true", help="print the value of the program")
    parser.add_argument("-v", "--verbose", action="store_true", help="trace the parsed program and its value")
    parser.add_argument("--recursion-limit", type=int, default=RECURSION_LIMIT,
                        help=f"host recursion limit, bounds ulc call depth (default: {RECURSION_LIMIT})")
    return parser


def main(argv=None):
    """Runs ulc interpreter. Called from ulc executable script."""
    args = build_parser().parse_args(argv)

    with ErrorHandler(verbose=args.verbose) as error_handler:
        sys.setrecursionlimit(args.recursion_limit)

        if args.eval is not None:
            if args.file is not None:
                error_handler.warn("'{}' ignored, running --eval code instead", args.file)
            sess = Session(error_handler, Session.EVAL_FILE, source=args.eval)
        elif args.file is not None:
            sess = Session(error_handler, args.file)
        elif not sys.stdin.isatty():
            sess = Session(error_handler, Session.STDIN_FILE)
        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()
            return 0

        sess.run()
        if args.print_result:
            print(sess.pop())

    return 0
