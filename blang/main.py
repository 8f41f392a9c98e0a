"""Runs blang source files, source strings, or the interactive shell. Also uses error handling context manager.
Installed as the `blang` console script.
"""

import argparse
import os
import sys

from blang.core.objects import NULL
from blang.lang.error import ErrorHandler
from blang.lang.session import Session
from blang.lang.shell import Shell


def build_parser():
    parser = argparse.ArgumentParser(prog="blang", description="Interpreter for the blang language.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("-c", "--command", help="run SOURCE instead of a file", metavar="SOURCE")
    parser.add_argument("--ast", action="store_true", help="print the parsed syntax tree instead of evaluating")
    parser.add_argument("--no-color", action="store_true", help="disable colored output")
    parser.add_argument("--recursion-limit", type=int, metavar="N",
                        help="raise Python's recursion limit above the default of 10000 (for deeper blang recursion)")
    return parser


def main(argv=None):
    """Runs blang interpreter. Called from the blang console script."""
    args = build_parser().parse_args(argv)

    if args.no_color:
        os.environ["NO_COLOR"] = "1"  # honored by termcolor
    if args.recursion_limit is not None:
        sys.setrecursionlimit(args.recursion_limit)

    with ErrorHandler() as error_handler:
        if args.file is None and args.command is None:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True), show_ast=args.ast).cmdloop()
            return

        if args.command is not None:
            sess = Session(error_handler, Session.STR_FILE, cmd_line=False, source=args.command)
        else:
            sess = Session(error_handler, args.file, cmd_line=False)

        if args.ast:
            for __, __, program in sess.to_exec:
                print(program.display())
            return

        sess.run()

        for result in sess.results:
            if result is not NULL:
                print(result.inspect())


if __name__ == "__main__":
    main()
