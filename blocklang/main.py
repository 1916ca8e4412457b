"""Uses the blocklang implementation to interpret source files or run in command-line mode. Also uses the error handling
context manager. Installed as the blocklang console script.
"""

import argparse

from blocklang.lang.env import Environment
from blocklang.lang.error import ErrorHandler
from blocklang.lang.session import Session
from blocklang.lang.shell import Shell


def main(argv=None):
    """Runs the blocklang interpreter."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="blocklang")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--tree", action="store_true",
                            help="print the concrete syntax tree of the file instead of evaluating it")
        parser.add_argument("--max-depth", type=int, default=Environment.MAX_DEPTH,
                            help="maximum nesting of blocks and function calls (default: %(default)s)")
        args = parser.parse_args(argv)

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, max_depth=args.max_depth)

            if args.tree:
                print(Session.tree(sess.source.rstrip()))
                return

            sess.add(sess.source)
            sess.run()

            for result in sess.results:
                print(result)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, max_depth=args.max_depth)).cmdloop()


if __name__ == "__main__":
    main()
