from __future__ import annotations

import argparse
import logging

from dissect.bplist.bplist import load
from dissect.bplist.exceptions import Error
from dissect.bplist.keyedarchive import iter_strings
from dissect.bplist.value import pformat


def main() -> None:
    parser = argparse.ArgumentParser(description="Dump the contents of a binary plist file")
    parser.add_argument("file", type=argparse.FileType("rb"), help="binary plist file to dump")
    parser.add_argument(
        "-s",
        "--strings",
        metavar="CLASSNAME",
        help="only print the NS.string value of every NSKeyedArchiver object of this class",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    with args.file as fh:
        try:
            root = load(fh)
            if args.strings:
                lines = list(iter_strings(root, args.strings))
            else:
                lines = [pformat(root)]
        except Error as e:
            parser.exit(1, f"{e}\n")

    for line in lines:
        print(line)


if __name__ == "__main__":
    main()
