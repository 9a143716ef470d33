# SPDX-License-Identifier: MIT

from jotter.initialize import initialize
from jotter.terminal.app import run


def main() -> None:
    initialize()
    run()


if __name__ == "__main__":
    main()
