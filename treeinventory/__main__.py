"""Module entrypoint for ``python -m treeinventory``.

This keeps module-mode execution behavior identical to the console script.
All argument parsing and run setup happen in ``treeinventory.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
