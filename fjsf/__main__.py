"""Module entrypoint for ``python -m fjsf``.

This keeps module-mode execution behavior identical to the console script.
All argument parsing and runtime setup happen in ``fjsf.cli``.
"""

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
