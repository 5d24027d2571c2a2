"""Module entrypoint for ``python -m lazyrepos``.

All argument parsing and runtime setup happen in ``lazyrepos.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
