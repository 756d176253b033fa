"""Module entrypoint for ``python -m trypick``.

Module-mode execution behaves exactly like the ``trypick`` console script.
All argument parsing happens in ``trypick.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
