"""Allow ``python -m showroom``."""

from .cli import main

if __name__ == "__main__":
    main()
