"""Entry point for python -m nca_signer."""

from .cli import main

if __name__ == "__main__":
    main()
