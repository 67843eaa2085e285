"""Command-line interface."""
from qedkit.main import main

if __name__ == "__main__":
    main()
