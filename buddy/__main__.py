"""Allow ``python -m buddy``."""
from buddy.cli import main

if __name__ == "__main__":
    main()
