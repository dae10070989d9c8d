"""Allow `python -m planeframe`."""
from planeframe.main import main

if __name__ == "__main__":
    main()
