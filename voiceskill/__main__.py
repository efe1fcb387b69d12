import sys

from voiceskill.presentation.cli import main

if __name__ == "__main__":
    sys.exit(main())
