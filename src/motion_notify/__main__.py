import sys

from motion_notify.presentation.cli import main

if __name__ == '__main__':
    sys.exit(main())
