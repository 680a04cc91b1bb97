"""Wake the provisioning daemon by hand (same request the panel sends after a commit)."""
import sys

from hostpanel.logging_config import setup_logging
from hostpanel.services.daemon import DaemonNotifier


def main() -> int:
    setup_logging()
    hint = DaemonNotifier().notify()
    print(hint.detail)
    return 0 if hint else 1


if __name__ == "__main__":
    sys.exit(main())
