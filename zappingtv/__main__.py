"""Allow running ZappingTV with ``python -m zappingtv``."""

import sys

from zappingtv.main import main

sys.exit(main())
