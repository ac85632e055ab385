# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
"""Enable `python -m treea11y` invocation."""
from treea11y.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
