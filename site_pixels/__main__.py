"""Allow ``python -m site_pixels``."""

from site_pixels.cli import main

raise SystemExit(main())
