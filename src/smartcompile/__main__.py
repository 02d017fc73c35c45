"""Allow ``python -m smartcompile``."""

from .app import main

raise SystemExit(main())
