"""Allow ``python -m currex`` to run one refresh cycle."""

from currex.app import main

raise SystemExit(main())
