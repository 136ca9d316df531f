from warboard.cli import main

raise SystemExit(main())
