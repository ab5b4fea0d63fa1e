from brun.cli import main

raise SystemExit(main())
