from polyexpand.cli import main

raise SystemExit(main())
