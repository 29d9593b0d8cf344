from npm_runner.cli import main

raise SystemExit(main())
