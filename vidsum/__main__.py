from vidsum.cli.main import main

raise SystemExit(main())
