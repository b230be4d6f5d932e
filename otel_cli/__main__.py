from otel_cli.cli import main

raise SystemExit(main())
