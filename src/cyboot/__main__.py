from cyboot.cli import main

raise SystemExit(main())
