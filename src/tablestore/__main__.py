from tablestore.cli import main

raise SystemExit(main())
