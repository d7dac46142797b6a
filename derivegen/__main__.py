from derivegen.compiler.cli import main

raise SystemExit(main())
