from fbmsggen.compiler.cli import main

raise SystemExit(main())
