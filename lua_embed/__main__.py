from lua_embed.cli.main import main

raise SystemExit(main())
