from tmux_marquee.cli import main

raise SystemExit(main())
