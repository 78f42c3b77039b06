import sys
import os

# Ensure src layout is on path when running directly from repo root.
# .env is picked up by quoridor_engine.config via python-dotenv.
ROOT = os.path.dirname(os.path.abspath(__file__))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

if "--console" in sys.argv:
    sys.argv.remove("--console")
    from quoridor_engine.render.console import main
else:
    from quoridor_engine.render.pygame_renderer import main

if __name__ == "__main__":
    main()
