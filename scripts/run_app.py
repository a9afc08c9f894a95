#!/usr/bin/env python3
"""
Actor features test app entrypoint - serves the app to the sidecar and the test driver.
"""

import sys
from pathlib import Path

# Load environment variables from .env file first
import dotenv
dotenv.load_dotenv()

# Add project root to path for imports (actorfeatures/ and util/ are both in project root)
sys.path.insert(0, str(Path(__file__).parent.parent))

def main():
    """Run the app until a termination signal is received."""
    try:
        import uvicorn
        from actorfeatures.core.config import APP_PORT
        from actorfeatures.api.main import app
        from util.logging import logger

        logger.info(f"Actor App - listening on http://localhost:{APP_PORT}")
        # uvicorn handles SIGTERM/SIGINT and shuts down gracefully
        uvicorn.run(app, host="0.0.0.0", port=APP_PORT, timeout_graceful_shutdown=1)
        logger.info("Server shut down")
        return 0
    except KeyboardInterrupt:
        print("\nℹ️  Actor app interrupted")
        return 0
    except Exception as e:
        print(f"❌ Actor app startup failed: {e}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
