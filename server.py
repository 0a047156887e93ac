"""GoalWatch web entry point."""
import uvicorn

from goalwatch.config.settings import settings
from goalwatch.web.app import create_app

app = create_app(settings)

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
