import uvicorn

from roomspace.configs.setup import create_app
from roomspace.configs.settings import settings

app = create_app()


if __name__ == "__main__":
    uvicorn.run("roomspace.main:app", host=settings.app_host, port=settings.app_port, reload=settings.APP_DEBUG)
