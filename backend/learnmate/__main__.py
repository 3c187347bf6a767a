import uvicorn

from learnmate.config import settings


if __name__ == "__main__":
    uvicorn.run("learnmate.main:app", host=settings.host, port=settings.port, reload=settings.debug)
