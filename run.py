import uvicorn

from emulation.config import settings

if __name__ == "__main__":
    uvicorn.run("emulation.main:create_app", factory=True, host=settings.HOST, port=settings.PORT)
