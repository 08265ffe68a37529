import uvicorn

from reviewdisplay.core.config import settings


def main() -> None:
    uvicorn.run("reviewdisplay.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
