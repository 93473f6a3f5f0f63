import uvicorn

from videohub.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "videohub.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_local,
    )
