"""서버 실행 스크립트

사용법:
    python run_server.py
"""

import uvicorn

from backend.app.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "backend.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
