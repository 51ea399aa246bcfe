"""Run with: python -m daily_dose"""

import uvicorn

from daily_dose.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "daily_dose.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
