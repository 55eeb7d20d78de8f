from dotenv import load_dotenv

# Load env variables FIRST, before importing modules that read settings
load_dotenv()

import uvicorn

from app.core.config import settings

if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT)
