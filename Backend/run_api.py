"""Launch the upload relay with Backend/src on the Python path."""
import sys
import os

# Add Backend/src to path
backend_src = os.path.join(os.path.dirname(__file__), "src")
sys.path.insert(0, backend_src)

if __name__ == "__main__":
    import uvicorn
    import config

    # Temp uploads and the sqlite database live here
    for directory in (config.UPLOAD_DIR, config.OUTPUT_DIR):
        os.makedirs(directory, exist_ok=True)

    uvicorn.run(
        "api.main:app",
        host=config.HOST,
        port=config.PORT,
        reload="--reload" in sys.argv[1:],
        log_level=config.LOG_LEVEL.lower(),
    )
