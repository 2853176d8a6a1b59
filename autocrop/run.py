"""
Scan Auto-Crop: entry point
Starts the FastAPI server and opens the browser.
"""

import logging
import os
import threading
import time
import webbrowser

import uvicorn

HOST = os.environ.get("AUTOCROP_HOST", "127.0.0.1")
PORT = int(os.environ.get("AUTOCROP_PORT", "8000"))


def open_browser():
    """Open the API docs after a short delay to let the server start."""
    time.sleep(1.5)
    webbrowser.open(f"http://{HOST}:{PORT}/docs")


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    print(f"[Scan Auto-Crop] Starting server at http://{HOST}:{PORT}")
    print("[Scan Auto-Crop] Opening browser...")

    # Open browser in background thread
    threading.Thread(target=open_browser, daemon=True).start()

    uvicorn.run("autocrop.server:app", host=HOST, port=PORT, reload=False)


if __name__ == "__main__":
    main()
